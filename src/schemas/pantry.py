"""Pantry (cupboard) schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ItemSource, LifespanSource


class ConfidenceFactorsResponse(BaseModel):
    """How a stock confidence was derived."""

    model_config = ConfigDict(from_attributes=True)

    effective_lifespan_days: int
    lifespan_source: LifespanSource
    base_confidence: float
    purchase_count: int | None = None
    effective_date: date | None = None


class PantryItemResponse(BaseModel):
    """Pantry item with its stock confidence."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_name: str
    last_purchased: date
    quantity: str
    unit: str
    category: str | None
    stock_confidence: float = Field(..., ge=0.0, le=1.0)
    estimated_deplete_date: date | None
    days_since_purchase: int = Field(..., ge=0)
    source: ItemSource
    is_depleted: bool
    user_override_date: date | None = None
    confidence_factors: ConfidenceFactorsResponse


class ManualItemCreate(BaseModel):
    """Add an item to the cupboard by hand."""

    item_name: str = Field(..., min_length=1, max_length=255)
    quantity: str | None = Field(None, max_length=50)
    unit: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)
    shelf_life_days: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)


class PantryItemUpdate(BaseModel):
    """Update a pantry item. Receipt items only honour quantity and shelf_life_days."""

    quantity: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)
    shelf_life_days: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)


class CupboardStatsResponse(BaseModel):
    """Cupboard confidence buckets."""

    model_config = ConfigDict(from_attributes=True)

    total_items: int
    in_stock: int
    running_low: int
    needs_restock: int
    last_stocked: date | None


class CupboardCountResponse(BaseModel):
    count: int


class ShoppingListAddRequest(BaseModel):
    """Add a cupboard item to the active shopping list."""

    item_name: str = Field(..., min_length=1, max_length=255)
    quantity: str | None = Field(None, max_length=50)
    unit: str | None = Field(None, max_length=50)
