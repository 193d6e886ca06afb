"""Shopping list schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ShoppingListItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shopping_list_id: int
    name: str
    quantity: str | None
    unit: str | None
    notes: str | None
    checked: bool
    checked_at: datetime | None
    sort_order: int


class ShoppingListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    is_active: bool
    items: list[ShoppingListItemResponse]


class ListStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_items: int
    checked_items: int
    completion_percent: int


class PurchaseRecordResponse(BaseModel):
    """Purchase history after a checkout."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_name: str
    last_purchased: date
    purchase_count: int
    avg_quantity: str | None
    avg_frequency_days: int | None
    estimated_deplete_date: date | None


class SuggestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_name: str
    last_purchased: date
    avg_frequency_days: int
    days_since_last_purchase: int
    suggested_quantity: str | None


class SuggestionAddRequest(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=255)


class CheckoutResponse(BaseModel):
    purchased: list[PurchaseRecordResponse]
