"""Receipt schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ReceiptLineIn(BaseModel):
    """A normalized receipt line from the OCR pipeline."""

    name: str = Field(..., min_length=1, max_length=255)
    quantity: str | None = Field(None, max_length=50)
    unit: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)


class ReceiptIngestRequest(BaseModel):
    """Normalized receipt handed over for purchase recording."""

    purchase_date: date | None = None  # Defaults to today
    store_name: str | None = Field(None, max_length=255)
    items: list[ReceiptLineIn] = Field(..., min_length=1)


class ReceiptItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    normalized_name: str
    quantity: str | None
    unit: str | None
    category: str | None


class ReceiptResponse(BaseModel):
    """Receipt with its recording status."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    store_name: str | None
    purchase_date: date
    status: str
    error_message: str | None = None
    items_recorded: int | None = None
    processed_at: datetime | None = None
    created_at: datetime
    items: list[ReceiptItemResponse]
