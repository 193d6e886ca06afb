"""Pydantic schemas for API requests and responses."""

from src.schemas.pantry import (
    CupboardStatsResponse,
    ManualItemCreate,
    PantryItemResponse,
    PantryItemUpdate,
    ShoppingListAddRequest,
)
from src.schemas.receipt import ReceiptIngestRequest, ReceiptResponse
from src.schemas.shopping import ShoppingListItemResponse, ShoppingListResponse

__all__ = [
    "PantryItemResponse",
    "PantryItemUpdate",
    "ManualItemCreate",
    "CupboardStatsResponse",
    "ShoppingListAddRequest",
    "ReceiptIngestRequest",
    "ReceiptResponse",
    "ShoppingListItemResponse",
    "ShoppingListResponse",
]
