"""Repositories over the pantry stores."""

from src.repositories.cupboard_items import CupboardItemRepository
from src.repositories.purchase_history import PurchaseHistoryRepository
from src.repositories.receipts import ReceiptItemRepository, ReceiptRepository
from src.repositories.shopping_lists import ShoppingListRepository

__all__ = [
    "PurchaseHistoryRepository",
    "CupboardItemRepository",
    "ReceiptRepository",
    "ReceiptItemRepository",
    "ShoppingListRepository",
]
