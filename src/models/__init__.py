"""SQLAlchemy models."""

from src.models.cupboard_item import CupboardItem
from src.models.purchase_history import PurchaseHistory
from src.models.receipt import Receipt, ReceiptItem
from src.models.shopping_list import ShoppingList, ShoppingListItem
from src.models.user import User

__all__ = [
    "User",
    "PurchaseHistory",
    "CupboardItem",
    "Receipt",
    "ReceiptItem",
    "ShoppingList",
    "ShoppingListItem",
]
