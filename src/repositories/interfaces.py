"""Store boundaries the pantry services depend on.

The SQLAlchemy repositories in this package satisfy these protocols; tests
or other backends can substitute their own implementations.
"""

from typing import Any, Protocol

from src.models.cupboard_item import CupboardItem
from src.models.purchase_history import PurchaseHistory
from src.models.receipt import ReceiptItem
from src.models.shopping_list import ShoppingList, ShoppingListItem


class PurchaseHistoryStore(Protocol):
    def find_by_id(self, history_id: int) -> PurchaseHistory | None: ...

    def find_by_user_id(self, user_id: int) -> list[PurchaseHistory]: ...

    def find_by_user_and_item(
        self, user_id: int, item_name: str, *, for_update: bool = False
    ) -> PurchaseHistory | None: ...

    def create(self, **fields: Any) -> PurchaseHistory: ...

    def update(self, history_id: int, **fields: Any) -> PurchaseHistory | None: ...

    def mark_depleted(self, history_id: int) -> PurchaseHistory | None: ...


class CupboardItemStore(Protocol):
    def find_by_id(self, item_id: int) -> CupboardItem | None: ...

    def find_by_user_id(self, user_id: int) -> list[CupboardItem]: ...

    def find_by_user_and_item(self, user_id: int, item_name: str) -> CupboardItem | None: ...

    def create(self, **fields: Any) -> CupboardItem: ...

    def update(self, item_id: int, **fields: Any) -> CupboardItem | None: ...

    def mark_depleted(self, item_id: int) -> CupboardItem | None: ...

    def delete(self, item_id: int) -> bool: ...

    def count_by_user_id(self, user_id: int) -> int: ...


class ReceiptItemLookup(Protocol):
    def find_latest_by_normalized_name(
        self, user_id: int, normalized_name: str
    ) -> ReceiptItem | None: ...


class ActiveShoppingList(Protocol):
    def get_or_create_active_list(self, user_id: int) -> ShoppingList: ...

    def append_item(
        self,
        list_id: int,
        *,
        name: str,
        quantity: str | None = None,
        unit: str | None = None,
        notes: str | None = None,
    ) -> ShoppingListItem: ...
