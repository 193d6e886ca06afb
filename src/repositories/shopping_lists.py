"""Shopping list repository."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.shopping_list import ShoppingList, ShoppingListItem

logger = logging.getLogger(__name__)

DEFAULT_LIST_NAME = "Shopping List"


class ShoppingListRepository:
    """Active shopping list access for the cupboard and checkout flows."""

    def __init__(self, db: Session):
        self.db = db

    def find_active_by_user_id(self, user_id: int) -> ShoppingList | None:
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.user_id == user_id, ShoppingList.is_active.is_(True))
            .order_by(ShoppingList.id.desc())
            .first()
        )

    def get_or_create_active_list(self, user_id: int) -> ShoppingList:
        """Active list for the user, created on first use.

        Call before making other changes in the session: losing a creation race
        rolls the transaction back and returns the list the other request made.
        """
        existing = self.find_active_by_user_id(user_id)
        if existing:
            return existing

        shopping_list = ShoppingList(user_id=user_id, name=DEFAULT_LIST_NAME, is_active=True)
        self.db.add(shopping_list)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Active shopping list for user {user_id} created concurrently")
            return self.find_active_by_user_id(user_id)
        return shopping_list

    def next_sort_order(self, list_id: int) -> int:
        current = (
            self.db.query(func.max(ShoppingListItem.sort_order))
            .filter(ShoppingListItem.shopping_list_id == list_id)
            .scalar()
        )
        return 0 if current is None else current + 1

    def append_item(
        self,
        list_id: int,
        *,
        name: str,
        quantity: str | None = None,
        unit: str | None = None,
        notes: str | None = None,
    ) -> ShoppingListItem:
        """Add an item at the end of the list."""
        item = ShoppingListItem(
            shopping_list_id=list_id,
            name=name,
            quantity=quantity,
            unit=unit,
            notes=notes,
            checked=False,
            sort_order=self.next_sort_order(list_id),
        )
        self.db.add(item)
        self.db.flush()
        return item

    def find_item(self, list_id: int, item_id: int) -> ShoppingListItem | None:
        return (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.id == item_id,
                ShoppingListItem.shopping_list_id == list_id,
            )
            .first()
        )

    def find_items(self, list_id: int) -> list[ShoppingListItem]:
        return (
            self.db.query(ShoppingListItem)
            .filter(ShoppingListItem.shopping_list_id == list_id)
            .order_by(ShoppingListItem.sort_order, ShoppingListItem.id)
            .all()
        )

    def find_checked_items(self, list_id: int) -> list[ShoppingListItem]:
        return (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.shopping_list_id == list_id,
                ShoppingListItem.checked.is_(True),
            )
            .order_by(ShoppingListItem.sort_order, ShoppingListItem.id)
            .all()
        )

    def delete_items(self, items: list[ShoppingListItem]) -> None:
        for item in items:
            self.db.delete(item)
        self.db.flush()
