"""Shopping list service: active list, checkout and restock suggestions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime

from sqlalchemy.orm import Session

from src.models.purchase_history import PurchaseHistory
from src.models.shopping_list import ShoppingList, ShoppingListItem
from src.repositories.shopping_lists import ShoppingListRepository
from src.services.exceptions import ItemNotFoundError
from src.services.purchase_history import (
    PurchaseEvent,
    PurchaseHistoryService,
    SmartSuggestion,
    utc_today,
)

logger = logging.getLogger(__name__)


@dataclass
class ListStats:
    """Completion stats for a shopping list."""

    total_items: int
    checked_items: int
    completion_percent: int


def calculate_list_stats(items: list[ShoppingListItem]) -> ListStats | None:
    """Completion stats, or None for an empty list."""
    if not items:
        return None
    checked = sum(1 for item in items if item.checked)
    return ListStats(
        total_items=len(items),
        checked_items=checked,
        completion_percent=round(checked / len(items) * 100),
    )


class ShoppingService:
    """Operations on the user's active shopping list."""

    def __init__(
        self,
        db: Session,
        shopping_lists: ShoppingListRepository | None = None,
        purchases: PurchaseHistoryService | None = None,
        today: Callable[[], date] = utc_today,
    ):
        self.db = db
        self.shopping_lists = shopping_lists or ShoppingListRepository(db)
        self.purchases = purchases or PurchaseHistoryService(db, today=today)
        self.today = today

    def get_active_list(self, user_id: int) -> ShoppingList:
        shopping_list = self.shopping_lists.get_or_create_active_list(user_id)
        self.db.commit()
        return shopping_list

    def toggle_item(self, user_id: int, item_id: int) -> ShoppingListItem:
        """Check or uncheck an item on the active list."""
        shopping_list = self.shopping_lists.find_active_by_user_id(user_id)
        item = self.shopping_lists.find_item(shopping_list.id, item_id) if shopping_list else None
        if item is None:
            raise ItemNotFoundError("shopping_list_item", item_id)

        item.checked = not item.checked
        item.checked_at = datetime.now(UTC) if item.checked else None
        self.db.commit()
        return item

    def complete_shopping(self, user_id: int) -> list[PurchaseHistory]:
        """Record checked items as bought today and clear them from the list, in one commit."""
        shopping_list = self.shopping_lists.find_active_by_user_id(user_id)
        if shopping_list is None:
            return []

        checked = self.shopping_lists.find_checked_items(shopping_list.id)
        if not checked:
            return []

        events = [PurchaseEvent(name=item.name, quantity=item.quantity) for item in checked]
        records = self.purchases.record_purchases(user_id, events, self.today(), commit=False)

        self.shopping_lists.delete_items(checked)
        self.db.commit()
        logger.info(f"Completed shopping for user {user_id}: {len(records)} items purchased")
        return records

    def get_suggestions(self, user_id: int, limit: int = 10) -> list[SmartSuggestion]:
        return self.purchases.get_suggestions(user_id, limit)

    def add_suggestion(self, user_id: int, suggestion: SmartSuggestion) -> ShoppingListItem:
        shopping_list = self.shopping_lists.get_or_create_active_list(user_id)
        item = self.shopping_lists.append_item(
            shopping_list.id,
            name=suggestion.item_name,
            quantity=suggestion.suggested_quantity,
            notes=f"Suggested based on ~{suggestion.avg_frequency_days} day purchase cycle",
        )
        self.db.commit()
        return item
