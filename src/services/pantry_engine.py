"""Pantry engine: merges purchase history and cupboard items into stock views.

Receipt-derived history and manually entered cupboard items stay separate
records. They only meet here, projected into PantryItem rows that keep their
source tag so mutations can be routed back to the right store.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.models.cupboard_item import CupboardItem
from src.models.enums import ItemSource, LifespanSource
from src.models.purchase_history import PurchaseHistory
from src.models.shopping_list import ShoppingListItem
from src.repositories.cupboard_items import CupboardItemRepository
from src.repositories.interfaces import (
    ActiveShoppingList,
    CupboardItemStore,
    PurchaseHistoryStore,
    ReceiptItemLookup,
)
from src.repositories.purchase_history import PurchaseHistoryRepository
from src.repositories.receipts import ReceiptItemRepository
from src.repositories.shopping_lists import ShoppingListRepository
from src.services.exceptions import InvalidInputError, ItemNotFoundError
from src.services.purchase_history import utc_today
from src.services.shelf_life import shelf_life_days as category_shelf_life_days
from src.services.stock_decay import (
    base_confidence,
    confidence,
    days_between,
    depletion_date,
    parse_quantity,
    plausible_frequency,
    resolve_lifespan,
)

logger = logging.getLogger(__name__)

DEFAULT_QUANTITY = "1"
DEFAULT_UNIT = "unit"
CUPBOARD_LIST_NOTE = "Added from Cupboard"

MANUAL_EDITABLE_FIELDS = ("quantity", "category", "shelf_life_days", "notes")
# Receipt rows keep their receipt-derived category; only these map to override columns
RECEIPT_OVERRIDE_FIELDS = {
    "quantity": "user_quantity_override",
    "shelf_life_days": "user_shelf_life_days",
}


@dataclass
class ConfidenceFactors:
    """How a stock confidence was derived."""

    effective_lifespan_days: int
    lifespan_source: LifespanSource
    base_confidence: float
    purchase_count: int | None = None  # receipt rows
    effective_date: date | None = None  # manual rows


@dataclass
class PantryItem:
    """One row of the derived pantry view."""

    id: int
    item_name: str
    last_purchased: date
    quantity: str
    unit: str
    category: str | None
    stock_confidence: float
    estimated_deplete_date: date | None
    days_since_purchase: int
    source: ItemSource
    is_depleted: bool
    confidence_factors: ConfidenceFactors
    user_override_date: date | None = None

    @property
    def reference_date(self) -> date:
        """Date the decay is measured from."""
        return self.user_override_date or self.last_purchased


@dataclass
class CupboardStats:
    """Confidence buckets over every non-depleted item."""

    total_items: int = 0
    in_stock: int = 0
    running_low: int = 0
    needs_restock: int = 0
    last_stocked: date | None = None


def _coalesce(*values: Any) -> Any:
    return next((value for value in values if value is not None), None)


class PantryEngine:
    """Stock confidence views and cupboard actions for a user."""

    def __init__(
        self,
        db: Session,
        history_repository: PurchaseHistoryStore | None = None,
        cupboard_repository: CupboardItemStore | None = None,
        receipt_items: ReceiptItemLookup | None = None,
        shopping_lists: ActiveShoppingList | None = None,
        settings: Settings | None = None,
        today: Callable[[], date] = utc_today,
    ):
        self.db = db
        self.history = history_repository or PurchaseHistoryRepository(db)
        self.cupboard = cupboard_repository or CupboardItemRepository(db)
        self.receipt_items = receipt_items or ReceiptItemRepository(db)
        self.shopping_lists = shopping_lists or ShoppingListRepository(db)
        self.settings = settings or get_settings()
        self.today = today

    # --- Views ---

    def get_user_pantry(self, user_id: int) -> list[PantryItem]:
        """Items probably still on hand, highest confidence first."""
        threshold = self.settings.pantry_visibility_threshold
        visible = [
            item for item in self._project_all(user_id) if item.stock_confidence > threshold
        ]
        # sorted() is stable with reverse=True: ties keep receipt-then-manual encounter order
        return sorted(visible, key=lambda item: item.stock_confidence, reverse=True)

    def get_cupboard_count(self, user_id: int) -> int:
        return len(self.get_user_pantry(user_id))

    def get_cupboard_stats(self, user_id: int) -> CupboardStats:
        """Bucket counts over all non-depleted items, including the ones hidden from the pantry."""
        stats = CupboardStats()
        for item in self._project_all(user_id):
            stats.total_items += 1
            if item.stock_confidence >= self.settings.pantry_in_stock_threshold:
                stats.in_stock += 1
            elif item.stock_confidence >= self.settings.pantry_visibility_threshold:
                stats.running_low += 1
            else:
                stats.needs_restock += 1

            if stats.last_stocked is None or item.reference_date > stats.last_stocked:
                stats.last_stocked = item.reference_date
        return stats

    def get_expired_items(self, user_id: int) -> list[PantryItem]:
        """Recently run-out items, most recent purchase first.

        Anything whose reference date is older than the lookback window is
        treated as abandoned rather than expired.
        """
        threshold = self.settings.pantry_visibility_threshold
        lookback = self.settings.pantry_expired_lookback_days
        expired = [
            item
            for item in self._project_all(user_id)
            if item.stock_confidence <= threshold and item.days_since_purchase <= lookback
        ]
        return sorted(expired, key=lambda item: item.last_purchased, reverse=True)

    # --- Cupboard actions ---

    def add_manual_item(
        self,
        user_id: int,
        item_name: str,
        quantity: str | None = None,
        unit: str | None = None,
        category: str | None = None,
        shelf_life_days: int | None = None,
        notes: str | None = None,
    ) -> PantryItem:
        """Add an item by hand; it starts at full confidence."""
        name = (item_name or "").strip()
        if not name:
            raise InvalidInputError("Item name is required")

        item = self.cupboard.create(
            user_id=user_id,
            item_name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            added_date=self.today(),
            shelf_life_days=shelf_life_days,
            notes=notes,
        )
        self.db.commit()
        logger.info(f"Added cupboard item '{name}' ({item.id}) for user {user_id}")
        return self._project_manual(item, self.today())

    def mark_item_used_up(
        self, item_id: int, source: ItemSource | str, user_id: int | None = None
    ) -> None:
        """Flag an item as depleted; it drops out of every view."""
        item_source = self._resolve_source(source)
        self._get_record(item_id, item_source, user_id)

        if item_source is ItemSource.RECEIPT:
            self.history.mark_depleted(item_id)
        else:
            self.cupboard.mark_depleted(item_id)
        self.db.commit()
        logger.info(f"Marked {item_source.value} item {item_id} as used up")

    def confirm_item_in_stock(
        self, item_id: int, source: ItemSource | str, user_id: int | None = None
    ) -> PantryItem:
        """Reset decay for an item the user says is still there.

        Receipt rows get a fresh override date; purchase statistics are left alone.
        Manual rows only lose their depleted flag since they decay from added_date.
        """
        item_source = self._resolve_source(source)
        self._get_record(item_id, item_source, user_id)
        today = self.today()

        if item_source is ItemSource.RECEIPT:
            record = self.history.update(item_id, user_override_date=today, is_depleted=False)
            self.db.commit()
            logger.info(f"Confirmed receipt item {item_id} in stock as of {today}")
            return self._project_receipt(record, today)

        item = self.cupboard.update(item_id, is_depleted=False)
        self.db.commit()
        logger.info(f"Confirmed manual item {item_id} in stock")
        return self._project_manual(item, today)

    def update_item(
        self,
        item_id: int,
        source: ItemSource | str,
        changes: Mapping[str, Any],
        user_id: int | None = None,
    ) -> PantryItem:
        """Apply user edits.

        Manual items accept quantity, category, shelf_life_days and notes.
        Receipt items only accept quantity and shelf_life_days, stored as overrides.
        """
        item_source = self._resolve_source(source)
        self._get_record(item_id, item_source, user_id)
        today = self.today()

        if item_source is ItemSource.MANUAL:
            fields = {key: changes[key] for key in MANUAL_EDITABLE_FIELDS if key in changes}
            item = self.cupboard.update(item_id, **fields)
            self.db.commit()
            logger.info(f"Updated manual item {item_id}: {sorted(fields)}")
            return self._project_manual(item, today)

        fields = {
            column: changes[key]
            for key, column in RECEIPT_OVERRIDE_FIELDS.items()
            if key in changes
        }
        ignored = sorted(set(changes) - set(RECEIPT_OVERRIDE_FIELDS))
        if ignored:
            logger.debug(f"Ignoring non-editable fields for receipt item {item_id}: {ignored}")
        record = self.history.update(item_id, **fields)
        self.db.commit()
        logger.info(f"Updated receipt item {item_id} overrides: {sorted(fields)}")
        return self._project_receipt(record, today)

    def delete_manual_item(self, item_id: int, user_id: int | None = None) -> None:
        """Permanently remove a cupboard item. Purchase history is never deleted."""
        self._get_record(item_id, ItemSource.MANUAL, user_id)
        self.cupboard.delete(item_id)
        self.db.commit()
        logger.info(f"Deleted manual item {item_id}")

    def add_to_shopping_list(
        self,
        user_id: int,
        item_name: str,
        quantity: str | None = None,
        unit: str | None = None,
    ) -> ShoppingListItem:
        """Append an item to the user's active shopping list, creating the list if needed."""
        name = (item_name or "").strip()
        if not name:
            raise InvalidInputError("Item name is required")

        shopping_list = self.shopping_lists.get_or_create_active_list(user_id)
        item = self.shopping_lists.append_item(
            shopping_list.id,
            name=name,
            quantity=quantity,
            unit=unit,
            notes=CUPBOARD_LIST_NOTE,
        )
        self.db.commit()
        logger.info(f"Added '{name}' to shopping list {shopping_list.id} from cupboard")
        return item

    # --- Projection ---

    def _project_all(self, user_id: int) -> list[PantryItem]:
        """Every non-depleted item from both stores, receipt rows first."""
        today = self.today()
        items = [
            self._project_receipt(record, today)
            for record in self.history.find_by_user_id(user_id)
            if not record.is_depleted
        ]
        items.extend(
            self._project_manual(item, today)
            for item in self.cupboard.find_by_user_id(user_id)
            if not item.is_depleted
        )
        return items

    def _project_receipt(self, record: PurchaseHistory, today: date) -> PantryItem:
        detail = self.receipt_items.find_latest_by_normalized_name(
            record.user_id, record.item_name
        )
        category = detail.category if detail else None
        unit = (detail.unit if detail else None) or DEFAULT_UNIT

        category_days = category_shelf_life_days(category)
        lifespan, lifespan_source = resolve_lifespan(
            (record.user_shelf_life_days, LifespanSource.USER_OVERRIDE),
            (
                plausible_frequency(
                    record.avg_frequency_days,
                    category_days,
                    self.settings.pantry_frequency_cap_multiplier,
                ),
                LifespanSource.FREQUENCY,
            ),
            (category_days, LifespanSource.CATEGORY),
        )

        reference = record.user_override_date or record.last_purchased
        days = days_between(reference, today)
        quantity = _coalesce(record.user_quantity_override, record.avg_quantity, DEFAULT_QUANTITY)

        return PantryItem(
            id=record.id,
            item_name=record.item_name,
            last_purchased=record.last_purchased,
            quantity=quantity,
            unit=unit,
            category=category,
            stock_confidence=confidence(days, lifespan, parse_quantity(quantity)),
            estimated_deplete_date=record.estimated_deplete_date,
            days_since_purchase=max(0, days),
            source=ItemSource.RECEIPT,
            is_depleted=record.is_depleted,
            user_override_date=record.user_override_date,
            confidence_factors=ConfidenceFactors(
                effective_lifespan_days=lifespan,
                lifespan_source=lifespan_source,
                base_confidence=base_confidence(days, lifespan),
                purchase_count=record.purchase_count,
            ),
        )

    def _project_manual(self, item: CupboardItem, today: date) -> PantryItem:
        lifespan, lifespan_source = resolve_lifespan(
            (item.shelf_life_days, LifespanSource.USER_OVERRIDE),
            (category_shelf_life_days(item.category), LifespanSource.CATEGORY),
        )
        days = days_between(item.added_date, today)
        quantity = item.quantity or DEFAULT_QUANTITY

        return PantryItem(
            id=item.id,
            item_name=item.item_name,
            last_purchased=item.added_date,
            quantity=quantity,
            unit=item.unit or DEFAULT_UNIT,
            category=item.category,
            stock_confidence=confidence(days, lifespan, parse_quantity(quantity)),
            estimated_deplete_date=depletion_date(item.added_date, lifespan),
            days_since_purchase=max(0, days),
            source=ItemSource.MANUAL,
            is_depleted=item.is_depleted,
            confidence_factors=ConfidenceFactors(
                effective_lifespan_days=lifespan,
                lifespan_source=lifespan_source,
                base_confidence=base_confidence(days, lifespan),
                effective_date=item.added_date,
            ),
        )

    # --- Lookup helpers ---

    @staticmethod
    def _resolve_source(source: ItemSource | str) -> ItemSource:
        try:
            return ItemSource(source)
        except ValueError:
            raise InvalidInputError(f"Unknown item source: {source!r}") from None

    def _get_record(
        self, item_id: int, source: ItemSource, user_id: int | None
    ) -> PurchaseHistory | CupboardItem:
        if source is ItemSource.RECEIPT:
            record = self.history.find_by_id(item_id)
        else:
            record = self.cupboard.find_by_id(item_id)

        if record is None or (user_id is not None and record.user_id != user_id):
            logger.warning(f"{source.value} item {item_id} not found for user {user_id}")
            raise ItemNotFoundError(source.value, item_id)
        return record
