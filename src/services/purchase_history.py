"""Purchase recording: running purchase statistics per item."""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.purchase_history import PurchaseHistory
from src.repositories.interfaces import PurchaseHistoryStore
from src.repositories.purchase_history import PurchaseHistoryRepository
from src.services.exceptions import InvalidInputError
from src.services.shelf_life import shelf_life_days
from src.services.stock_decay import (
    days_between,
    depletion_date,
    format_quantity,
    parse_quantity,
    round_half_up,
)

logger = logging.getLogger(__name__)

# An item is suggested once this share of its usual purchase cycle has passed
SUGGESTION_DUE_RATIO = 0.8

# Fixed pool of striped locks; unrelated items may share a stripe
PURCHASE_LOCK_STRIPES = 64
_purchase_locks = [threading.Lock() for _ in range(PURCHASE_LOCK_STRIPES)]


def utc_today() -> date:
    """Current date in UTC."""
    return datetime.now(UTC).date()


def normalize_item_name(name: str) -> str:
    """Lowercase, trimmed name used to match purchases of the same item."""
    return name.lower().strip()


def purchase_lock(user_id: int, item_name: str) -> threading.Lock:
    return _purchase_locks[hash((user_id, item_name)) % PURCHASE_LOCK_STRIPES]


@contextmanager
def _serialized_purchase(user_id: int, item_name: str) -> Iterator[None]:
    """Serialize read-modify-write of one (user, item) record within this process."""
    with purchase_lock(user_id, item_name):
        yield


def _first_quantity(quantity: str | float | None) -> str | None:
    """Quantity as bought ("2 lb"); averaging later keeps only the number."""
    if quantity is None:
        return None
    if isinstance(quantity, str):
        return quantity.strip() or None
    return format_quantity(quantity)


@dataclass
class PurchaseEvent:
    """A single purchased line, from a receipt or a completed shopping trip."""

    name: str
    quantity: str | float | None = None
    category: str | None = None


@dataclass
class SmartSuggestion:
    """An item that is probably due for a restock."""

    item_name: str
    last_purchased: date
    avg_frequency_days: int
    days_since_last_purchase: int
    suggested_quantity: str | None

    @property
    def overdue_ratio(self) -> float:
        return self.days_since_last_purchase / self.avg_frequency_days


class PurchaseHistoryService:
    """Maintains purchase statistics. The only code path that records purchases."""

    def __init__(
        self,
        db: Session,
        history_repository: PurchaseHistoryStore | None = None,
        today: Callable[[], date] = utc_today,
    ):
        self.db = db
        self.history = history_repository or PurchaseHistoryRepository(db)
        self.today = today

    def record_purchase(
        self,
        user_id: int,
        item_name: str,
        purchase_date: date,
        quantity: str | float | None = None,
        category: str | None = None,
    ) -> PurchaseHistory:
        """Fold one purchase event into the item's running statistics and commit.

        Backdated purchases (older than the last known one) still count towards
        purchase_count and avg_quantity but never move last_purchased, the
        cadence or the depletion estimate.
        """
        event = PurchaseEvent(name=item_name, quantity=quantity, category=category)
        return self.record_purchases(user_id, [event], purchase_date)[0]

    def record_purchases(
        self,
        user_id: int,
        events: Iterable[PurchaseEvent],
        purchase_date: date,
        commit: bool = True,
    ) -> list[PurchaseHistory]:
        """Record several purchases made on the same date as one unit of work.

        With commit=False the caller adds its own changes and commits once, so
        either every line is recorded or none is. Call this before making other
        changes in the session: a concurrent first purchase rolls the
        transaction back and the whole batch is replayed.
        """
        lines = []
        for event in events:
            normalized = normalize_item_name(event.name)
            if not normalized:
                raise InvalidInputError("Item name is required")
            lines.append((normalized, event.quantity, event.category))

        try:
            records = self._apply_batch(user_id, lines, purchase_date)
        except IntegrityError:
            # Another process inserted a first purchase concurrently; replay against its row
            self.db.rollback()
            logger.warning(f"Concurrent first purchase for user {user_id}, retrying batch")
            records = self._apply_batch(user_id, lines, purchase_date)

        if commit:
            self.db.commit()
        return records

    def _apply_batch(
        self,
        user_id: int,
        lines: list[tuple[str, str | float | None, str | None]],
        purchase_date: date,
    ) -> list[PurchaseHistory]:
        records = []
        for item_name, quantity, category in lines:
            with _serialized_purchase(user_id, item_name):
                record = self._apply_purchase(
                    user_id, item_name, purchase_date, quantity, category
                )
            logger.info(
                f"Recorded purchase of '{item_name}' for user {user_id} on {purchase_date} "
                f"(count={record.purchase_count}, frequency={record.avg_frequency_days})"
            )
            records.append(record)
        return records

    def _apply_purchase(
        self,
        user_id: int,
        item_name: str,
        purchase_date: date,
        quantity: str | float | None,
        category: str | None,
    ) -> PurchaseHistory:
        existing = self.history.find_by_user_and_item(user_id, item_name, for_update=True)

        if existing is None:
            return self.history.create(
                user_id=user_id,
                item_name=item_name,
                last_purchased=purchase_date,
                purchase_count=1,
                avg_quantity=_first_quantity(quantity),
                avg_frequency_days=None,
                estimated_deplete_date=depletion_date(purchase_date, shelf_life_days(category)),
            )

        days_since_last = days_between(existing.last_purchased, purchase_date)
        is_newer = days_since_last > 0

        frequency = existing.avg_frequency_days
        if is_newer:
            frequency = (
                round_half_up((existing.avg_frequency_days + days_since_last) / 2)
                if existing.avg_frequency_days is not None
                else days_since_last
            )

        incoming_quantity = parse_quantity(quantity)
        if existing.avg_quantity is not None:
            avg_quantity = (parse_quantity(existing.avg_quantity) + incoming_quantity) / 2
        else:
            avg_quantity = incoming_quantity

        changes = {
            "purchase_count": existing.purchase_count + 1,
            "avg_quantity": format_quantity(avg_quantity),
            "avg_frequency_days": frequency,
        }
        if is_newer:
            lifespan = frequency if frequency is not None else shelf_life_days(category)
            changes["last_purchased"] = purchase_date
            changes["estimated_deplete_date"] = depletion_date(purchase_date, lifespan)
            if (
                existing.user_override_date is not None
                and existing.user_override_date < purchase_date
            ):
                # A newer purchase supersedes an older "still have it" confirmation
                changes["user_override_date"] = None
        if days_since_last >= 0:
            # Bought again: back in stock. An old receipt does not resurrect a used-up item.
            changes["is_depleted"] = False

        return self.history.update(existing.id, **changes)

    def get_suggestions(self, user_id: int, limit: int = 10) -> list[SmartSuggestion]:
        """Items whose usual purchase cycle has (nearly) elapsed, most overdue first."""
        today = self.today()
        suggestions = []

        for record in self.history.find_by_user_id(user_id):
            if not record.avg_frequency_days:
                continue
            days_since = days_between(record.last_purchased, today)
            if days_since >= record.avg_frequency_days * SUGGESTION_DUE_RATIO:
                suggestions.append(
                    SmartSuggestion(
                        item_name=record.item_name,
                        last_purchased=record.last_purchased,
                        avg_frequency_days=record.avg_frequency_days,
                        days_since_last_purchase=days_since,
                        suggested_quantity=record.avg_quantity,
                    )
                )

        suggestions.sort(key=lambda s: s.overdue_ratio, reverse=True)
        return suggestions[:limit]
