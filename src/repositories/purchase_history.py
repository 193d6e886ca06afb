"""Purchase history repository."""

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.purchase_history import PurchaseHistory


class PurchaseHistoryRepository:
    """Persistence for receipt-derived purchase statistics."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, history_id: int) -> PurchaseHistory | None:
        return self.db.query(PurchaseHistory).filter(PurchaseHistory.id == history_id).first()

    def find_by_user_id(self, user_id: int) -> list[PurchaseHistory]:
        """All records for a user, depleted ones included, most recent purchase first."""
        return (
            self.db.query(PurchaseHistory)
            .filter(PurchaseHistory.user_id == user_id)
            .order_by(PurchaseHistory.last_purchased.desc(), PurchaseHistory.id)
            .all()
        )

    def find_active_by_user_id(self, user_id: int) -> list[PurchaseHistory]:
        return (
            self.db.query(PurchaseHistory)
            .filter(
                PurchaseHistory.user_id == user_id,
                PurchaseHistory.is_depleted.is_(False),
            )
            .order_by(PurchaseHistory.last_purchased.desc(), PurchaseHistory.id)
            .all()
        )

    def find_by_user_and_item(
        self, user_id: int, item_name: str, *, for_update: bool = False
    ) -> PurchaseHistory | None:
        """Look up the record for a normalized item name.

        With for_update the row is locked until the surrounding transaction ends
        (a no-op on SQLite).
        """
        query = self.db.query(PurchaseHistory).filter(
            PurchaseHistory.user_id == user_id,
            PurchaseHistory.item_name == item_name,
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def create(self, **fields: Any) -> PurchaseHistory:
        fields.setdefault("purchase_count", 1)
        fields.setdefault("is_depleted", False)
        record = PurchaseHistory(**fields)
        self.db.add(record)
        self.db.flush()
        return record

    def update(self, history_id: int, **fields: Any) -> PurchaseHistory | None:
        """Apply a partial field set; returns None when the id is unknown."""
        record = self.find_by_id(history_id)
        if record is None:
            return None
        for name, value in fields.items():
            setattr(record, name, value)
        self.db.flush()
        return record

    def mark_depleted(self, history_id: int) -> PurchaseHistory | None:
        return self.update(history_id, is_depleted=True)

    def count_active_by_user_id(self, user_id: int) -> int:
        return (
            self.db.query(func.count(PurchaseHistory.id))
            .filter(
                PurchaseHistory.user_id == user_id,
                PurchaseHistory.is_depleted.is_(False),
            )
            .scalar()
        )
