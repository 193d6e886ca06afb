"""Cupboard item repository."""

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.cupboard_item import CupboardItem


class CupboardItemRepository:
    """Persistence for manually entered cupboard items."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, item_id: int) -> CupboardItem | None:
        return self.db.query(CupboardItem).filter(CupboardItem.id == item_id).first()

    def find_by_user_id(self, user_id: int) -> list[CupboardItem]:
        """Non-depleted items for a user, newest first."""
        return (
            self.db.query(CupboardItem)
            .filter(CupboardItem.user_id == user_id, CupboardItem.is_depleted.is_(False))
            .order_by(CupboardItem.added_date.desc(), CupboardItem.id)
            .all()
        )

    def find_by_user_and_item(self, user_id: int, item_name: str) -> CupboardItem | None:
        return (
            self.db.query(CupboardItem)
            .filter(
                CupboardItem.user_id == user_id,
                func.lower(CupboardItem.item_name) == item_name.lower().strip(),
                CupboardItem.is_depleted.is_(False),
            )
            .first()
        )

    def create(self, **fields: Any) -> CupboardItem:
        fields.setdefault("is_depleted", False)
        item = CupboardItem(**fields)
        self.db.add(item)
        self.db.flush()
        return item

    def update(self, item_id: int, **fields: Any) -> CupboardItem | None:
        """Apply a partial field set; returns None when the id is unknown."""
        item = self.find_by_id(item_id)
        if item is None:
            return None
        for name, value in fields.items():
            setattr(item, name, value)
        self.db.flush()
        return item

    def mark_depleted(self, item_id: int) -> CupboardItem | None:
        return self.update(item_id, is_depleted=True)

    def delete(self, item_id: int) -> bool:
        item = self.find_by_id(item_id)
        if item is None:
            return False
        self.db.delete(item)
        self.db.flush()
        return True

    def count_by_user_id(self, user_id: int) -> int:
        return (
            self.db.query(func.count(CupboardItem.id))
            .filter(CupboardItem.user_id == user_id, CupboardItem.is_depleted.is_(False))
            .scalar()
        )
