"""Receipt and receipt item repositories."""

from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from src.models.receipt import Receipt, ReceiptItem


class ReceiptRepository:
    """Persistence for receipts handed over by the OCR pipeline."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, receipt_id: int) -> Receipt | None:
        return self.db.query(Receipt).filter(Receipt.id == receipt_id).first()

    def create(
        self,
        user_id: int,
        purchase_date: date,
        items: list[dict[str, Any]],
        store_name: str | None = None,
    ) -> Receipt:
        receipt = Receipt(
            user_id=user_id,
            purchase_date=purchase_date,
            store_name=store_name,
            status="pending",
        )
        receipt.items = [ReceiptItem(**item) for item in items]
        self.db.add(receipt)
        self.db.flush()
        return receipt


class ReceiptItemRepository:
    """Display metadata (unit, category) for receipt-derived pantry rows."""

    def __init__(self, db: Session):
        self.db = db

    def find_latest_by_normalized_name(
        self, user_id: int, normalized_name: str
    ) -> ReceiptItem | None:
        """Most recent receipt line for this item, by receipt date then insertion order."""
        return (
            self.db.query(ReceiptItem)
            .join(Receipt, ReceiptItem.receipt_id == Receipt.id)
            .filter(
                Receipt.user_id == user_id,
                ReceiptItem.normalized_name == normalized_name,
            )
            .order_by(Receipt.purchase_date.desc(), ReceiptItem.id.desc())
            .first()
        )
