"""Receipt ingestion: turns normalized receipt lines into purchase events."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime

from sqlalchemy.orm import Session

from src.models.enums import ReceiptStatus
from src.models.receipt import Receipt
from src.repositories.receipts import ReceiptRepository
from src.services.exceptions import InvalidInputError, ItemNotFoundError
from src.services.purchase_history import (
    PurchaseEvent,
    PurchaseHistoryService,
    normalize_item_name,
)

logger = logging.getLogger(__name__)


@dataclass
class ReceiptLine:
    """A line already extracted and cleaned up by the OCR pipeline."""

    name: str
    quantity: str | None = None
    unit: str | None = None
    category: str | None = None


class ReceiptIngestionService:
    """Stores receipt lines and records them as purchases."""

    def __init__(
        self,
        db: Session,
        purchases: PurchaseHistoryService | None = None,
        receipts: ReceiptRepository | None = None,
    ):
        self.db = db
        self.purchases = purchases or PurchaseHistoryService(db)
        self.receipts = receipts or ReceiptRepository(db)

    def ingest(
        self,
        user_id: int,
        purchase_date: date,
        lines: Iterable[ReceiptLine],
        store_name: str | None = None,
    ) -> Receipt:
        """Store a pending receipt with its normalized lines."""
        items = []
        for line in lines:
            normalized = normalize_item_name(line.name or "")
            if not normalized:
                raise InvalidInputError("Receipt line name is required")
            items.append(
                {
                    "name": line.name.strip(),
                    "normalized_name": normalized,
                    "quantity": line.quantity,
                    "unit": line.unit,
                    "category": line.category,
                }
            )

        receipt = self.receipts.create(user_id, purchase_date, items, store_name=store_name)
        self.db.commit()
        logger.info(f"Stored receipt {receipt.id} with {len(items)} lines for user {user_id}")
        return receipt

    def finalize(self, receipt_id: int) -> Receipt:
        """Record every line of a receipt as a purchase on the receipt's date.

        The purchases and the status change commit together, and a completed
        receipt is left untouched, so a retried or redelivered task cannot
        count the same purchases twice.
        """
        receipt = self.receipts.find_by_id(receipt_id)
        if receipt is None:
            raise ItemNotFoundError("receipt", receipt_id)

        if receipt.status == ReceiptStatus.COMPLETED.value:
            logger.info(f"Receipt {receipt_id} already recorded, skipping")
            return receipt

        events = [
            PurchaseEvent(name=item.normalized_name, quantity=item.quantity, category=item.category)
            for item in receipt.items
        ]
        self.purchases.record_purchases(
            receipt.user_id, events, receipt.purchase_date, commit=False
        )

        receipt.status = ReceiptStatus.COMPLETED.value
        receipt.error_message = None
        receipt.items_recorded = len(events)
        receipt.processed_at = datetime.now(UTC)
        self.db.commit()
        logger.info(f"Recorded {len(events)} purchases from receipt {receipt_id}")
        return receipt

    def mark_failed(self, receipt_id: int, error_message: str) -> None:
        receipt = self.receipts.find_by_id(receipt_id)
        if receipt is None:
            return
        receipt.status = ReceiptStatus.FAILED.value
        receipt.error_message = error_message
        receipt.processed_at = datetime.now(UTC)
        self.db.commit()
