"""Celery task recording purchases once a receipt's lines are normalized."""

import logging

from src.celery_app import app as celery_app
from src.database import SessionLocal, session_scope
from src.services.exceptions import ItemNotFoundError
from src.services.receipt_ingestion import ReceiptIngestionService

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.record_receipt_purchases")
def record_receipt_purchases(receipt_id: int) -> dict:
    """Fold a receipt's lines into purchase history.

    Args:
        receipt_id: ID of the Receipt record

    Returns:
        Dict with processing results
    """
    with session_scope(SessionLocal) as db:
        service = ReceiptIngestionService(db)
        try:
            receipt = service.finalize(receipt_id)
        except ItemNotFoundError:
            logger.error(f"Receipt {receipt_id} not found")
            return {"error": "Receipt not found"}
        except Exception as e:
            logger.exception(f"Error recording purchases for receipt {receipt_id}")
            db.rollback()
            try:
                service.mark_failed(receipt_id, str(e))
            except Exception as db_error:
                logger.error(f"Failed to update receipt status: {db_error}")
            return {"error": str(e)}

        return {
            "status": receipt.status,
            "items_recorded": receipt.items_recorded,
        }
