"""Receipt ingestion endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_receipt_ingestion_service
from src.database import get_db
from src.models.receipt import Receipt
from src.models.user import User
from src.schemas.receipt import ReceiptIngestRequest, ReceiptResponse
from src.services.exceptions import InvalidInputError
from src.services.purchase_history import utc_today
from src.services.receipt_ingestion import ReceiptIngestionService, ReceiptLine

router = APIRouter(prefix="/api/v1/receipts", tags=["receipts"])


@router.post("", response_model=ReceiptResponse, status_code=status.HTTP_201_CREATED)
def ingest_receipt(
    request: ReceiptIngestRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ReceiptIngestionService, Depends(get_receipt_ingestion_service)],
):
    """Accept normalized receipt lines and queue purchase recording.

    Poll the receipt to see when its purchases have been recorded.
    """
    from src.tasks.receipt_purchases import record_receipt_purchases

    try:
        receipt = service.ingest(
            current_user.id,
            request.purchase_date or utc_today(),
            [ReceiptLine(**line.model_dump()) for line in request.items],
            store_name=request.store_name,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None

    record_receipt_purchases.delay(receipt.id)
    return receipt


@router.get("/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a receipt and its recording status."""
    receipt = (
        db.query(Receipt)
        .filter(
            Receipt.id == receipt_id,
            Receipt.user_id == current_user.id,
        )
        .first()
    )

    if not receipt:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Receipt not found",
        )

    return receipt
