"""Receipt ingestion and purchase recording tests."""

from datetime import date
from unittest.mock import patch

import pytest

from src.models.enums import ReceiptStatus
from src.models.purchase_history import PurchaseHistory
from src.models.receipt import Receipt
from src.services.exceptions import InvalidInputError, ItemNotFoundError
from src.services.purchase_history import PurchaseHistoryService
from src.services.receipt_ingestion import ReceiptIngestionService, ReceiptLine
from src.tasks.receipt_purchases import record_receipt_purchases


@pytest.fixture
def service(db):
    return ReceiptIngestionService(db)


def ingest_groceries(service, user_id, purchase_date=date(2024, 3, 1)):
    return service.ingest(
        user_id,
        purchase_date,
        [
            ReceiptLine(name="Whole Milk ", quantity="2", unit="gallon", category="dairy"),
            ReceiptLine(name="Bananas", quantity="6", category="produce"),
        ],
        store_name="Corner Market",
    )


def test_ingest_stores_pending_receipt(service, user):
    """Test ingesting stores normalized lines without recording purchases."""
    receipt = ingest_groceries(service, user.id)

    assert receipt.status == ReceiptStatus.PENDING.value
    assert receipt.store_name == "Corner Market"
    assert [item.normalized_name for item in receipt.items] == ["whole milk", "bananas"]
    assert receipt.items[0].name == "Whole Milk"


def test_ingest_rejects_blank_line(service, user):
    with pytest.raises(InvalidInputError):
        service.ingest(user.id, date(2024, 3, 1), [ReceiptLine(name="  ")])


def test_finalize_records_purchases(service, user, db):
    """Test finalizing records every line on the receipt date."""
    receipt = ingest_groceries(service, user.id)

    finalized = service.finalize(receipt.id)

    assert finalized.status == ReceiptStatus.COMPLETED.value
    assert finalized.items_recorded == 2
    assert finalized.processed_at is not None

    milk = db.query(PurchaseHistory).filter(PurchaseHistory.item_name == "whole milk").first()
    assert milk.last_purchased == date(2024, 3, 1)
    assert milk.avg_quantity == "2"
    assert milk.estimated_deplete_date == date(2024, 3, 11)
    bananas = db.query(PurchaseHistory).filter(PurchaseHistory.item_name == "bananas").first()
    assert bananas.estimated_deplete_date == date(2024, 3, 8)


def test_finalize_is_idempotent(service, user, db):
    """Test a completed receipt is not counted twice."""
    receipt = ingest_groceries(service, user.id)

    service.finalize(receipt.id)
    service.finalize(receipt.id)

    milk = db.query(PurchaseHistory).filter(PurchaseHistory.item_name == "whole milk").first()
    assert milk.purchase_count == 1


def fail_on_second_line(error):
    """Make the second purchase line of a batch raise error."""
    apply_purchase = PurchaseHistoryService._apply_purchase
    calls = []

    def side_effect(self, *args):
        calls.append(args)
        if len(calls) == 2:
            raise error
        return apply_purchase(self, *args)

    return patch.object(
        PurchaseHistoryService, "_apply_purchase", autospec=True, side_effect=side_effect
    )


def test_finalize_failure_records_nothing(service, user, db):
    """Test a receipt that fails part way leaves no purchases behind and retries cleanly."""
    receipt = ingest_groceries(service, user.id)

    with fail_on_second_line(RuntimeError("database went away")):
        with pytest.raises(RuntimeError):
            service.finalize(receipt.id)
    db.rollback()
    service.mark_failed(receipt.id, "database went away")

    assert db.query(PurchaseHistory).count() == 0

    finalized = service.finalize(receipt.id)

    assert finalized.status == ReceiptStatus.COMPLETED.value
    assert finalized.error_message is None
    milk = db.query(PurchaseHistory).filter(PurchaseHistory.item_name == "whole milk").first()
    bananas = db.query(PurchaseHistory).filter(PurchaseHistory.item_name == "bananas").first()
    assert milk.purchase_count == 1
    assert bananas.purchase_count == 1


def test_second_receipt_builds_cadence(service, user, db):
    service.finalize(ingest_groceries(service, user.id, date(2024, 3, 1)).id)
    service.finalize(ingest_groceries(service, user.id, date(2024, 3, 8)).id)

    milk = db.query(PurchaseHistory).filter(PurchaseHistory.item_name == "whole milk").first()
    assert milk.purchase_count == 2
    assert milk.avg_frequency_days == 7


def test_finalize_missing_receipt(service):
    with pytest.raises(ItemNotFoundError):
        service.finalize(999)


def test_mark_failed(service, user):
    receipt = ingest_groceries(service, user.id)

    service.mark_failed(receipt.id, "boom")

    assert receipt.status == ReceiptStatus.FAILED.value
    assert receipt.error_message == "boom"


def test_record_receipt_purchases_task(service, user, db, session_factory):
    """Test the Celery task records purchases in its own session."""
    receipt = ingest_groceries(service, user.id)

    with patch("src.tasks.receipt_purchases.SessionLocal", session_factory):
        result = record_receipt_purchases(receipt.id)

    assert result == {"status": "completed", "items_recorded": 2}
    db.expire_all()
    assert db.query(PurchaseHistory).count() == 2


def test_record_receipt_purchases_task_missing_receipt(session_factory):
    with patch("src.tasks.receipt_purchases.SessionLocal", session_factory):
        result = record_receipt_purchases(999)

    assert result == {"error": "Receipt not found"}


def test_record_receipt_purchases_task_marks_failure(service, user, db, session_factory):
    """Test an unexpected error marks the receipt as failed."""
    receipt = ingest_groceries(service, user.id)

    with (
        patch("src.tasks.receipt_purchases.SessionLocal", session_factory),
        patch(
            "src.services.purchase_history.PurchaseHistoryService.record_purchases",
            side_effect=RuntimeError("database went away"),
        ),
    ):
        result = record_receipt_purchases(receipt.id)

    assert result == {"error": "database went away"}
    db.expire_all()
    stored = db.query(Receipt).filter(Receipt.id == receipt.id).first()
    assert stored.status == ReceiptStatus.FAILED.value
    assert stored.error_message == "database went away"


def test_record_receipt_purchases_task_retry_after_partial_failure(
    service, user, db, session_factory
):
    """Test rerunning the task after a mid-receipt failure counts each line once."""
    receipt = ingest_groceries(service, user.id)

    with patch("src.tasks.receipt_purchases.SessionLocal", session_factory):
        with fail_on_second_line(RuntimeError("worker lost")):
            failed = record_receipt_purchases(receipt.id)
        retried = record_receipt_purchases(receipt.id)

    assert failed == {"error": "worker lost"}
    assert retried == {"status": "completed", "items_recorded": 2}
    db.expire_all()
    counts = {record.item_name: record.purchase_count for record in db.query(PurchaseHistory)}
    assert counts == {"whole milk": 1, "bananas": 1}


def test_ingest_receipt_api(client, auth_headers):
    """Test the endpoint stores the receipt and queues recording."""
    with patch("src.tasks.receipt_purchases.record_receipt_purchases.delay") as mock_delay:
        response = client.post(
            "/api/v1/receipts",
            headers=auth_headers,
            json={
                "purchase_date": "2024-03-01",
                "store_name": "Corner Market",
                "items": [
                    {"name": "Whole Milk", "quantity": "2", "unit": "gallon", "category": "dairy"},
                    {"name": "Bananas"},
                ],
            },
        )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["purchase_date"] == "2024-03-01"
    assert [item["normalized_name"] for item in data["items"]] == ["whole milk", "bananas"]
    mock_delay.assert_called_once_with(data["id"])


def test_ingest_receipt_api_requires_items(client, auth_headers):
    response = client.post("/api/v1/receipts", headers=auth_headers, json={"items": []})
    assert response.status_code == 422


def test_get_receipt_api(client, auth_headers, service, db, other_user):
    """Test receipts are only visible to their owner."""
    receipt = ingest_groceries(service, auth_headers.user_id)
    service.finalize(receipt.id)
    theirs = ingest_groceries(service, other_user.id)

    response = client.get(f"/api/v1/receipts/{receipt.id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["items_recorded"] == 2

    response = client.get(f"/api/v1/receipts/{theirs.id}", headers=auth_headers)
    assert response.status_code == 404
