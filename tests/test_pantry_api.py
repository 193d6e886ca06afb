"""Cupboard API tests."""

from datetime import timedelta

from src.repositories.purchase_history import PurchaseHistoryRepository
from src.services.purchase_history import utc_today


def create_history(db, user_id, item_name, days_ago, **fields):
    record = PurchaseHistoryRepository(db).create(
        user_id=user_id,
        item_name=item_name,
        last_purchased=utc_today() - timedelta(days=days_ago),
        **fields,
    )
    db.commit()
    return record


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unauthorized_access(client):
    """Test that endpoints require authentication."""
    response = client.get("/api/v1/cupboard")
    assert response.status_code in (401, 403)


def test_invalid_token(client):
    """Test that a bad token is rejected."""
    response = client.get("/api/v1/cupboard", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_add_manual_item(client, auth_headers):
    """Test adding an item by hand."""
    response = client.post(
        "/api/v1/cupboard",
        headers=auth_headers,
        json={"item_name": "Olive Oil", "quantity": "1", "unit": "bottle", "category": "pantry"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["item_name"] == "Olive Oil"
    assert data["source"] == "manual"
    assert data["stock_confidence"] == 1.0
    assert data["confidence_factors"]["lifespan_source"] == "category"
    assert data["confidence_factors"]["effective_lifespan_days"] == 90


def test_add_manual_item_blank_name(client, auth_headers):
    """Test that a whitespace-only name is rejected."""
    response = client.post("/api/v1/cupboard", headers=auth_headers, json={"item_name": "   "})
    assert response.status_code == 400


def test_list_pantry(client, auth_headers, db):
    """Test the pantry merges receipt and manual items."""
    create_history(db, auth_headers.user_id, "milk", days_ago=0)
    create_history(db, auth_headers.user_id, "old bread", days_ago=200)
    client.post("/api/v1/cupboard", headers=auth_headers, json={"item_name": "Jam"})

    response = client.get("/api/v1/cupboard", headers=auth_headers)
    assert response.status_code == 200
    items = response.json()
    assert [item["item_name"] for item in items] == ["milk", "Jam"]
    assert [item["source"] for item in items] == ["receipt", "manual"]


def test_cupboard_count(client, auth_headers, db):
    create_history(db, auth_headers.user_id, "milk", days_ago=0)
    create_history(db, auth_headers.user_id, "rice", days_ago=1)

    response = client.get("/api/v1/cupboard/count", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"count": 2}


def test_cupboard_stats(client, auth_headers, db):
    """Test the stats buckets."""
    create_history(db, auth_headers.user_id, "rice", days_ago=0)
    create_history(db, auth_headers.user_id, "pasta", days_ago=9)
    create_history(db, auth_headers.user_id, "beans", days_ago=12)

    response = client.get("/api/v1/cupboard/stats", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_items"] == 3
    assert data["in_stock"] == 1
    assert data["running_low"] == 1
    assert data["needs_restock"] == 1
    assert data["last_stocked"] == utc_today().isoformat()


def test_expired_items(client, auth_headers, db):
    create_history(db, auth_headers.user_id, "cream", days_ago=20)
    create_history(db, auth_headers.user_id, "milk", days_ago=0)

    response = client.get("/api/v1/cupboard/expired", headers=auth_headers)
    assert response.status_code == 200
    assert [item["item_name"] for item in response.json()] == ["cream"]


def test_update_receipt_item(client, auth_headers, db):
    """Test receipt items only take quantity and shelf life edits."""
    record = create_history(db, auth_headers.user_id, "chicken", days_ago=1)

    response = client.patch(
        f"/api/v1/cupboard/receipt/{record.id}",
        headers=auth_headers,
        json={"quantity": "2", "shelf_life_days": 3, "category": "canned"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["quantity"] == "2"
    assert data["category"] is None
    assert data["confidence_factors"]["lifespan_source"] == "user_override"
    assert data["confidence_factors"]["effective_lifespan_days"] == 3


def test_update_manual_item(client, auth_headers):
    create_response = client.post(
        "/api/v1/cupboard", headers=auth_headers, json={"item_name": "Beans"}
    )
    item_id = create_response.json()["id"]

    response = client.patch(
        f"/api/v1/cupboard/manual/{item_id}",
        headers=auth_headers,
        json={"category": "canned"},
    )
    assert response.status_code == 200
    assert response.json()["category"] == "canned"
    assert response.json()["confidence_factors"]["effective_lifespan_days"] == 365


def test_unknown_source(client, auth_headers):
    """Test that the source path segment is validated."""
    response = client.post("/api/v1/cupboard/freezer/1/used-up", headers=auth_headers)
    assert response.status_code == 422


def test_mark_used_up(client, auth_headers, db):
    record = create_history(db, auth_headers.user_id, "milk", days_ago=0)

    response = client.post(f"/api/v1/cupboard/receipt/{record.id}/used-up", headers=auth_headers)
    assert response.status_code == 204

    response = client.get("/api/v1/cupboard", headers=auth_headers)
    assert response.json() == []


def test_mark_used_up_not_found(client, auth_headers):
    response = client.post("/api/v1/cupboard/manual/999/used-up", headers=auth_headers)
    assert response.status_code == 404


def test_cannot_touch_other_users_item(client, auth_headers, db, other_user):
    """Test that another user's item reads as missing."""
    record = create_history(db, other_user.id, "milk", days_ago=0)

    response = client.post(f"/api/v1/cupboard/receipt/{record.id}/used-up", headers=auth_headers)
    assert response.status_code == 404

    response = client.patch(
        f"/api/v1/cupboard/receipt/{record.id}", headers=auth_headers, json={"quantity": "2"}
    )
    assert response.status_code == 404


def test_confirm_in_stock(client, auth_headers, db):
    """Test confirming brings a decayed item back to full confidence."""
    record = create_history(db, auth_headers.user_id, "butter", days_ago=30)

    response = client.post(f"/api/v1/cupboard/receipt/{record.id}/confirm", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["stock_confidence"] == 1.0
    assert data["user_override_date"] == utc_today().isoformat()
    assert data["confidence_factors"]["purchase_count"] == 1


def test_delete_manual_item(client, auth_headers):
    create_response = client.post(
        "/api/v1/cupboard", headers=auth_headers, json={"item_name": "Crackers"}
    )
    item_id = create_response.json()["id"]

    response = client.delete(f"/api/v1/cupboard/manual/{item_id}", headers=auth_headers)
    assert response.status_code == 204

    response = client.delete(f"/api/v1/cupboard/manual/{item_id}", headers=auth_headers)
    assert response.status_code == 404


def test_add_to_shopping_list(client, auth_headers):
    """Test sending a cupboard item to the shopping list."""
    response = client.post(
        "/api/v1/cupboard/shopping-list",
        headers=auth_headers,
        json={"item_name": "Milk", "quantity": "2"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Milk"
    assert data["notes"] == "Added from Cupboard"
    assert data["checked"] is False

    response = client.get("/api/v1/shopping-list", headers=auth_headers)
    assert [item["name"] for item in response.json()["items"]] == ["Milk"]
