from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from freightline.core import get_db
from main import app


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def create_shipment(client, origin_id, product_id, quantity=10, driver_id=None):
    response = client.post("/api/shipments", json={
        "origin_warehouse_id": str(origin_id),
        "driver_id": str(driver_id) if driver_id else None,
        "items": [{"product_id": str(product_id), "quantity": quantity}],
    })
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_master_data_round_trip(client):
    response = client.post("/api/warehouses", json={
        "code": "WH-X", "name": "Dock X", "address": "1 Pier", "location": "Harbour"
    })
    assert response.status_code == 201
    warehouse_id = response.json()["id"]

    duplicate = client.post("/api/warehouses", json={
        "code": "WH-X", "name": "Dock X2", "address": "2 Pier", "location": "Harbour"
    })
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "DUPLICATE_ENTRY"

    assert client.get(f"/api/warehouses/{warehouse_id}").json()["code"] == "WH-X"
    assert client.delete(f"/api/warehouses/{warehouse_id}").status_code == 204
    assert client.get("/api/warehouses").json() == []


def test_unknown_ids_are_404(client):
    response = client.get(f"/api/shipments/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"

    response = client.get("/api/shipments/tracking/TRK-0-MISSING")
    assert response.status_code == 404


def test_inventory_endpoints(client, stocked, product):
    payload = {"product_id": str(product.id), "warehouse_id": str(stocked.id), "quantity": 30}

    response = client.post("/api/inventory/stock/reserve", json=payload)
    assert response.status_code == 200
    assert response.json()["available_quantity"] == 70

    payload["quantity"] = 71
    response = client.post("/api/inventory/stock/reserve", json=payload)
    assert response.status_code == 400
    assert response.json()["code"] == "INSUFFICIENT_STOCK"

    payload["quantity"] = 0
    assert client.post("/api/inventory/stock/reserve", json=payload).status_code == 422

    rows = client.get(f"/api/inventory/stock/warehouse/{stocked.id}").json()
    assert len(rows) == 2


def test_shipment_flow_through_queue_and_settlement(client, stocked, product, driver):
    shipment = create_shipment(client, stocked.id, product.id, driver_id=driver.id)
    assert shipment["status"] == "pending"
    assert Decimal(shipment["total_value"]) == Decimal("1000")

    response = client.post("/api/queue", json={
        "warehouse_id": str(stocked.id),
        "shipment_id": shipment["id"],
        "driver_id": str(driver.id),
        "priority": 2,
    })
    assert response.status_code == 201
    entry = response.json()

    nxt = client.get(f"/api/queue/warehouse/{stocked.id}/next").json()
    assert nxt["id"] == entry["id"]

    assert client.put(f"/api/queue/{entry['id']}/start-loading").status_code == 200
    assert client.put(f"/api/queue/{entry['id']}/finish-loading").json()["status"] == "completed"

    response = client.put(f"/api/shipments/{shipment['id']}/status", json={"status": "delivered"})
    assert response.status_code == 200
    assert response.json()["actual_delivery_date"] is not None

    response = client.post(f"/api/financial/settle/{shipment['id']}", json={
        "fuel_cost": "50", "other_expenses": "20"
    })
    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["shipment"]["company_profit"]) == Decimal("280")
    assert Decimal(body["transaction"]["amount"]) == Decimal("650")

    balance = client.get(f"/api/financial/drivers/{driver.id}/balance").json()
    assert Decimal(balance["balance"]) == Decimal("580")

    reconcile = client.get(f"/api/financial/drivers/{driver.id}/reconcile").json()
    assert reconcile["is_consistent"] is True

    report = client.get("/api/financial/report").json()
    assert report["shipment_count"] == 1

    stats = client.get(f"/api/queue/warehouse/{stocked.id}/statistics").json()
    assert stats["completed"] == 1


def test_invalid_transition_is_400(client, stocked, product):
    shipment = create_shipment(client, stocked.id, product.id)

    response = client.put(f"/api/shipments/{shipment['id']}/status", json={"status": "delivered"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"

    response = client.put(f"/api/shipments/{shipment['id']}/status", json={"status": "teleported"})
    assert response.status_code == 422


def test_manual_transaction_overdraw(client, driver):
    response = client.post("/api/financial/transactions", json={
        "driver_id": str(driver.id), "type": "expense", "amount": "-10"
    })
    assert response.status_code == 400
    assert response.json()["code"] == "INSUFFICIENT_BALANCE"
