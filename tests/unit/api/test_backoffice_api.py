from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.api import providers
from rbo.api.main import app


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    monkeypatch.delenv("ORDER_STORE_BACKEND", raising=False)
    monkeypatch.delenv("REDIS_URL", raising=False)
    providers.reset_providers()
    with TestClient(app) as test_client:
        yield test_client
    providers.reset_providers()


def _place(client: TestClient, table_id: str = "m1", quantity: int = 2) -> dict:
    response = client.post(
        "/v1/orders",
        json={
            "items": [
                {
                    "itemId": "itm_001",
                    "name": "Rogan Josh",
                    "priceMinor": 32000,
                    "quantity": quantity,
                    "category": "Main Course",
                }
            ],
            "orderType": "dine_in",
            "tableId": table_id,
            "customer": {"name": "Asha", "phone": "9876543210"},
            "paymentMethod": "Online",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_floor_plan_lists_both_floors(client: TestClient) -> None:
    response = client.get("/v1/tables/floor-plan")

    assert response.status_code == 200
    body = response.json()
    assert len(body["mainFloor"]) == 7
    assert len(body["topFloor"]) == 8


def test_order_lifecycle_drives_table_status(client: TestClient) -> None:
    order = _place(client)
    order_id = order["orderId"]
    assert order["total"]["formatted"] == "₹640.00"

    table = client.get("/v1/tables/m1").json()
    assert table["status"] == "occupied"
    assert table["orderId"] == order_id
    assert client.get(f"/v1/tables/by-order/{order_id}").json()["tableId"] == "m1"

    response = client.post(f"/v1/orders/{order_id}/status", json={"status": "ready"})
    assert response.status_code == 200
    assert client.get("/v1/tables/m1").json()["status"] == "ready"

    active = client.get("/v1/orders/active").json()["orders"]
    assert [(entry["orderId"], entry["tableStatus"]) for entry in active] == [(order_id, "ready")]

    client.post(f"/v1/orders/{order_id}/status", json={"status": "completed"})
    table = client.get("/v1/tables/m1").json()
    assert table["status"] == "available"
    assert table["orderId"] is None


def test_unknown_order_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/v1/orders/ORD-missing", headers={"X-Request-Id": "req-123"})

    assert response.status_code == 404
    assert response.headers["X-Request-Id"] == "req-123"
    assert response.json() == {
        "error": {"code": "ORDER_NOT_FOUND", "message": "order ORD-missing not found", "details": {}},
        "requestId": "req-123",
    }


def test_invalid_status_and_reopen_are_rejected(client: TestClient) -> None:
    order_id = _place(client)["orderId"]

    invalid = client.post(f"/v1/orders/{order_id}/status", json={"status": "eaten"})
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "INVALID_ORDER_STATUS"

    client.post(f"/v1/orders/{order_id}/status", json={"status": "cancelled"})
    reopen = client.post(f"/v1/orders/{order_id}/status", json={"status": "preparing"})
    assert reopen.status_code == 409
    assert reopen.json()["error"]["code"] == "INVALID_ORDER_TRANSITION"


def test_place_order_for_unknown_table_is_404(client: TestClient) -> None:
    response = client.post(
        "/v1/orders",
        json={
            "items": [{"itemId": "itm_001", "name": "Kahwa", "priceMinor": 6000, "quantity": 1}],
            "tableId": "m99",
        },
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TABLE_NOT_FOUND"


def test_empty_order_fails_validation(client: TestClient) -> None:
    response = client.post("/v1/orders", json={"items": []})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_table_registry_mutations(client: TestClient) -> None:
    assert client.put("/v1/tables/m2/status", json={"status": "reserved"}).json() == {"updated": True}
    assert client.get("/v1/tables/m2").json()["status"] == "reserved"

    assert client.post("/v1/tables/m2/assign", json={"orderId": "ORD-X"}).json() == {"updated": True}
    assert client.put("/v1/tables/m2/status", json={"status": "preparing"}).status_code == 200
    assert client.get("/v1/tables/m2").json()["orderId"] == "ORD-X"

    assert client.put("/v1/tables/m2/capacity", json={"capacity": 3}).status_code == 200
    assert client.get("/v1/tables/m2").json()["capacity"] == 3

    assert client.post("/v1/tables/m2/free").status_code == 200
    assert client.get("/v1/tables/m2").json()["status"] == "available"

    missing = client.put("/v1/tables/zz/status", json={"status": "occupied"})
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"

    filtered = client.get("/v1/tables", params={"floor": "main", "status": "available"}).json()
    assert len(filtered["tables"]) == 7


def test_reconcile_and_reset(client: TestClient) -> None:
    client.post("/v1/tables/t1/assign", json={"orderId": "ORD-T1"})

    response = client.post("/v1/tables/reconcile", json={"orderId": "ORD-T1", "orderStatus": "preparing"})
    assert response.json() == {"updated": True}
    assert client.get("/v1/tables/t1").json()["status"] == "preparing"

    missing = client.post("/v1/tables/reconcile", json={"orderId": "ORD-none", "orderStatus": "ready"})
    assert missing.json() == {"updated": False}

    assert client.post("/v1/tables/reset").json() == {"updated": True}
    assert len(client.get("/v1/tables", params={"status": "available"}).json()["tables"]) == 15


def test_reserve_table_writes_admin_notification(client: TestClient) -> None:
    response = client.post(
        "/v1/tables/t6/reserve",
        json={"name": "Imran", "phone": "9000000001", "guests": 2, "date": "2026-11-02", "preferredTime": "dinner"},
    )

    assert response.status_code == 200
    assert client.get("/v1/tables/t6").json()["status"] == "reserved"
    feed = providers.document_store().get("adminNotifications")
    assert feed[0]["type"] == "newReservation"
    assert feed[0]["link"].startswith("https://wa.me/91")


def test_payment_and_delete(client: TestClient) -> None:
    first = _place(client, table_id="m3")["orderId"]
    second = _place(client, table_id="m4")["orderId"]

    paid = client.post(f"/v1/orders/{first}/payment", json={"paymentStatus": "completed", "paymentMethod": "Cash"})
    assert paid.status_code == 200
    assert paid.json()["paymentStatus"] == "completed"
    assert client.get("/v1/tables/m3").json()["status"] == "available"

    assert client.delete(f"/v1/orders/{second}").status_code == 204
    assert client.get(f"/v1/orders/{second}").status_code == 404
    assert client.get("/v1/tables/m4").json()["status"] == "available"


def test_stats_revenue_and_recent_orders(client: TestClient) -> None:
    first = _place(client, table_id="m1", quantity=2)["orderId"]
    second = _place(client, table_id="m2", quantity=1)["orderId"]
    client.post(f"/v1/orders/{first}/status", json={"status": "completed"})
    client.post(f"/v1/orders/{second}/status", json={"status": "completed"})

    stats = client.get("/v1/analytics/stats").json()
    assert stats["totalOrders"] == 2
    assert stats["totalRevenue"] == 96000
    assert stats["topSellingItems"][0] == {
        "id": "itm_001",
        "name": "Rogan Josh",
        "category": "Main Course",
        "quantity": 3,
        "revenue": 96000,
    }
    assert stats["revenueByCategory"] == [{"category": "Main Course", "revenue": 96000}]

    revenue = client.get("/v1/analytics/revenue").json()
    assert sum(bucket["totalRevenue"] for bucket in revenue["dailyData"].values()) == 96000

    recent = client.get("/v1/analytics/recent-orders", params={"limit": 1}).json()
    assert [order["orderId"] for order in recent["orders"]] == [second]

    bad_month = client.get("/v1/analytics/stats", params={"month": "Smarch"})
    assert bad_month.status_code == 400
    assert bad_month.json()["error"]["code"] == "INVALID_STATS_PERIOD"


def test_csv_export(client: TestClient) -> None:
    _place(client, table_id="m1")
    _place(client, table_id="m2")

    response = client.get("/v1/orders/export.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert len(lines) == 3
    assert lines[0] == "Order ID,Date,Total,Items,Status,Payment Method"
