from __future__ import annotations

import sys
from datetime import date, datetime, timezone
from pathlib import Path
from urllib.parse import parse_qs, urlparse

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.application.ports.storage import StorageUnavailableError
from rbo.domain.common.ids import ItemId, OrderId, ReservationId, TableId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import Customer, OrderItem, OrderType, create_pending_order
from rbo.domain.order.reservation import PreferredTime, Reservation
from rbo.infrastructure.notify.whatsapp import (
    MAX_NOTIFICATIONS,
    NOTIFICATIONS_KEY,
    WhatsAppLinkNotifier,
    admin_whatsapp_number,
)
from rbo.infrastructure.storage.memory_store import InMemoryDocumentStore


class BrokenStore:
    def get(self, key: str):
        raise StorageUnavailableError("store offline")

    def set(self, key: str, value) -> None:
        raise StorageUnavailableError("store offline")

    def delete(self, key: str) -> None:
        raise StorageUnavailableError("store offline")


def _order(order_id: str = "ORD-1"):
    return create_pending_order(
        order_id=OrderId(order_id),
        items=[
            OrderItem(
                item_id=ItemId("itm_001"),
                name="Rogan Josh",
                unit_price=Money(amount_minor=32000),
                quantity=2,
            )
        ],
        order_type=OrderType.DINE_IN,
        now=datetime(2026, 5, 1, 13, 15, tzinfo=timezone.utc),
        table_id=TableId("m1"),
        customer=Customer(name="Asha", phone="9876543210"),
    )


def test_admin_number_gets_country_code() -> None:
    assert admin_whatsapp_number("98765 43210") == "919876543210"
    assert admin_whatsapp_number("+91 98765-43210") == "919876543210"
    assert admin_whatsapp_number("91234 56789") == "919123456789"
    assert admin_whatsapp_number("+91 91234 56789") == "919123456789"


def test_admin_number_defaults_from_environment(monkeypatch) -> None:
    monkeypatch.delenv("WHATSAPP_NUMBER", raising=False)
    assert admin_whatsapp_number() == "919999999999"

    monkeypatch.setenv("WHATSAPP_NUMBER", "9123456789")
    assert admin_whatsapp_number() == "919123456789"


def test_order_notification_is_prepended_with_deep_link() -> None:
    store = InMemoryDocumentStore({NOTIFICATIONS_KEY: [{"id": "older", "message": "earlier"}]})
    notifier = WhatsAppLinkNotifier(store, number="9876543210")

    notifier.notify(_order())

    feed = store.get(NOTIFICATIONS_KEY)
    assert [entry["id"] for entry in feed][1:] == ["older"]
    entry = feed[0]
    assert entry["type"] == "newOrder"
    assert entry["orderId"] == "ORD-1"
    assert entry["message"] == "New order #ORD-1 received"
    assert entry["read"] is False

    link = urlparse(entry["link"])
    assert link.netloc == "wa.me"
    assert link.path == "/919876543210"
    text = parse_qs(link.query)["text"][0]
    assert "Order ID: #ORD-1" in text
    assert "2 x Rogan Josh - ₹640.00" in text
    assert "Total Amount: ₹640.00" in text


def test_notification_feed_is_capped() -> None:
    store = InMemoryDocumentStore()
    notifier = WhatsAppLinkNotifier(store, number="9876543210")

    for index in range(MAX_NOTIFICATIONS + 5):
        notifier.notify(_order(f"ORD-{index}"))

    feed = store.get(NOTIFICATIONS_KEY)
    assert len(feed) == MAX_NOTIFICATIONS
    assert feed[0]["orderId"] == f"ORD-{MAX_NOTIFICATIONS + 4}"


def test_reservation_notification_describes_slot() -> None:
    store = InMemoryDocumentStore()
    reservation = Reservation(
        reservation_id=ReservationId("RES-0001"),
        table_id=TableId("t6"),
        name="Imran",
        phone="9000000001",
        guests=2,
        date=date(2026, 11, 2),
        preferred_time=PreferredTime.DINNER,
    )

    WhatsAppLinkNotifier(store, number="9876543210").notify_reservation(reservation)

    entry = store.get(NOTIFICATIONS_KEY)[0]
    assert entry["type"] == "newReservation"
    assert entry["reservationId"] == "RES-0001"
    text = parse_qs(urlparse(entry["link"]).query)["text"][0]
    assert "Dinner (7:00 PM - 10:00 PM)" in text
    assert "Monday, 02 November 2026" in text


def test_notifier_never_raises_on_storage_failure() -> None:
    notifier = WhatsAppLinkNotifier(BrokenStore(), number="9876543210")

    notifier.notify(_order())
