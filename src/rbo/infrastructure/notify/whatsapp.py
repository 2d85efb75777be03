from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote
from uuid import uuid4

from rbo.application.metrics.order_lifecycle import record_notification
from rbo.application.ports.notifier import OrderNotifier
from rbo.application.ports.storage import DocumentStore
from rbo.domain.order.entities import Order, OrderType
from rbo.domain.order.reservation import Reservation

NOTIFICATIONS_KEY = "adminNotifications"
MAX_NOTIFICATIONS = 50
DEFAULT_WHATSAPP_NUMBER = "9999999999"
COUNTRY_CODE = "91"
NATIONAL_NUMBER_LENGTH = 10

logger = logging.getLogger(__name__)


def admin_whatsapp_number(raw: str | None = None) -> str:
    if raw is None:
        raw = os.getenv("WHATSAPP_NUMBER", DEFAULT_WHATSAPP_NUMBER)
    digits = re.sub(r"\D", "", raw)
    # A ten-digit national number never carries the country code, even when it starts with 91.
    if len(digits) == NATIONAL_NUMBER_LENGTH or not digits.startswith(COUNTRY_CODE):
        return f"{COUNTRY_CODE}{digits}"
    return digits


def whatsapp_link(number: str, message: str) -> str:
    return f"https://wa.me/{number}?text={quote(message, safe='')}"


def order_message(order: Order) -> str:
    lines = [
        "NEW ORDER RECEIVED",
        f"Order ID: #{order.order_id}",
        f"Order Type: {'Dine-in' if order.order_type == OrderType.DINE_IN else 'Delivery'}",
    ]
    if order.table_id is not None:
        lines.append(f"Table: {order.table_id}")
    if order.customer is not None:
        lines.append(f"Name: {order.customer.name}")
        lines.append(f"Phone: {order.customer.phone}")
        if order.customer.address:
            lines.append(f"Location: {order.customer.address}")
    lines.append("")
    lines.extend(
        f"{item.quantity} x {item.display_name} - {item.line_total.format()}" for item in order.items
    )
    lines.append("")
    lines.append(f"Total Amount: {order.total.format()}")
    if order.customer is not None and order.customer.special_instructions:
        lines.append(f"Special Instructions: {order.customer.special_instructions}")
    return "\n".join(lines)


def reservation_message(reservation: Reservation) -> str:
    return "\n".join(
        [
            "TABLE RESERVATION REQUEST",
            f"Reservation ID: #{reservation.reservation_id}",
            f"Table: {reservation.table_id}",
            f"Name: {reservation.name}",
            f"Phone: {reservation.phone}",
            f"Number of Guests: {reservation.guests}",
            f"Date: {reservation.date.strftime('%A, %d %B %Y')}",
            f"Preferred Time: {reservation.preferred_time.slot}",
        ]
    )


class WhatsAppLinkNotifier(OrderNotifier):
    """Builds ``wa.me`` deep links and drops them into the admin notification feed."""

    def __init__(self, store: DocumentStore, number: str | None = None) -> None:
        self._store = store
        self._number = admin_whatsapp_number(number)

    def notify(self, order: Order) -> None:
        self._deliver(
            kind="newOrder",
            subject_key="orderId",
            subject_id=str(order.order_id),
            summary=f"New order #{order.order_id} received",
            message=order_message(order),
        )

    def notify_reservation(self, reservation: Reservation) -> None:
        self._deliver(
            kind="newReservation",
            subject_key="reservationId",
            subject_id=str(reservation.reservation_id),
            summary=f"Table {reservation.table_id} reserved for {reservation.name}",
            message=reservation_message(reservation),
        )

    def _deliver(
        self,
        *,
        kind: str,
        subject_key: str,
        subject_id: str,
        summary: str,
        message: str,
    ) -> None:
        link = whatsapp_link(self._number, message)
        entry: dict[str, Any] = {
            "id": uuid4().hex,
            "type": kind,
            subject_key: subject_id,
            "message": summary,
            "link": link,
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "read": False,
        }
        try:
            feed = self._store.get(NOTIFICATIONS_KEY)
            notifications = feed if isinstance(feed, list) else []
            notifications.insert(0, entry)
            self._store.set(NOTIFICATIONS_KEY, notifications[:MAX_NOTIFICATIONS])
        except Exception:
            record_notification(kind, "failed")
            logger.exception("notification_failed", extra={"kind": kind, "subject_id": subject_id})
            return

        record_notification(kind, "sent")
        logger.info("notification_sent", extra={"kind": kind, "subject_id": subject_id, "link": link})
