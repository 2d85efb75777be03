from __future__ import annotations

from typing import Protocol

ORDERS_CHANNEL = "events:orders"
TABLES_CHANNEL = "events:tables"


class EventPublisher(Protocol):
    """Fire-and-forget delivery of serialized event envelopes to a channel."""

    def publish(self, channel: str, message: str) -> None: ...
