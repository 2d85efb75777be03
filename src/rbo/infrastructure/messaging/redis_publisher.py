from __future__ import annotations

import logging

from rbo.application.ports.publisher import EventPublisher
from rbo.infrastructure.cache.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        get_redis_client(timeout_seconds=self._timeout_seconds).publish(channel, message)


class LoggingEventPublisher(EventPublisher):
    """Used when no Redis is configured; events only reach the log."""

    def publish(self, channel: str, message: str) -> None:
        logger.debug("event_published", extra={"channel": channel, "event_bytes": len(message)})
