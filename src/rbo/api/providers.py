from __future__ import annotations

import logging
import os
from functools import lru_cache

from rbo.application.ports.notifier import OrderNotifier
from rbo.application.ports.publisher import EventPublisher
from rbo.application.ports.repositories import OrderRepository, TableRepository
from rbo.application.ports.storage import DocumentStore
from rbo.infrastructure.cache.redis_client import redis_configured, redis_key_prefix
from rbo.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from rbo.infrastructure.messaging.redis_publisher import LoggingEventPublisher, RedisEventPublisher
from rbo.infrastructure.notify.whatsapp import WhatsAppLinkNotifier
from rbo.infrastructure.storage.memory_store import InMemoryDocumentStore
from rbo.infrastructure.storage.order_repo import DocumentOrderRepository
from rbo.infrastructure.storage.redis_store import RedisDocumentStore
from rbo.infrastructure.storage.table_repo import DocumentTableRepository

logger = logging.getLogger(__name__)


def storage_backend() -> str:
    return os.getenv("STORAGE_BACKEND", "memory").lower()


def order_store_backend() -> str:
    return os.getenv("ORDER_STORE_BACKEND", "document").lower()


@lru_cache(maxsize=1)
def document_store() -> DocumentStore:
    backend = storage_backend()
    if backend == "redis":
        return RedisDocumentStore(key_prefix=redis_key_prefix())
    if backend != "memory":
        logger.warning("unknown_storage_backend", extra={"backend": backend})
    return InMemoryDocumentStore()


@lru_cache(maxsize=1)
def table_repository() -> TableRepository:
    return DocumentTableRepository(document_store())


@lru_cache(maxsize=1)
def order_repository() -> OrderRepository:
    if order_store_backend() == "sql":
        return SqlAlchemyOrderRepository()
    return DocumentOrderRepository(document_store())


@lru_cache(maxsize=1)
def event_publisher() -> EventPublisher:
    if redis_configured():
        return RedisEventPublisher()
    return LoggingEventPublisher()


@lru_cache(maxsize=1)
def order_notifier() -> OrderNotifier:
    return WhatsAppLinkNotifier(document_store())


def reset_providers() -> None:
    for provider in (document_store, table_repository, order_repository, event_publisher, order_notifier):
        provider.cache_clear()
