from __future__ import annotations

import logging
import os
from functools import lru_cache

import redis

DEFAULT_KEY_PREFIX = "rbo:"

logger = logging.getLogger(__name__)


def redis_configured() -> bool:
    return bool(os.getenv("REDIS_URL"))


def redis_key_prefix() -> str:
    """Namespace for every document key this service writes to Redis."""
    return os.getenv("REDIS_KEY_PREFIX", DEFAULT_KEY_PREFIX)


def _redis_url() -> str:
    url = os.getenv("REDIS_URL")
    if not url:
        raise RuntimeError("REDIS_URL is not set")
    return url


@lru_cache(maxsize=8)
def _client_for(redis_url: str, timeout_seconds: float) -> redis.Redis:
    # Documents are JSON text, so replies are decoded once here.
    return redis.Redis.from_url(
        redis_url,
        socket_connect_timeout=timeout_seconds,
        socket_timeout=timeout_seconds,
        health_check_interval=30,
        decode_responses=True,
    )


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    return _client_for(_redis_url(), timeout_seconds)


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (RuntimeError, redis.exceptions.RedisError) as exc:
        logger.warning("redis_ping_failed", extra={"error": str(exc)})
        return False
