"""Lazily created Redis client; None when Redis is disabled."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import redis

from app.config import get_settings


@lru_cache(maxsize=1)
def get_redis_client() -> Optional[redis.Redis]:
    settings = get_settings()
    if not settings.redis_enabled:
        return None
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        socket_timeout=1.0,
        socket_connect_timeout=1.0,
    )
