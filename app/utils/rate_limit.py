"""
Optional rate limiting for sending messages (per user, per minute).

Uses Redis when MESSAGE_RATE_LIMIT_PER_USER_PER_MINUTE is set.
If not set or Redis unavailable, no limit is applied.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from app.infra.logging_config import get_logger

logger = get_logger("rate_limit")


def rate_limit_key(user_id: UUID) -> str:
    return f"swapboard:ratelimit:messages:{user_id.hex}"


def check_message_rate_limit(
    user_id: UUID,
    redis_client: Optional[object],
    limit_per_minute: Optional[int],
) -> bool:
    """
    Check if the user is within the send rate limit.
    Returns True if allowed, False if rate limited.
    If redis_client or limit_per_minute is None, always returns True.
    """
    if redis_client is None or limit_per_minute is None or limit_per_minute <= 0:
        return True
    key = rate_limit_key(user_id)
    try:
        pipe = redis_client.pipeline()
        pipe.incr(key)
        pipe.expire(key, 60)
        results = pipe.execute()
        count = results[0] if results else 0
        return count <= limit_per_minute
    except Exception as e:
        logger.warning("Rate limit check failed, allowing request: %s", e)
        return True
