from __future__ import annotations

import logging
from typing import Optional

import redis


def get_redis_client(url: str) -> Optional[redis.Redis]:
    """Return a connected Redis client for ``url`` or None when unreachable."""
    if not url:
        return None
    try:
        client = redis.Redis.from_url(url, decode_responses=True)
        client.ping()
        return client
    except Exception as e:
        logging.warning(f"get_redis_client: Redis not available at {url}: {e}")
        return None
