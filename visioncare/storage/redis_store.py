"""
Redis-backed session store for production when REDIS_URL is set.
Implements the same interface as visioncare.storage.session_store (in-memory).
"""

from __future__ import annotations

from typing import Optional

import redis


class RedisSessionStore:
    """
    Redis-backed handoff store. Values expire with the visitor's session TTL.
    """

    def __init__(self, url: str, default_ttl: int = 1800, client=None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._default_ttl = default_ttl

    def _key(self, session_id: str, key: str) -> str:
        return f"handoff:{session_id}:{key}"

    def set_value(self, session_id: str, key: str, value: str, ttl: int = 1800) -> None:
        self._client.setex(self._key(session_id, key), ttl or self._default_ttl, value)

    def get_value(self, session_id: str, key: str) -> Optional[str]:
        raw = self._client.get(self._key(session_id, key))
        return raw or None

    def pop_value(self, session_id: str, key: str) -> Optional[str]:
        redis_key = self._key(session_id, key)
        pipe = self._client.pipeline()
        pipe.get(redis_key)
        pipe.delete(redis_key)
        raw, _ = pipe.execute()
        return raw or None

    def delete_session(self, session_id: str) -> None:
        keys = list(self._client.scan_iter(match=f"handoff:{session_id}:*"))
        if keys:
            self._client.delete(*keys)

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except redis.RedisError:
            return False
