"""
Lightweight in-memory session store for local development.

Holds the per-visitor values that carry a selected record from a list page to
its detail page. Implements the same interface as
visioncare.storage.redis_store so the FastAPI app can run without Redis.
"""

from __future__ import annotations

from typing import Dict, Optional


class SessionStore:
    def __init__(self) -> None:
        # Simple in-memory store: session_id -> key -> serialized value
        self._sessions: Dict[str, Dict[str, str]] = {}

    def set_value(self, session_id: str, key: str, value: str, ttl: int = 1800) -> None:
        # TTL is ignored in this in-memory implementation.
        self._sessions.setdefault(session_id, {})[key] = value

    def get_value(self, session_id: str, key: str) -> Optional[str]:
        return self._sessions.get(session_id, {}).get(key)

    def pop_value(self, session_id: str, key: str) -> Optional[str]:
        values = self._sessions.get(session_id)
        if not values:
            return None
        value = values.pop(key, None)
        if not values:
            self._sessions.pop(session_id, None)
        return value

    def delete_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def ping(self) -> bool:
        """Health check calls this; always True in local/dev mode."""
        return True
