"""
Valkey (Redis-compatible) store for bearer sessions and login attempt counters.

Only the operations the auth layer needs: JSON documents with an expiry,
and a windowed attempt counter. Raises on connection failure; never falls back.
"""

import json
import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        client.set_json("session:abc", {"company_id": "..."}, expire_seconds=3600)
        data = client.get_json("session:abc")  # None once expired
        count, ttl = client.count_attempt("ratelimit:login:owner@example.com", 900)
    """

    def __init__(self, url: str):
        self._client = redis.from_url(url, decode_responses=True)
        # Fail at startup rather than on the first login
        self._client.ping()
        logger.info("ValkeyClient connected")

    def set_json(self, key: str, value: dict, expire_seconds: int) -> None:
        """Store value as JSON; the key disappears after expire_seconds."""
        self._client.set(key, json.dumps(value), ex=expire_seconds)

    def get_json(self, key: str) -> dict | None:
        """
        Stored document, None if missing or expired.

        Raises ValueError if the stored value is not JSON.
        """
        value = self._client.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}")

    def delete(self, key: str) -> bool:
        """True if the key existed."""
        return self._client.delete(key) > 0

    def count_attempt(self, key: str, window_seconds: int) -> tuple[int, int]:
        """
        Add one to the counter at key and restart its window.

        The three commands run as one MULTI/EXEC block.

        Returns:
            (attempts counted in the window, seconds until the window closes)
        """
        pipe = self._client.pipeline(transaction=True)
        pipe.incr(key)
        pipe.expire(key, window_seconds)
        pipe.ttl(key)
        count, _, ttl = pipe.execute()
        return count, ttl

    def close(self) -> None:
        self._client.close()
        logger.info("ValkeyClient closed")
