"""Per-email login attempt limits.

Each attempt bumps a Valkey counter and restarts its window, so an email
that keeps failing stays locked out until it goes quiet for a full window.
"""

from clients.valkey_client import ValkeyClient
from auth.config import AuthConfig
from auth.exceptions import RateLimitedError


class RateLimiter:

    KEY_PREFIX = "ratelimit:login:"

    def __init__(self, valkey: ValkeyClient, config: AuthConfig):
        self._valkey = valkey
        self._max_attempts = config.rate_limit_attempts
        self._window_seconds = config.rate_limit_window_minutes * 60

    def _key(self, email: str) -> str:
        return f"{self.KEY_PREFIX}{email.lower()}"

    def check_rate_limit(self, email: str) -> None:
        """
        Record a login attempt for email.

        Raises:
            RateLimitedError: If this attempt is over the limit for the window.
        """
        attempts, ttl = self._valkey.count_attempt(self._key(email), self._window_seconds)
        if attempts > self._max_attempts:
            raise RateLimitedError(retry_after_seconds=max(ttl, 1))

    def reset_rate_limit(self, email: str) -> None:
        """Forget attempts after a successful login."""
        self._valkey.delete(self._key(email))
