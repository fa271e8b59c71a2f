"""Security event log for the auth flow.

Append-only rows in security_events: registrations, logins (good and bad),
rate limiting and logouts.
"""

import logging
from enum import Enum
from typing import Any
from uuid import UUID

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class SecurityEvent(Enum):
    """Auth security event types."""

    COMPANY_REGISTERED = "company_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    RATE_LIMITED = "rate_limited"
    SESSION_REVOKED = "session_revoked"


class SecurityLogger:
    """Writes security_events rows."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        company_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record one event."""
        if event in (SecurityEvent.LOGIN_FAILED, SecurityEvent.RATE_LIMITED):
            logger.warning(f"{event.value} for {email} from {ip_address}")

        self._db.execute_returning(
            """INSERT INTO security_events
               (event_type, email, company_id, ip_address, user_agent, details, created_at)
               VALUES (%s, %s, %s, %s, %s, %s, %s)
               RETURNING id""",
            (
                event.value,
                email,
                str(company_id) if company_id else None,
                ip_address,
                user_agent,
                Json(details) if details else None,
                now_utc(),
            ),
        )
