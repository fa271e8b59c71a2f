"""Authentication configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    Durations are in their natural units (hours for sessions, minutes for
    rate limit windows).
    """

    # Session settings
    session_expiry_hours: int = Field(
        default=24,
        description="Bearer token lifetime in hours",
        ge=1,
        le=2160,
    )
    session_extend_on_activity: bool = Field(
        default=True,
        description="Slide the expiry forward on every authenticated request",
    )

    # Login rate limiting
    rate_limit_attempts: int = Field(
        default=5,
        description="Failed-or-not login attempts per email per window",
        ge=1,
        le=20,
    )
    rate_limit_window_minutes: int = Field(
        default=15,
        description="Rate limit window duration",
        ge=1,
        le=60,
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt cost factor",
        ge=4,
        le=16,
    )
