"""Pydantic models for the auth domain."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from core.models import Company
from core.models.company import check_password_bytes


class Session(BaseModel):
    """An active bearer session."""

    token: str = Field(..., description="Opaque bearer token")
    company_id: UUID
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime


class LoginRequest(BaseModel):
    """Login payload."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class AuthenticatedCompany(BaseModel):
    """Returned by register and login."""

    company: Company
    session: Session
