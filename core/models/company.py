"""Company (merchant identity) domain models.

There is at most one company per backend instance. It is created once by
registration and afterwards only updated.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

# bcrypt only looks at the first 72 bytes of a password and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def check_password_bytes(password: str) -> str:
    """Reject passwords whose UTF-8 encoding is longer than bcrypt accepts."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return password


class CompanyCreate(BaseModel):
    """Registration payload. The password is hashed before storage."""

    fssai_number: str = Field(..., min_length=1, max_length=50)
    gst_number: str | None = Field(None, max_length=50)
    phone_number: str = Field(..., min_length=1, max_length=30)
    alternate_number: str | None = Field(None, max_length=30)
    owner_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    logo: str | None = Field(None, max_length=2000)
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class CompanyUpdate(BaseModel):
    """Identity fields that can be changed after registration. All optional."""

    fssai_number: str | None = Field(None, min_length=1, max_length=50)
    gst_number: str | None = Field(None, max_length=50)
    phone_number: str | None = Field(None, min_length=1, max_length=30)
    alternate_number: str | None = Field(None, max_length=30)
    owner_name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    logo: str | None = Field(None, max_length=2000)


class Company(BaseModel):
    """Company as returned to clients. Never carries the password hash."""

    id: UUID
    fssai_number: str
    gst_number: str | None
    phone_number: str
    alternate_number: str | None
    owner_name: str
    email: EmailStr
    logo: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
