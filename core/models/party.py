"""Party (customer) domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PartyCreate(BaseModel):
    """Data required to create a party. Also used for full replacement."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=30)
    place: str = Field(..., min_length=1, max_length=255)


class Party(BaseModel):
    """Full party entity as stored."""

    id: UUID
    name: str
    phone: str
    place: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PartySummary(BaseModel):
    """Current party fields attached to invoices for display."""

    id: UUID
    name: str
    phone: str
    place: str
