"""
Status ledger schemas.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from core.schemas import ApiModel


class PetStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    IN_PROCESS = "IN_PROCESS"
    ADOPTED = "ADOPTED"
    UNAVAILABLE = "UNAVAILABLE"


class StatusEventCreate(ApiModel):
    status: PetStatus
    note: str | None = Field(default=None, max_length=2000)


class ActingInstitution(ApiModel):
    name: str
    city: str
    state: str


class StatusEvent(ApiModel):
    id: UUID
    pet_id: UUID
    institution_id: UUID
    status: PetStatus
    note: str | None = None
    created_at: datetime
    institution: ActingInstitution | None = None
