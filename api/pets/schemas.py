"""
Pet API schemas.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.schemas import ApiModel

MAX_PHOTOS = 5


class Species(str, Enum):
    DOG = "DOG"
    CAT = "CAT"


class Size(str, Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class PetCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=120)
    species: Species
    breed: str | None = Field(default=None, max_length=120)
    age: int = Field(..., ge=0, le=50)
    size: Size
    gender: Gender
    description: str = Field(..., min_length=1, max_length=5000)
    is_vaccinated: bool = False
    is_neutered: bool = False
    photos: list[str] = Field(default_factory=list, max_length=MAX_PHOTOS)


class PetUpdate(ApiModel):
    """
    Partial update. Availability and ownership are not part of this input:
    availability follows the status ledger and ownership never moves.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=120)
    species: Species | None = None
    breed: str | None = Field(default=None, max_length=120)
    age: int | None = Field(default=None, ge=0, le=50)
    size: Size | None = None
    gender: Gender | None = None
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    is_vaccinated: bool | None = None
    is_neutered: bool | None = None
    photos: list[str] | None = Field(default=None, max_length=MAX_PHOTOS)


class InstitutionSummary(ApiModel):
    name: str
    city: str
    state: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class Pet(ApiModel):
    id: UUID
    name: str
    species: Species
    breed: str | None = None
    age: int
    size: Size
    gender: Gender
    description: str
    is_vaccinated: bool
    is_neutered: bool
    photos: list[str]
    is_available: bool
    institution_id: UUID
    created_at: datetime
    updated_at: datetime
    institution: InstitutionSummary | None = None


class PetPage(ApiModel):
    items: list[Pet]
    total: int
    page: int
    total_pages: int
