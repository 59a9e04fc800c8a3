"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator

from core.schemas import ApiModel

from .security import MAX_PASSWORD_BYTES


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return value


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class UserRegisterRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    national_id: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=8, max_length=128)
    city: str | None = Field(default=None, max_length=120)
    state: str | None = Field(default=None, max_length=60)
    zip_code: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=300)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class InstitutionRegisterRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    tax_id: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=8, max_length=128)
    responsible_name: str = Field(..., min_length=1, max_length=200)
    # Checked by the service so an unknown kind reports InvalidKindError.
    kind: str = Field(..., min_length=1, max_length=40)
    city: str = Field(..., min_length=1, max_length=120)
    state: str = Field(..., min_length=1, max_length=60)
    zip_code: str = Field(..., min_length=1, max_length=20)
    address: str = Field(..., min_length=1, max_length=300)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserProfile(ApiModel):
    id: UUID
    name: str
    email: str
    national_id: str
    city: str | None = None
    state: str | None = None
    type: Literal["user"] = "user"


class InstitutionProfile(ApiModel):
    id: UUID
    name: str
    email: str
    tax_id: str
    kind: str
    responsible_name: str
    city: str
    state: str
    type: Literal["institution"] = "institution"


class UserSessionResponse(ApiModel):
    user: UserProfile
    token: str


class InstitutionSessionResponse(ApiModel):
    institution: InstitutionProfile
    token: str
