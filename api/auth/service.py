"""
Account registration, login and token verification.
"""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg

from core.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidKindError,
    InvalidTokenError,
    UnknownPrincipalError,
)

from . import repository, schemas, security
from .policy import INSTITUTION, USER, Principal

INSTITUTION_KINDS = ("NGO", "MUNICIPALITY")

logger = logging.getLogger(__name__)


def _to_user_profile(user_row: dict) -> schemas.UserProfile:
    return schemas.UserProfile(
        id=user_row["id"],
        name=str(user_row["name"]),
        email=str(user_row["email"]),
        national_id=str(user_row["national_id"]),
        city=user_row.get("city"),
        state=user_row.get("state"),
    )


def _to_institution_profile(institution_row: dict) -> schemas.InstitutionProfile:
    return schemas.InstitutionProfile(
        id=institution_row["id"],
        name=str(institution_row["name"]),
        email=str(institution_row["email"]),
        tax_id=str(institution_row["tax_id"]),
        kind=str(institution_row["kind"]),
        responsible_name=str(institution_row["responsible_name"]),
        city=str(institution_row["city"]),
        state=str(institution_row["state"]),
    )


def issue_token(subject_id: object, kind: str) -> str:
    return security.build_access_token(subject_id=str(subject_id), kind=kind)


async def register_user(payload: schemas.UserRegisterRequest) -> schemas.UserProfile:
    national_id = payload.national_id.strip()
    existing = await repository.find_user_by_email_or_national_id(payload.email, national_id)
    if existing is not None:
        raise DuplicateIdentityError("Email or national id is already registered.")

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(
            name=payload.name.strip(),
            email=payload.email,
            national_id=national_id,
            password_hash=password_hash,
            city=payload.city,
            state=payload.state,
            zip_code=payload.zip_code,
            address=payload.address,
        )
    except asyncpg.UniqueViolationError as exc:
        # Lost a race against a concurrent registration.
        raise DuplicateIdentityError("Email or national id is already registered.") from exc

    logger.info("user_registered user_id=%s", user_row["id"])
    return _to_user_profile(user_row)


async def register_institution(payload: schemas.InstitutionRegisterRequest) -> schemas.InstitutionProfile:
    kind = payload.kind.strip().upper()
    if kind not in INSTITUTION_KINDS:
        raise InvalidKindError()

    tax_id = payload.tax_id.strip()
    existing = await repository.find_institution_by_email_or_tax_id(payload.email, tax_id)
    if existing is not None:
        raise DuplicateIdentityError("Email or tax id is already registered.")

    password_hash = security.hash_password(payload.password)
    try:
        institution_row = await repository.create_institution(
            name=payload.name.strip(),
            email=payload.email,
            tax_id=tax_id,
            password_hash=password_hash,
            responsible_name=payload.responsible_name.strip(),
            kind=kind,
            city=payload.city,
            state=payload.state,
            zip_code=payload.zip_code,
            address=payload.address,
            latitude=payload.latitude,
            longitude=payload.longitude,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateIdentityError("Email or tax id is already registered.") from exc

    logger.info("institution_registered institution_id=%s kind=%s", institution_row["id"], kind)
    return _to_institution_profile(institution_row)


def _check_credentials(row: dict | None, password: str) -> dict:
    # Unknown email and wrong password must be indistinguishable to the caller.
    if row is None or not security.verify_password(password, str(row.get("password_hash") or "")):
        raise InvalidCredentialsError()
    return row


async def authenticate_user(payload: schemas.LoginRequest) -> schemas.UserSessionResponse:
    try:
        user_row = _check_credentials(await repository.get_user_by_email(payload.email), payload.password)
    except InvalidCredentialsError:
        logger.warning("login_rejected kind=user")
        raise

    token = issue_token(user_row["id"], USER)
    return schemas.UserSessionResponse(user=_to_user_profile(user_row), token=token)


async def authenticate_institution(payload: schemas.LoginRequest) -> schemas.InstitutionSessionResponse:
    try:
        institution_row = _check_credentials(
            await repository.get_institution_by_email(payload.email),
            payload.password,
        )
    except InvalidCredentialsError:
        logger.warning("login_rejected kind=institution")
        raise

    token = issue_token(institution_row["id"], INSTITUTION)
    return schemas.InstitutionSessionResponse(
        institution=_to_institution_profile(institution_row),
        token=token,
    )


async def verify_token(access_token: str) -> Principal:
    """
    Resolve a bearer token to the principal it was issued for.

    Institution tokens are re-checked against the store so a token outliving
    its institution is rejected. User tokens are trusted until expiry.
    """
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise InvalidTokenError(str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    try:
        subject = str(UUID(subject))
    except ValueError as exc:
        raise InvalidTokenError("Invalid access token subject.") from exc

    kind = str(payload["kind"])
    if kind == INSTITUTION:
        institution_row = await repository.get_institution_by_id(subject)
        if institution_row is None:
            logger.warning("stale_institution_token institution_id=%s", subject)
            raise UnknownPrincipalError("Institution not found.")

    return Principal(id=subject, kind=kind)
