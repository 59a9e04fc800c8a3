"""
Account persistence helpers (users and institutions).
"""

from __future__ import annotations

from core import db

_USER_COLUMNS = "id, name, email, national_id, password_hash, city, state, zip_code, address, created_at"

_INSTITUTION_COLUMNS = (
    "id, name, email, tax_id, password_hash, responsible_name, kind, "
    "city, state, zip_code, address, latitude, longitude, created_at"
)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    *,
    name: str,
    email: str,
    national_id: str,
    password_hash: str,
    city: str | None = None,
    state: str | None = None,
    zip_code: str | None = None,
    address: str | None = None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (name, email, national_id, password_hash, city, state, zip_code, address)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING {_USER_COLUMNS}
        """,
        name,
        normalize_email(email),
        national_id,
        password_hash,
        city,
        state,
        zip_code,
        address,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def find_user_by_email_or_national_id(email: str, national_id: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id
        FROM users
        WHERE lower(email) = lower($1)
           OR national_id = $2
        LIMIT 1
        """,
        normalize_email(email),
        national_id,
    )


async def create_institution(
    *,
    name: str,
    email: str,
    tax_id: str,
    password_hash: str,
    responsible_name: str,
    kind: str,
    city: str,
    state: str,
    zip_code: str,
    address: str,
    latitude: float | None = None,
    longitude: float | None = None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO institutions (
          name, email, tax_id, password_hash, responsible_name, kind,
          city, state, zip_code, address, latitude, longitude
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
        RETURNING {_INSTITUTION_COLUMNS}
        """,
        name,
        normalize_email(email),
        tax_id,
        password_hash,
        responsible_name,
        kind,
        city,
        state,
        zip_code,
        address,
        latitude,
        longitude,
    )
    if row is None:
        raise RuntimeError("Failed to create institution.")
    return row


async def get_institution_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_INSTITUTION_COLUMNS}
        FROM institutions
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_institution_by_id(institution_id: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_INSTITUTION_COLUMNS}
        FROM institutions
        WHERE id = $1::uuid
        """,
        institution_id,
    )


async def find_institution_by_email_or_tax_id(email: str, tax_id: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id
        FROM institutions
        WHERE lower(email) = lower($1)
           OR tax_id = $2
        LIMIT 1
        """,
        normalize_email(email),
        tax_id,
    )
