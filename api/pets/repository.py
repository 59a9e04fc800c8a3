"""
Pet persistence (raw SQL).

`is_available` is deliberately absent from every write here; the status
ledger (`pet_status/repository.py`) is its only writer.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

PET_COLUMNS = (
    "p.id, p.name, p.species, p.breed, p.age, p.size, p.gender, p.description, "
    "p.is_vaccinated, p.is_neutered, p.photos, p.is_available, p.institution_id, "
    "p.created_at, p.updated_at"
)

# Columns a partial update may touch, in a fixed order for stable SQL.
UPDATABLE_COLUMNS = (
    "name",
    "species",
    "breed",
    "age",
    "size",
    "gender",
    "description",
    "is_vaccinated",
    "is_neutered",
    "photos",
)


def _filters_sql(
    *,
    species: str | None,
    size: str | None,
    gender: str | None,
    is_available: bool | None,
) -> tuple[str, list[Any]]:
    """
    Build an AND-ed WHERE clause. Absent filters add no condition.
    """
    clauses: list[str] = []
    args: list[Any] = []
    for column, value in (
        ("p.species", species),
        ("p.size", size),
        ("p.gender", gender),
        ("p.is_available", is_available),
    ):
        if value is None:
            continue
        args.append(value)
        clauses.append(f"{column} = ${len(args)}")

    where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
    return where, args


async def insert_pet(
    *,
    institution_id: str,
    name: str,
    species: str,
    breed: str | None,
    age: int,
    size: str,
    gender: str,
    description: str,
    is_vaccinated: bool,
    is_neutered: bool,
    photos: list[str],
    conn: asyncpg.Connection | None = None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO pets AS p (
          institution_id, name, species, breed, age, size, gender,
          description, is_vaccinated, is_neutered, photos
        )
        VALUES ($1::uuid, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11::text[])
        RETURNING {PET_COLUMNS}
        """,
        institution_id,
        name,
        species,
        breed,
        age,
        size,
        gender,
        description,
        is_vaccinated,
        is_neutered,
        photos,
        conn=conn,
    )
    if row is None:
        raise RuntimeError("Failed to insert pet.")
    return row


async def get_pet(pet_id: str) -> dict | None:
    """
    One pet with its institution's public contact fields.
    """
    return await db.fetch_one(
        f"""
        SELECT {PET_COLUMNS},
               i.name AS institution_name,
               i.city AS institution_city,
               i.state AS institution_state,
               i.address AS institution_address,
               i.latitude AS institution_latitude,
               i.longitude AS institution_longitude
        FROM pets p
        JOIN institutions i ON i.id = p.institution_id
        WHERE p.id = $1::uuid
        """,
        pet_id,
    )


async def get_pet_owner(pet_id: str, *, conn: asyncpg.Connection | None = None, for_update: bool = False) -> dict | None:
    """
    Minimal row for ownership checks. With `for_update`, the row stays locked
    until the surrounding transaction ends.
    """
    lock = "FOR UPDATE" if for_update else ""
    return await db.fetch_one(
        f"""
        SELECT id, institution_id
        FROM pets
        WHERE id = $1::uuid
        {lock}
        """,
        pet_id,
        conn=conn,
    )


async def list_pets(
    *,
    limit: int,
    offset: int,
    species: str | None = None,
    size: str | None = None,
    gender: str | None = None,
    is_available: bool | None = None,
) -> list[dict]:
    where, args = _filters_sql(species=species, size=size, gender=gender, is_available=is_available)
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT {PET_COLUMNS},
               i.name AS institution_name,
               i.city AS institution_city,
               i.state AS institution_state
        FROM pets p
        JOIN institutions i ON i.id = p.institution_id
        {where}
        ORDER BY p.created_at DESC, p.id
        LIMIT ${len(args) - 1}
        OFFSET ${len(args)}
        """,
        *args,
    )


async def count_pets(
    *,
    species: str | None = None,
    size: str | None = None,
    gender: str | None = None,
    is_available: bool | None = None,
) -> int:
    where, args = _filters_sql(species=species, size=size, gender=gender, is_available=is_available)
    total = await db.fetch_value(
        f"""
        SELECT count(*)
        FROM pets p
        {where}
        """,
        *args,
    )
    return int(total or 0)


async def update_pet(pet_id: str, fields: dict[str, Any]) -> dict | None:
    """
    Apply a partial update. Unknown keys are ignored.
    """
    columns = [column for column in UPDATABLE_COLUMNS if column in fields]
    if not columns:
        return await get_pet(pet_id)

    args: list[Any] = [pet_id]
    assignments: list[str] = []
    for column in columns:
        args.append(fields[column])
        cast = "::text[]" if column == "photos" else ""
        assignments.append(f"{column} = ${len(args)}{cast}")

    row = await db.fetch_one(
        f"""
        UPDATE pets
        SET {", ".join(assignments)},
            updated_at = now()
        WHERE id = $1::uuid
        RETURNING id
        """,
        *args,
    )
    if row is None:
        return None
    return await get_pet(pet_id)


async def delete_pet(pet_id: str) -> bool:
    """
    Hard delete. Status events go with the pet (ON DELETE CASCADE).
    """
    row = await db.fetch_one(
        """
        DELETE FROM pets
        WHERE id = $1::uuid
        RETURNING id
        """,
        pet_id,
    )
    return row is not None
