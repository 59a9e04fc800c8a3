"""
Status ledger persistence.

Events are insert-only. This module is also the single writer of
`pets.is_available`, which must always mirror the newest event.
"""

from __future__ import annotations

import asyncpg

from core import db

_EVENT_COLUMNS = "e.id, e.pet_id, e.institution_id, e.status, e.note, e.created_at"


async def insert_event(
    *,
    pet_id: str,
    institution_id: str,
    status: str,
    note: str | None,
    conn: asyncpg.Connection | None = None,
) -> dict:
    """
    Append one event. The returned row carries the acting institution's
    name, city and state, like the history rows.
    """
    row = await db.fetch_one(
        f"""
        WITH inserted AS (
          INSERT INTO pet_status_events (pet_id, institution_id, status, note)
          VALUES ($1::uuid, $2::uuid, $3, $4)
          RETURNING *
        )
        SELECT {_EVENT_COLUMNS},
               i.name AS institution_name,
               i.city AS institution_city,
               i.state AS institution_state
        FROM inserted e
        JOIN institutions i ON i.id = e.institution_id
        """,
        pet_id,
        institution_id,
        status,
        note,
        conn=conn,
    )
    if row is None:
        raise RuntimeError("Failed to insert status event.")
    return row


async def sync_pet_availability(
    pet_id: str,
    *,
    is_available: bool,
    conn: asyncpg.Connection | None = None,
) -> None:
    await db.execute(
        """
        UPDATE pets
        SET is_available = $2,
            updated_at = now()
        WHERE id = $1::uuid
        """,
        pet_id,
        is_available,
        conn=conn,
    )


async def list_events(pet_id: str) -> list[dict]:
    """
    Full history, newest first.
    """
    return await db.fetch_all(
        f"""
        SELECT {_EVENT_COLUMNS},
               i.name AS institution_name,
               i.city AS institution_city,
               i.state AS institution_state
        FROM pet_status_events e
        JOIN institutions i ON i.id = e.institution_id
        WHERE e.pet_id = $1::uuid
        ORDER BY e.created_at DESC, e.seq DESC
        """,
        pet_id,
    )


async def get_latest_event(pet_id: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_EVENT_COLUMNS},
               i.name AS institution_name,
               i.city AS institution_city,
               i.state AS institution_state
        FROM pet_status_events e
        JOIN institutions i ON i.id = e.institution_id
        WHERE e.pet_id = $1::uuid
        ORDER BY e.created_at DESC, e.seq DESC
        LIMIT 1
        """,
        pet_id,
    )
