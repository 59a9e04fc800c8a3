"""
Status ledger business logic.

A pet's availability is derived, never set: every event is appended and the
pet's `is_available` flag rewritten in the same transaction, so no reader
sees the ledger and the flag disagree.
"""

from __future__ import annotations

import logging

import asyncpg

from auth import policy
from core import db
from core.errors import NoStatusError, NotFoundError
from pets import repository as pets_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_status_event(row: dict) -> schemas.StatusEvent:
    institution = None
    if row.get("institution_name") is not None:
        institution = schemas.ActingInstitution(
            name=str(row["institution_name"]),
            city=str(row["institution_city"]),
            state=str(row["institution_state"]),
        )
    return schemas.StatusEvent(
        id=row["id"],
        pet_id=row["pet_id"],
        institution_id=row["institution_id"],
        status=row["status"],
        note=row.get("note"),
        created_at=row["created_at"],
        institution=institution,
    )


async def append_event(
    *,
    pet_id: str,
    institution_id: str,
    status: schemas.PetStatus,
    note: str | None,
    conn: asyncpg.Connection | None,
) -> dict:
    """
    Append one event and write the derived availability flag.

    Callers own the transaction (`conn`) and the ownership check.
    """
    row = await repository.insert_event(
        pet_id=pet_id,
        institution_id=institution_id,
        status=status.value,
        note=note,
        conn=conn,
    )
    await repository.sync_pet_availability(
        pet_id,
        is_available=status is schemas.PetStatus.AVAILABLE,
        conn=conn,
    )
    return row


async def record_event(
    pet_id: str,
    payload: schemas.StatusEventCreate,
    *,
    principal: policy.Principal,
) -> schemas.StatusEvent:
    async with db.transaction() as conn:
        # Row lock serializes concurrent events for the same pet.
        pet = await pets_repository.get_pet_owner(pet_id, conn=conn, for_update=True)
        if pet is None:
            raise NotFoundError("Pet not found.")
        policy.authorize_ownership(principal, pet["institution_id"])

        row = await append_event(
            pet_id=pet_id,
            institution_id=principal.id,
            status=payload.status,
            note=payload.note,
            conn=conn,
        )

    logger.info(
        "status_recorded pet_id=%s institution_id=%s status=%s",
        pet_id,
        principal.id,
        payload.status.value,
    )
    return _to_status_event(row)


async def history(pet_id: str) -> list[schemas.StatusEvent]:
    rows = await repository.list_events(pet_id)
    return [_to_status_event(row) for row in rows]


async def current(pet_id: str) -> schemas.StatusEvent:
    row = await repository.get_latest_event(pet_id)
    if row is None:
        raise NoStatusError()
    return _to_status_event(row)
