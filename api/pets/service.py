"""
Pet registry business logic.
"""

from __future__ import annotations

import logging
import math

from auth import policy
from core import db
from core.errors import NotFoundError
from pet_status import service as status_service
from pet_status.schemas import PetStatus

from . import repository, schemas

INITIAL_STATUS_NOTE = "Pet registered and available for adoption."

# Columns that may be cleared with an explicit null on update.
_NULLABLE_FIELDS = {"breed"}

logger = logging.getLogger(__name__)


def _institution_summary(row: dict) -> schemas.InstitutionSummary | None:
    if row.get("institution_name") is None:
        return None
    return schemas.InstitutionSummary(
        name=str(row["institution_name"]),
        city=str(row["institution_city"]),
        state=str(row["institution_state"]),
        address=row.get("institution_address"),
        latitude=row.get("institution_latitude"),
        longitude=row.get("institution_longitude"),
    )


def _to_pet(row: dict) -> schemas.Pet:
    return schemas.Pet(
        id=row["id"],
        name=str(row["name"]),
        species=row["species"],
        breed=row.get("breed"),
        age=int(row["age"]),
        size=row["size"],
        gender=row["gender"],
        description=str(row["description"]),
        is_vaccinated=bool(row["is_vaccinated"]),
        is_neutered=bool(row["is_neutered"]),
        photos=list(row.get("photos") or []),
        is_available=bool(row["is_available"]),
        institution_id=row["institution_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        institution=_institution_summary(row),
    )


async def create_pet(payload: schemas.PetCreate, *, principal: policy.Principal) -> schemas.Pet:
    policy.require_institution(principal)
    fields = payload.model_dump(mode="json")

    async with db.transaction() as conn:
        row = await repository.insert_pet(institution_id=principal.id, conn=conn, **fields)
        pet_id = str(row["id"])
        # The ledger sets availability from the very first moment.
        await status_service.append_event(
            pet_id=pet_id,
            institution_id=principal.id,
            status=PetStatus.AVAILABLE,
            note=INITIAL_STATUS_NOTE,
            conn=conn,
        )

    logger.info("pet_created pet_id=%s institution_id=%s", pet_id, principal.id)
    return await get_pet(pet_id)


async def list_pets(
    *,
    page: int,
    limit: int,
    species: schemas.Species | None = None,
    size: schemas.Size | None = None,
    gender: schemas.Gender | None = None,
    is_available: bool | None = None,
) -> schemas.PetPage:
    page = max(1, page)
    limit = max(1, limit)
    filters = {
        "species": species.value if species is not None else None,
        "size": size.value if size is not None else None,
        "gender": gender.value if gender is not None else None,
        "is_available": is_available,
    }

    rows = await repository.list_pets(limit=limit, offset=(page - 1) * limit, **filters)
    total = await repository.count_pets(**filters)
    return schemas.PetPage(
        items=[_to_pet(row) for row in rows],
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
    )


async def get_pet(pet_id: str) -> schemas.Pet:
    row = await repository.get_pet(pet_id)
    if row is None:
        raise NotFoundError("Pet not found.")
    return _to_pet(row)


async def _get_owned_pet(pet_id: str, principal: policy.Principal) -> dict:
    pet = await repository.get_pet_owner(pet_id)
    if pet is None:
        raise NotFoundError("Pet not found.")
    policy.authorize_ownership(principal, pet["institution_id"])
    return pet


async def update_pet(pet_id: str, payload: schemas.PetUpdate, *, principal: policy.Principal) -> schemas.Pet:
    await _get_owned_pet(pet_id, principal)

    fields = {
        key: value
        for key, value in payload.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or key in _NULLABLE_FIELDS
    }
    row = await repository.update_pet(pet_id, fields)
    if row is None:
        # Deleted between the ownership check and the write.
        raise NotFoundError("Pet not found.")

    logger.info("pet_updated pet_id=%s fields=%s", pet_id, ",".join(sorted(fields)))
    return _to_pet(row)


async def delete_pet(pet_id: str, *, principal: policy.Principal) -> None:
    await _get_owned_pet(pet_id, principal)

    deleted = await repository.delete_pet(pet_id)
    if not deleted:
        raise NotFoundError("Pet not found.")
    logger.info("pet_deleted pet_id=%s institution_id=%s", pet_id, principal.id)
