"""
Status ledger endpoints.

Reads are public. Recording a status requires the owning institution.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies
from auth.policy import Principal

from . import schemas, service

router = APIRouter()


@router.get("/pets/{pet_id}/history")
async def pet_status_history(pet_id: UUID) -> list[schemas.StatusEvent]:
    return await service.history(str(pet_id))


@router.get("/pets/{pet_id}/current")
async def pet_current_status(pet_id: UUID) -> schemas.StatusEvent:
    return await service.current(str(pet_id))


@router.post("/pet-status/{pet_id}", status_code=status.HTTP_201_CREATED)
async def record_pet_status(
    pet_id: UUID,
    request: schemas.StatusEventCreate,
    institution: Principal = Depends(auth_dependencies.get_current_institution),
) -> schemas.StatusEvent:
    return await service.record_event(str(pet_id), request, principal=institution)
