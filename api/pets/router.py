"""
Pet registry endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from auth import dependencies as auth_dependencies
from auth.policy import Principal

from . import schemas, service

router = APIRouter()


@router.get("/pets")
async def list_pets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    species: schemas.Species | None = Query(default=None),
    size: schemas.Size | None = Query(default=None),
    gender: schemas.Gender | None = Query(default=None),
    is_available: bool | None = Query(default=None, alias="isAvailable"),
) -> schemas.PetPage:
    return await service.list_pets(
        page=page,
        limit=limit,
        species=species,
        size=size,
        gender=gender,
        is_available=is_available,
    )


@router.get("/pets/{pet_id}")
async def get_pet(pet_id: UUID) -> schemas.Pet:
    return await service.get_pet(str(pet_id))


@router.post("/pets", status_code=status.HTTP_201_CREATED)
async def create_pet(
    request: schemas.PetCreate,
    institution: Principal = Depends(auth_dependencies.get_current_institution),
) -> schemas.Pet:
    return await service.create_pet(request, principal=institution)


@router.put("/pets/{pet_id}")
async def update_pet(
    pet_id: UUID,
    request: schemas.PetUpdate,
    institution: Principal = Depends(auth_dependencies.get_current_institution),
) -> schemas.Pet:
    return await service.update_pet(str(pet_id), request, principal=institution)


@router.delete("/pets/{pet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pet(
    pet_id: UUID,
    institution: Principal = Depends(auth_dependencies.get_current_institution),
) -> Response:
    await service.delete_pet(str(pet_id), principal=institution)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
