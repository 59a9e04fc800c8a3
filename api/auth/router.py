"""
Account and session endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from . import schemas, service

router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def register_user(request: schemas.UserRegisterRequest) -> schemas.UserProfile:
    return await service.register_user(request)


@router.post("/institutions", status_code=status.HTTP_201_CREATED)
async def register_institution(request: schemas.InstitutionRegisterRequest) -> schemas.InstitutionProfile:
    return await service.register_institution(request)


@router.post("/sessions/users")
async def login_user(request: schemas.LoginRequest) -> schemas.UserSessionResponse:
    return await service.authenticate_user(request)


@router.post("/sessions/institutions")
async def login_institution(request: schemas.LoginRequest) -> schemas.InstitutionSessionResponse:
    return await service.authenticate_institution(request)
