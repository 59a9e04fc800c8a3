"""
Image upload endpoints (institutions only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel, Field

from auth import dependencies as auth_dependencies
from auth.policy import Principal

from . import service

router = APIRouter()


class ImageUrlRequest(BaseModel):
    url: str = Field(..., min_length=8, max_length=2048)


@router.post("/uploads/images", status_code=status.HTTP_201_CREATED)
async def upload_images(
    files: list[UploadFile] = File(...),
    _: Principal = Depends(auth_dependencies.get_current_institution),
) -> dict:
    stored = await service.store_uploads(files)
    return {"urls": [image.url for image in stored], "count": len(stored)}


@router.post("/uploads/images/from-url", status_code=status.HTTP_201_CREATED)
async def upload_image_from_url(
    request: ImageUrlRequest,
    _: Principal = Depends(auth_dependencies.get_current_institution),
) -> dict:
    stored = await service.store_from_url(request.url)
    return {"url": stored.url, "sizeBytes": stored.size_bytes}
