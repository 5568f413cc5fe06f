# backend/app/api/v1/endpoints/hero_banners.py
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user_model import User
from app.schemas.hero_banner_schema import HeroBannerResponse
from app.services.hero_banner_service import hero_banner_service
from app.services.image_storage_service import ImageStorageService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=List[HeroBannerResponse])
async def get_active_banners(db: AsyncSession = Depends(deps.get_db)):
    """Banners activos para la portada (público)."""
    return await hero_banner_service.get_active(db)

@router.get("/all", response_model=List[HeroBannerResponse])
async def get_all_banners(
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
):
    return await hero_banner_service.get_all(db)

@router.post("", response_model=HeroBannerResponse, status_code=status.HTTP_201_CREATED)
async def create_banner(
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    storage: ImageStorageService = Depends(deps.get_image_storage),
    desktop_banner: Optional[UploadFile] = File(default=None, alias="desktopBanner"),
    mobile_banner: Optional[UploadFile] = File(default=None, alias="mobileBanner"),
    is_active: bool = Form(default=True, alias="isActive"),
    order: int = Form(default=0),
):
    return await hero_banner_service.create(db, storage, desktop_banner, mobile_banner, is_active, order)

@router.put("/{banner_id}", response_model=HeroBannerResponse)
async def update_banner(
    banner_id: str,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    storage: ImageStorageService = Depends(deps.get_image_storage),
    desktop_banner: Optional[UploadFile] = File(default=None, alias="desktopBanner"),
    mobile_banner: Optional[UploadFile] = File(default=None, alias="mobileBanner"),
    is_active: Optional[bool] = Form(default=None, alias="isActive"),
    order: Optional[int] = Form(default=None),
):
    return await hero_banner_service.update(
        db, storage, banner_id, desktop_banner, mobile_banner, is_active, order
    )

@router.delete("/{banner_id}")
async def delete_banner(
    banner_id: str,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    storage: ImageStorageService = Depends(deps.get_image_storage),
):
    await hero_banner_service.delete(db, storage, banner_id)
    return {"success": True, "message": "Hero banner deleted successfully"}
