# backend/app/services/hero_banner_service.py
"""
Servicio de banners de portada (imagen de escritorio y/o móvil).
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import hero_banner_crud
from app.db.models.hero_banner_model import HeroBanner
from app.services.image_storage_service import ImageStorageService
from app.services.product_service import upload_files

logger = logging.getLogger(__name__)


class HeroBannerService:

    async def _upload_optional(self, storage: ImageStorageService, upload: Optional[UploadFile]) -> Optional[str]:
        if upload is None or not upload.filename:
            return None
        urls = await upload_files(storage, [upload])
        return urls[0]

    async def get_active(self, db: AsyncSession) -> List[HeroBanner]:
        return await hero_banner_crud.get_active_banners(db)

    async def get_all(self, db: AsyncSession) -> List[HeroBanner]:
        return await hero_banner_crud.get_all_banners(db)

    async def get_or_404(self, db: AsyncSession, banner_id: str) -> HeroBanner:
        banner = await hero_banner_crud.get_banner(db, banner_id)
        if not banner:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hero banner not found")
        return banner

    async def create(
        self,
        db: AsyncSession,
        storage: ImageStorageService,
        desktop_banner: Optional[UploadFile],
        mobile_banner: Optional[UploadFile],
        is_active: bool = True,
        order: int = 0,
    ) -> HeroBanner:
        """Se exige al menos una de las dos imágenes."""
        has_desktop = desktop_banner is not None and bool(desktop_banner.filename)
        has_mobile = mobile_banner is not None and bool(mobile_banner.filename)
        if not has_desktop and not has_mobile:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="At least one banner image (desktop or mobile) is required"
            )

        banner = await hero_banner_crud.create_banner(db, {
            "desktop_image_url": await self._upload_optional(storage, desktop_banner),
            "mobile_image_url": await self._upload_optional(storage, mobile_banner),
            "is_active": is_active,
            "sort_order": order,
        })
        logger.info(f"🖼️ BANNER: Creado banner {banner.id} (orden {banner.sort_order})")
        return banner

    async def update(
        self,
        db: AsyncSession,
        storage: ImageStorageService,
        banner_id: str,
        desktop_banner: Optional[UploadFile] = None,
        mobile_banner: Optional[UploadFile] = None,
        is_active: Optional[bool] = None,
        order: Optional[int] = None,
    ) -> HeroBanner:
        """Las imágenes nuevas sustituyen a las anteriores, que se eliminan en modo best-effort."""
        banner = await self.get_or_404(db, banner_id)
        updates = {}
        replaced = []

        desktop_url = await self._upload_optional(storage, desktop_banner)
        if desktop_url:
            if banner.desktop_image_url:
                replaced.append(banner.desktop_image_url)
            updates["desktop_image_url"] = desktop_url

        mobile_url = await self._upload_optional(storage, mobile_banner)
        if mobile_url:
            if banner.mobile_image_url:
                replaced.append(banner.mobile_image_url)
            updates["mobile_image_url"] = mobile_url

        if is_active is not None:
            updates["is_active"] = is_active
        if order is not None:
            updates["sort_order"] = order

        banner = await hero_banner_crud.update_banner(db, banner, updates)
        for url in replaced:
            await run_in_threadpool(storage.delete_image, url)
        return banner

    async def delete(self, db: AsyncSession, storage: ImageStorageService, banner_id: str) -> None:
        banner = await self.get_or_404(db, banner_id)
        urls = [url for url in (banner.desktop_image_url, banner.mobile_image_url) if url]
        await hero_banner_crud.delete_banner(db, banner)
        for url in urls:
            await run_in_threadpool(storage.delete_image, url)
        logger.info(f"🗑️ BANNER: Eliminado banner {banner_id}")

# Instancia única del servicio para ser usada en la aplicación
hero_banner_service = HeroBannerService()
