# backend/app/services/product_service.py

"""
Capa de servicios para operaciones de negocio relacionadas con productos.

Orquesta el CRUD de productos con el alojamiento de imágenes y la caché del
catálogo:
- Las imágenes del formulario se suben al servicio de imágenes antes de crear
  el producto; las imágenes de color se asignan, en orden, a los colores que
  no traen imagen propia.
- Cualquier escritura invalida la caché del catálogo para que el carrito
  resuelva contra datos frescos.
- Al borrar un producto sus imágenes se eliminan en modo best-effort.
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import product_crud
from app.db.models.product_model import Product
from app.schemas import product_schema
from app.services.catalog_service import CatalogService, catalog_service as default_catalog_service
from app.services.image_storage_service import ImageStorageService, allowed_image

logger = logging.getLogger(__name__)


async def upload_files(storage: ImageStorageService, files: List[UploadFile]) -> List[str]:
    """
    Sube los ficheros en orden y devuelve sus URLs. Las extensiones no permitidas
    se rechazan con 400 antes de subir nada.
    """
    for upload in files:
        if not allowed_image(upload.filename):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File type not allowed: {upload.filename}"
            )

    urls = []
    for upload in files:
        content = await upload.read()
        url = await run_in_threadpool(storage.upload_image, content, upload.filename, upload.content_type)
        urls.append(url)
    return urls


class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.
    """

    def __init__(self, catalog: Optional[CatalogService] = None):
        self.catalog = catalog or default_catalog_service

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_product_or_404(self, db: AsyncSession, product_id: str) -> Product:
        product = await product_crud.get_product(db, product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    async def list_products(self, db: AsyncSession) -> List[product_schema.ProductResponse]:
        return await self.catalog.list_products(db)

    # ========================================
    # OPERACIONES DE ESCRITURA
    # ========================================

    async def create_product(self, db: AsyncSession, product_in: product_schema.ProductCreate) -> Product:
        product = await product_crud.create_product(db, product_in)
        await self.catalog.invalidate()
        return product

    async def create_product_with_uploads(
        self,
        db: AsyncSession,
        draft: product_schema.ProductDraft,
        images: List[UploadFile],
        color_images: List[UploadFile],
        storage: ImageStorageService,
    ) -> Product:
        """Alta desde el formulario multipart (productData + images[] + colorImages[])."""
        image_urls = await upload_files(storage, images)
        color_urls = await upload_files(storage, color_images)

        # Las imágenes de color se reparten entre los colores sin imagen, en orden
        pending_urls = iter(color_urls)
        colors = []
        for color in draft.colors:
            if not color.image:
                color = color.model_copy(update={"image": next(pending_urls, None)})
            colors.append(color)

        data = draft.model_dump()
        data["image"] = image_urls + list(draft.image)
        data["colors"] = [color.model_dump() for color in colors]
        if not data["image"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="At least one product image is required"
            )

        product_in = product_schema.ProductCreate.model_validate(data)
        return await self.create_product(db, product_in)

    async def update_product(
        self, db: AsyncSession, product_id: str, product_in: product_schema.ProductUpdate
    ) -> Product:
        db_product = await self.get_product_or_404(db, product_id)
        product = await product_crud.update_product(db, db_product, product_in)
        await self.catalog.invalidate()
        return product

    async def change_stock(self, db: AsyncSession, product_id: str, in_stock: bool) -> Product:
        db_product = await self.get_product_or_404(db, product_id)
        product = await product_crud.set_stock(db, db_product, in_stock)
        await self.catalog.invalidate()
        logger.info(f"📦 PRODUCTO: Stock de '{product.name}' -> {'disponible' if in_stock else 'agotado'}")
        return product

    async def delete_product(self, db: AsyncSession, product_id: str, storage: ImageStorageService) -> None:
        db_product = await self.get_product_or_404(db, product_id)
        urls = list(db_product.image or [])
        urls += [color.get("image") for color in (db_product.colors or []) if color.get("image")]

        await product_crud.delete_product(db, db_product)
        await self.catalog.invalidate()

        for url in urls:
            await run_in_threadpool(storage.delete_image, url)

# Instancia única del servicio para ser usada en la aplicación
product_service = ProductService()
