# backend/app/api/v1/endpoints/products.py

"""
Endpoints REST del catálogo de productos.

La consulta es pública; el alta, la modificación y el borrado son solo para
vendedores.
"""

import json
from typing import List
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user_model import User
from app.schemas import product_schema
from app.services.image_storage_service import ImageStorageService
from app.services.product_service import product_service

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/list", response_model=List[product_schema.ProductResponse])
async def read_products(db: AsyncSession = Depends(deps.get_db)) -> List[product_schema.ProductResponse]:
    """Obtiene el catálogo completo por orden de creación."""
    products = await product_service.list_products(db)
    logger.debug(f"📋 PRODUCTOS: {len(products)} resultados")
    return products


@router.post("/add", response_model=product_schema.ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_with_images(
    *,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    storage: ImageStorageService = Depends(deps.get_image_storage),
    product_data: str = Form(..., alias="productData"),
    images: List[UploadFile] = File(default=[]),
    color_images: List[UploadFile] = File(default=[], alias="colorImages"),
) -> product_schema.ProductResponse:
    """Crea un producto desde el formulario multipart subiendo sus imágenes."""
    try:
        draft = product_schema.ProductDraft.model_validate(json.loads(product_data))
    except (ValueError, ValidationError) as e:
        logger.error(f"❌ ERROR: productData inválido: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid productData: {e}"
        )

    logger.info(f"🆕 PRODUCTO: Creando '{draft.name}' con {len(images)} imágenes")
    product = await product_service.create_product_with_uploads(db, draft, images, color_images, storage)
    logger.info(f"✅ PRODUCTO: Creado exitosamente '{product.name}' ({product.id})")
    return product


@router.post("/add-direct", response_model=product_schema.ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    product_in: product_schema.ProductCreate,
) -> product_schema.ProductResponse:
    """Crea un producto con las URLs de imagen ya alojadas."""
    logger.info(f"🆕 PRODUCTO: Creando '{product_in.name}' (directo)")
    product = await product_service.create_product(db, product_in)
    logger.info(f"✅ PRODUCTO: Creado exitosamente '{product.name}' ({product.id})")
    return product


@router.patch("/{product_id}/stock", response_model=product_schema.ProductResponse)
async def change_stock(
    *,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    product_id: str,
    stock_in: product_schema.ProductStockUpdate,
) -> product_schema.ProductResponse:
    """Marca el producto como disponible o agotado."""
    return await product_service.change_stock(db, product_id, stock_in.in_stock)


@router.patch("/{product_id}", response_model=product_schema.ProductResponse)
async def update_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    product_id: str,
    product_in: product_schema.ProductUpdate,
) -> product_schema.ProductResponse:
    """Actualiza un producto existente."""
    logger.info(f"🔄 PRODUCTO: Actualizando producto '{product_id}'")
    product = await product_service.update_product(db, product_id, product_in)
    logger.info(f"✅ PRODUCTO: Actualizado exitosamente '{product_id}'")
    return product


@router.delete("/{product_id}")
async def delete_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
    storage: ImageStorageService = Depends(deps.get_image_storage),
    product_id: str,
):
    """Elimina un producto y, en lo posible, sus imágenes alojadas."""
    logger.info(f"🗑️ PRODUCTO: Eliminando producto '{product_id}'")
    await product_service.delete_product(db, product_id, storage)
    logger.info(f"✅ PRODUCTO: Eliminado exitosamente '{product_id}'")
    return {"success": True, "message": "Product deleted successfully"}


@router.get("/{product_id}", response_model=product_schema.ProductResponse)
async def read_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    product_id: str,
) -> product_schema.ProductResponse:
    """Obtiene los detalles de un producto por ID."""
    logger.debug(f"🔍 PRODUCTO: Buscando producto '{product_id}'")
    return await product_service.get_product_or_404(db, product_id)
