# backend/app/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Las variantes (tallas y colores) viajan dentro del propio registro como
documentos JSON, por lo que no hay relaciones que precargar. Los documentos se
guardan con las claves en camelCase, el mismo formato que expone la API.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.product_model import Product
from app.schemas import product_schema

import logging

logger = logging.getLogger(__name__)


def _dump_variants(values) -> List[Dict[str, Any]]:
    return [value.model_dump(by_alias=True, exclude_none=True) for value in values]

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product(db: AsyncSession, product_id: str) -> Optional[Product]:
    result = await db.execute(select(Product).filter(Product.id == product_id))
    return result.scalars().first()


async def get_products(db: AsyncSession, skip: int = 0, limit: Optional[int] = None) -> List[Product]:
    """Lista de productos por orden de creación (el catálogo completo si no hay límite)."""
    query = select(Product).order_by(Product.created_at, Product.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def get_products_by_ids(db: AsyncSession, product_ids: List[str]) -> List[Product]:
    if not product_ids:
        return []
    result = await db.execute(select(Product).filter(Product.id.in_(product_ids)))
    return result.scalars().all()

# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, product_data: product_schema.ProductCreate) -> Product:
    db_product = Product(
        name=product_data.name,
        description=list(product_data.description),
        price=product_data.price,
        offer_price=product_data.offer_price,
        image=list(product_data.image),
        category=product_data.category,
        in_stock=product_data.in_stock,
        sizes=_dump_variants(product_data.sizes),
        colors=_dump_variants(product_data.colors),
    )
    db.add(db_product)
    await db.commit()
    await db.refresh(db_product)
    logger.info(f"Producto '{db_product.name}' creado con ID {db_product.id}")
    return db_product


async def update_product(
    db: AsyncSession, db_product: Product, product_in: product_schema.ProductUpdate
) -> Product:
    """Actualización parcial: solo se tocan los campos enviados."""
    update_data = product_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if field in ("sizes", "colors"):
            # Documentos JSON: se reasigna la lista completa para que se detecte el cambio
            value = _dump_variants(getattr(product_in, field) or [])
        elif field in ("description", "image"):
            value = list(value or [])
        setattr(db_product, field, value)

    await db.commit()
    await db.refresh(db_product)
    return db_product


async def set_stock(db: AsyncSession, db_product: Product, in_stock: bool) -> Product:
    db_product.in_stock = in_stock
    await db.commit()
    await db.refresh(db_product)
    return db_product


async def delete_product(db: AsyncSession, db_product: Product) -> Product:
    await db.delete(db_product)
    await db.commit()
    return db_product
