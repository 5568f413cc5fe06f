# backend/app/services/catalog_service.py
"""
Servicio del catálogo.

Construye la instantánea indexada (`Catalog`) que usa el núcleo del carrito.
La lista de productos se cachea en Redis bajo una única clave con TTL y se
invalida en cada escritura de productos. Si Redis falla se lee directamente de
la base de datos.
"""

import json
import logging
from typing import List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import product_crud
from app.schemas.product_schema import ProductResponse
from app.services.cart_components.catalog import Catalog

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "catalog:products"

# Conexión a Redis (se manejará de forma lazy)
_redis_client: Optional[Redis] = None

def _get_redis_client() -> Redis:
    """Inicializa y devuelve el cliente de Redis."""
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(
            f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}",
            decode_responses=True
        )
    return _redis_client


class CatalogService:
    def __init__(self, cache_enabled: Optional[bool] = None, ttl_seconds: Optional[int] = None):
        self.cache_enabled = settings.CATALOG_CACHE_ENABLED if cache_enabled is None else cache_enabled
        self.ttl_seconds = ttl_seconds or settings.CATALOG_CACHE_TTL_SECONDS

    # ========================================
    # CACHÉ
    # ========================================

    async def _read_cache(self) -> Optional[List[ProductResponse]]:
        if not self.cache_enabled:
            return None
        try:
            cached = await _get_redis_client().get(CATALOG_CACHE_KEY)
        except RedisError as e:
            logger.warning(f"⚠️ CATÁLOGO: Redis no disponible, se lee de la base de datos: {e}")
            return None
        if not cached:
            return None
        try:
            return [ProductResponse.model_validate(item) for item in json.loads(cached)]
        except ValueError as e:
            logger.error(f"❌ CATÁLOGO: Caché corrupta, se descarta: {e}")
            return None

    async def _write_cache(self, products: List[ProductResponse]) -> None:
        if not self.cache_enabled:
            return
        payload = json.dumps([product.model_dump(mode="json", by_alias=True) for product in products])
        try:
            await _get_redis_client().set(CATALOG_CACHE_KEY, payload, ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning(f"⚠️ CATÁLOGO: No se pudo guardar la caché: {e}")

    async def invalidate(self) -> None:
        if not self.cache_enabled:
            return
        try:
            await _get_redis_client().delete(CATALOG_CACHE_KEY)
            logger.debug("CATÁLOGO: Caché invalidada")
        except RedisError as e:
            logger.warning(f"⚠️ CATÁLOGO: No se pudo invalidar la caché: {e}")

    # ========================================
    # LECTURA
    # ========================================

    async def list_products(self, db: AsyncSession) -> List[ProductResponse]:
        """Todos los productos por orden de creación."""
        cached = await self._read_cache()
        if cached is not None:
            return cached

        db_products = await product_crud.get_products(db)
        products = [ProductResponse.model_validate(product) for product in db_products]
        await self._write_cache(products)
        logger.debug(f"CATÁLOGO: {len(products)} productos cargados de la base de datos")
        return products

    async def get_catalog(self, db: AsyncSession) -> Catalog:
        return Catalog(await self.list_products(db))

    async def refresh(self, db: AsyncSession) -> Catalog:
        """Fuerza la recarga desde la base de datos."""
        await self.invalidate()
        return await self.get_catalog(db)

# Instancia única del servicio para ser usada en la aplicación
catalog_service = CatalogService()
