# backend/app/db/init_db.py
"""
Creación del esquema de base de datos.

Importa todos los modelos para que queden registrados en `Base.metadata`
antes de crear las tablas que falten.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.database import Base, engine as default_engine
from app.db.models import address_model, hero_banner_model, order_model, product_model, user_model  # noqa: F401

logger = logging.getLogger(__name__)


async def init_db(engine: AsyncEngine = default_engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ BD: Tablas verificadas/creadas")
