# backend/app/crud/hero_banner_crud.py
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.hero_banner_model import HeroBanner


async def get_active_banners(db: AsyncSession) -> List[HeroBanner]:
    """Banners activos por `order` ascendente y, a igualdad, los más recientes primero."""
    query = (
        select(HeroBanner)
        .filter(HeroBanner.is_active.is_(True))
        .order_by(HeroBanner.sort_order.asc(), HeroBanner.created_at.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()


async def get_all_banners(db: AsyncSession) -> List[HeroBanner]:
    query = select(HeroBanner).order_by(HeroBanner.sort_order.asc(), HeroBanner.created_at.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_banner(db: AsyncSession, banner_id: str) -> Optional[HeroBanner]:
    result = await db.execute(select(HeroBanner).filter(HeroBanner.id == banner_id))
    return result.scalars().first()


async def create_banner(db: AsyncSession, data: Dict[str, Any]) -> HeroBanner:
    db_banner = HeroBanner(**data)
    db.add(db_banner)
    await db.commit()
    await db.refresh(db_banner)
    return db_banner


async def update_banner(db: AsyncSession, db_banner: HeroBanner, updates: Dict[str, Any]) -> HeroBanner:
    for field, value in updates.items():
        setattr(db_banner, field, value)
    await db.commit()
    await db.refresh(db_banner)
    return db_banner


async def delete_banner(db: AsyncSession, db_banner: HeroBanner) -> None:
    await db.delete(db_banner)
    await db.commit()
