# backend/app/crud/address_crud.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.address_model import Address
from app.schemas.address_schema import AddressCreate


async def create_address(db: AsyncSession, user_id: str, address_in: AddressCreate) -> Address:
    db_address = Address(user_id=user_id, **address_in.model_dump())
    db.add(db_address)
    await db.commit()
    await db.refresh(db_address)
    return db_address


async def get_addresses_by_user(db: AsyncSession, user_id: str) -> List[Address]:
    result = await db.execute(select(Address).filter(Address.user_id == user_id))
    return result.scalars().all()


async def get_user_address(db: AsyncSession, user_id: str, address_id: str) -> Optional[Address]:
    """Dirección solo si pertenece al usuario indicado."""
    result = await db.execute(
        select(Address).filter(Address.id == address_id, Address.user_id == user_id)
    )
    return result.scalars().first()
