# backend/app/crud/user_crud.py
"""
Operaciones CRUD para el modelo User.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user_model import User


async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.email == email.lower()))
    return result.scalars().first()


async def get_user_by_firebase_uid(db: AsyncSession, firebase_uid: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.firebase_uid == firebase_uid))
    return result.scalars().first()


async def get_user_by_refresh_token(db: AsyncSession, refresh_token: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.refresh_token == refresh_token))
    return result.scalars().first()


async def create_user(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    role: str = "user",
    password_hash: Optional[str] = None,
    firebase_uid: Optional[str] = None,
) -> User:
    db_user = User(
        name=name,
        email=email.lower(),
        role=role,
        password=password_hash,
        firebase_uid=firebase_uid,
        cart_items={},
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    return db_user


async def update_user(db: AsyncSession, db_user: User, updates: Dict[str, Any]) -> User:
    for field, value in updates.items():
        setattr(db_user, field, value)
    await db.commit()
    await db.refresh(db_user)
    return db_user


async def update_cart_items(db: AsyncSession, user_id: str, cart_items: Dict[str, Any]) -> Optional[User]:
    """
    Sustituye el mapa completo del carrito del usuario. Se asigna un dict nuevo
    para que SQLAlchemy detecte el cambio en la columna JSON.
    """
    db_user = await get_user(db, user_id)
    if db_user is None:
        return None
    db_user.cart_items = dict(cart_items)
    await db.commit()
    await db.refresh(db_user)
    return db_user


async def register_failed_login(
    db: AsyncSession, db_user: User, max_attempts: int, locked_until: datetime
) -> User:
    """Suma un intento fallido y bloquea la cuenta al alcanzar el máximo."""
    db_user.login_attempts = (db_user.login_attempts or 0) + 1
    if db_user.login_attempts >= max_attempts:
        db_user.is_locked = True
        db_user.locked_until = locked_until
    await db.commit()
    await db.refresh(db_user)
    return db_user
