# backend/app/crud/order_crud.py
"""
Operaciones CRUD para el modelo Order.

Los pedidos se crean junto con sus líneas (y el vaciado del carrito) en una
sola transacción y se leen siempre con las líneas y la dirección precargadas
(selectinload), ya que en modo asíncrono no hay carga perezosa de relaciones.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.order_model import Order, OrderItem
from app.db.models.user_model import User


def _with_details(query):
    return query.options(
        selectinload(Order.items), selectinload(Order.address)
    ).execution_options(populate_existing=True)


async def create_order(
    db: AsyncSession,
    *,
    user_id: str,
    address_id: str,
    amount: Decimal,
    payment_type: str,
    items: List[Dict[str, Any]],
    is_paid: bool = False,
    clear_cart: bool = False,
) -> Order:
    """
    Crea un pedido con sus líneas. Cada línea es un dict con product_id,
    product_name, quantity, size, color y price. Con `clear_cart` el carrito
    del usuario se vacía en la misma transacción que el alta del pedido.
    """
    db_order = Order(
        user_id=user_id,
        address_id=address_id,
        amount=amount,
        payment_type=payment_type,
        is_paid=is_paid,
        items=[OrderItem(**item) for item in items],
    )
    db.add(db_order)
    if clear_cart:
        db_user = await db.get(User, user_id)
        if db_user is not None:
            db_user.cart_items = {}
    await db.commit()

    return await get_order(db, db_order.id)


async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
    result = await db.execute(_with_details(select(Order)).filter(Order.id == order_id))
    return result.scalars().first()


async def get_orders_by_user(db: AsyncSession, user_id: str) -> List[Order]:
    """Historial de pedidos del usuario, del más reciente al más antiguo."""
    query = _with_details(select(Order)).filter(Order.user_id == user_id).order_by(Order.created_at.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_all_orders(db: AsyncSession) -> List[Order]:
    result = await db.execute(_with_details(select(Order)).order_by(Order.created_at.desc()))
    return result.scalars().all()
