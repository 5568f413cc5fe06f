# backend/app/api/v1/endpoints/orders.py
"""
Endpoints de pedidos: contra reembolso, pago online e historial.
"""

from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user_model import User
from app.schemas.order_schema import OrderRequest, OrderResponse, PaymentType
from app.services.cart_components.catalog import Catalog
from app.services.order_service import order_service

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/cod", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_cod_order(
    order_in: OrderRequest,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
):
    """Pedido contra reembolso: queda pendiente de pago hasta la entrega."""
    logger.info(f"🧾 PEDIDO: {user.email} crea pedido COD con {len(order_in.items)} líneas")
    return await order_service.place_order(db, user, order_in, PaymentType.COD, catalog)

@router.post("/online", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_online_order(
    order_in: OrderRequest,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
):
    """Pedido con pago online. El cobro lo confirma la pasarela de pago."""
    logger.info(f"🧾 PEDIDO: {user.email} crea pedido online con {len(order_in.items)} líneas")
    return await order_service.place_order(db, user, order_in, PaymentType.ONLINE, catalog)

@router.get("/user", response_model=List[OrderResponse])
async def get_user_orders(
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
):
    return await order_service.get_user_orders(db, user)

@router.get("/seller", response_model=List[OrderResponse])
async def get_all_orders(
    db: AsyncSession = Depends(deps.get_db),
    seller: User = Depends(deps.require_seller),
):
    return await order_service.get_all_orders(db)
