# backend/app/services/order_service.py
"""
Servicio de pedidos.

El cliente envía solo la identidad de cada línea (producto, cantidad, talla y
color); el precio unitario se vuelve a calcular aquí contra el catálogo para
no confiar en importes llegados del navegador.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import address_crud, order_crud
from app.db.models.order_model import Order
from app.db.models.user_model import User
from app.schemas.order_schema import OrderRequest, PaymentType
from app.services.cart_components.cart_entry import round_money
from app.services.cart_components.catalog import Catalog
from app.services.cart_components.variant_resolver import resolve_variant

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, variant_categories: Optional[Iterable[str]] = None):
        self.variant_categories = list(variant_categories or settings.VARIANT_CATEGORIES)

    def price_lines(self, order_in: OrderRequest, catalog: Catalog):
        """
        Devuelve (líneas del pedido, importe total). Producto desconocido -> 404;
        selección inválida o sin stock -> CartValidationError (400).
        """
        if not order_in.items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The order must contain at least one item"
            )

        lines = []
        amount = Decimal("0")
        for line in order_in.items:
            product = catalog.get(line.product)
            if product is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Product {line.product} not found"
                )
            resolved = resolve_variant(product, line.size, line.color, self.variant_categories)
            lines.append({
                "product_id": product.id,
                "product_name": product.name,
                "quantity": line.quantity,
                "size": resolved.size,
                "color": resolved.color,
                "price": resolved.unit_price,
            })
            amount += round_money(resolved.unit_price * line.quantity)
        return lines, round_money(amount)

    async def place_order(
        self,
        db: AsyncSession,
        user: User,
        order_in: OrderRequest,
        payment_type: PaymentType,
        catalog: Catalog,
    ) -> Order:
        address = await address_crud.get_user_address(db, user.id, order_in.address)
        if address is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")

        lines, amount = self.price_lines(order_in, catalog)

        order = await order_crud.create_order(
            db,
            user_id=user.id,
            address_id=address.id,
            amount=amount,
            payment_type=payment_type.value,
            items=lines,
            # El pago online se confirma fuera de este servicio
            is_paid=False,
            clear_cart=True,
        )

        logger.info(f"✅ PEDIDO: {order.id} ({payment_type.value}) de {user.email} por {amount}")
        return order

    async def get_user_orders(self, db: AsyncSession, user: User) -> List[Order]:
        return await order_crud.get_orders_by_user(db, user.id)

    async def get_all_orders(self, db: AsyncSession) -> List[Order]:
        return await order_crud.get_all_orders(db)

# Instancia única del servicio para ser usada en la aplicación
order_service = OrderService()
