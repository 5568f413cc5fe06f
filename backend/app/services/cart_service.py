# backend/app/services/cart_service.py
"""
Servicio de Carrito de Compras para la aplicación.

Une el núcleo del carrito (`cart_components`) con la petición HTTP: construye
un CartEngine por petición a partir del carrito persistido del usuario y la
instantánea del catálogo. Tras cada mutación el mapa completo se escribe en el
registro del usuario antes de responder, así la siguiente petición parte
siempre del carrito ya guardado. Si la escritura falla se registra y la
siguiente mutación vuelve a escribir el mapa completo.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import PersistenceFailure
from app.crud import user_crud
from app.db.models.user_model import User
from app.schemas.cart_schema import CartView
from app.schemas.product_schema import ProductResponse
from app.services.cart_components.cart_engine import CartEngine, CartSnapshot
from app.services.cart_components.catalog import Catalog
from app.services.cart_components.variant_resolver import resolve_variant

logger = logging.getLogger(__name__)


class CartService:
    """
    Servicio para gestionar el carrito de la sesión de un usuario autenticado.
    """
    def __init__(
        self,
        variant_categories: Optional[Iterable[str]] = None,
        currency: Optional[str] = None,
    ):
        self.variant_categories = list(variant_categories or settings.VARIANT_CATEGORIES)
        self.currency = currency or settings.CURRENCY

    def open_cart(self, user: User, catalog: Catalog) -> CartEngine:
        """Carrito de la sesión construido a partir del mapa guardado en el usuario."""
        return CartEngine.from_stored(user.cart_items, catalog=catalog)

    async def save_cart(self, db: AsyncSession, user_id: str, cart: CartEngine) -> None:
        """
        Escribe el mapa completo en el registro del usuario. Los fallos se
        registran y no llegan al cliente: la respuesta refleja la mutación local.
        """
        snapshot = cart.snapshot()
        try:
            updated = await user_crud.update_cart_items(db, user_id, snapshot)
            if updated is None:
                raise PersistenceFailure(f"User {user_id} no longer exists")
            logger.debug(f"CARRITO: Carrito del usuario {user_id} persistido ({len(snapshot)} líneas)")
        except (SQLAlchemyError, PersistenceFailure) as e:
            await db.rollback()
            failure = e if isinstance(e, PersistenceFailure) else PersistenceFailure(str(e))
            logger.error(f"❌ CARRITO: No se pudo persistir el carrito del usuario {user_id}: {failure}")

    def add_variant(
        self,
        cart: CartEngine,
        product: ProductResponse,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CartSnapshot:
        """
        Valida la selección y añade una unidad con el precio decidido en el
        servidor. Si la selección no es válida no se toca el carrito.
        """
        resolved = resolve_variant(product, size, color, self.variant_categories)
        snapshot = cart.add_item(product.id, resolved.size, resolved.color, resolved.unit_price)
        logger.info(
            f"🛒 CARRITO: +1 '{product.name}' (talla={resolved.size}, color={resolved.color}, precio={resolved.unit_price})"
        )
        return snapshot

    async def replace_cart(self, db: AsyncSession, user: User, cart_items: Dict[str, Any]) -> User:
        """Sustitución completa del mapa, escrita de forma síncrona."""
        updated = await user_crud.update_cart_items(db, user.id, cart_items)
        if updated is None:
            raise PersistenceFailure(f"User {user.id} no longer exists")
        return updated

    def build_view(self, cart: CartEngine) -> CartView:
        return CartView(
            items=cart.snapshot(),
            rows=cart.materialize_display_rows(),
            count=cart.count(),
            total=float(cart.total()),
            currency=self.currency,
        )
