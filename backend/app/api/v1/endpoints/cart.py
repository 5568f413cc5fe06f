# backend/app/api/v1/endpoints/cart.py
"""
Este archivo contiene los endpoints para el carrito de compras.

Cada petición construye el carrito de la sesión a partir del carrito guardado
en el usuario autenticado. Las mutaciones escriben el carrito completo antes de
responder con el estado resultante.
"""

from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.config import Settings
from app.db.models.user_model import User
from app.schemas.cart_schema import CartItemAdd, CartQuantityUpdate, CartUpdate, CartView
from app.schemas.order_schema import OrderLine
from app.services.cart_components.catalog import Catalog
from app.services.cart_components.checkout_assembler import to_order_lines
from app.services.cart_service import CartService

logger = logging.getLogger(__name__)

# Router para el carrito de compras
router = APIRouter()

def get_cart_service(settings: Settings = Depends(deps.get_settings)) -> CartService:
    """
    Dependencia para obtener el servicio de carrito.
    """
    return CartService(settings.VARIANT_CATEGORIES, settings.CURRENCY)

@router.get("", response_model=CartView)
async def get_cart(
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Estado del carrito: mapa almacenado, líneas resueltas, unidades y total.
    """
    cart = cart_service.open_cart(user, catalog)
    return cart_service.build_view(cart)

@router.patch("/update", response_model=CartView)
async def update_cart(
    cart_in: CartUpdate,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Sustituye el carrito completo (acepta ambos formatos de entrada).
    """
    user = await cart_service.replace_cart(db, user, cart_in.cart_items)
    logger.info(f"🛒 CARRITO: Carrito de {user.email} sustituido ({len(cart_in.cart_items)} líneas)")
    return cart_service.build_view(cart_service.open_cart(user, catalog))

@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=CartView)
async def add_item_to_cart(
    item: CartItemAdd,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Añade una unidad de la variante seleccionada. El precio unitario se decide
    en el servidor; si falta la talla o el color obligatorio se responde 400
    sin modificar el carrito.
    """
    product = catalog.get(item.product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")

    cart = cart_service.open_cart(user, catalog)
    cart_service.add_variant(cart, product, item.size, item.color)
    await cart_service.save_cart(db, user.id, cart)
    return cart_service.build_view(cart)

@router.put("/items/{cart_key}", response_model=CartView)
async def set_item_quantity(
    cart_key: str,
    quantity_in: CartQuantityUpdate,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Fija la cantidad de una línea. Una clave inexistente no modifica nada.
    """
    cart = cart_service.open_cart(user, catalog)
    if cart_key in cart:
        cart.set_quantity(cart_key, quantity_in.quantity)
        await cart_service.save_cart(db, user.id, cart)
    return cart_service.build_view(cart)

@router.delete("/items/{cart_key}", response_model=CartView)
async def remove_one_from_cart(
    cart_key: str,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Quita una unidad de la línea; al llegar a cero la línea desaparece.
    """
    cart = cart_service.open_cart(user, catalog)
    if cart_key in cart:
        cart.remove_one(cart_key)
        await cart_service.save_cart(db, user.id, cart)
    return cart_service.build_view(cart)

@router.delete("", response_model=CartView)
async def clear_cart(
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Vacía completamente el carrito del usuario.
    """
    logger.info(f"🛒 CARRITO: Carrito de {user.email} vaciado")
    cart = cart_service.open_cart(user, catalog)
    cart.clear()
    await cart_service.save_cart(db, user.id, cart)
    return cart_service.build_view(cart)

@router.get("/order-lines", response_model=List[OrderLine])
async def get_order_lines(
    user: User = Depends(deps.get_current_user),
    catalog: Catalog = Depends(deps.get_catalog),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Líneas de pedido que se enviarían al confirmar la compra. Las líneas que no
    se pueden resolver contra el catálogo actual se omiten.
    """
    cart = cart_service.open_cart(user, catalog)
    return to_order_lines(cart)
