# backend/app/services/cart_components/variant_resolver.py
"""
Resolución de variantes (talla/color) y del precio unitario autoritativo.

La validación se ejecuta antes de cualquier mutación del carrito: si falta una
selección obligatoria se lanza el error concreto (MissingSizeSelection,
MissingColorSelection, ...) para que la interfaz muestre el mensaje adecuado.
"""

from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import BaseModel

from app.core.exceptions import (
    MissingColorSelection,
    MissingSizeSelection,
    ProductOutOfStock,
    UnknownColorSelection,
    UnknownSizeSelection,
)
from app.schemas.product_schema import ColorOption, ProductResponse, SizeOption, normalize_size_name
from app.services.cart_components.cart_entry import as_money

# Categorías de ropa en las que la talla es obligatoria
DEFAULT_VARIANT_CATEGORIES = frozenset({"Mens-Clothing", "Womens-Clothing", "Kids-Clothing"})


class ResolvedVariant(BaseModel):
    """Resultado de la resolución: precio unitario, MRP y selección normalizada."""
    unit_price: Decimal
    mrp: Optional[Decimal] = None
    size: Optional[str] = None
    color: Optional[str] = None


def distinct_sizes(sizes: Iterable[SizeOption]) -> List[SizeOption]:
    """Tallas sin duplicados por nombre; se conserva la primera aparición."""
    seen = set()
    unique = []
    for option in sizes:
        if option.name in seen:
            continue
        seen.add(option.name)
        unique.append(option)
    return unique


def find_size(product: ProductResponse, size_name: Optional[str]) -> Optional[SizeOption]:
    if not size_name:
        return None
    wanted = normalize_size_name(size_name)
    for option in distinct_sizes(product.sizes):
        if option.name == wanted:
            return option
    return None


def find_color(product: ProductResponse, color_name: Optional[str]) -> Optional[ColorOption]:
    if not color_name:
        return None
    wanted = color_name.strip().lower()
    for option in product.colors:
        if option.name.lower() == wanted:
            return option
    return None


def is_variant_category(category: str, variant_categories: Optional[Iterable[str]] = None) -> bool:
    categories = DEFAULT_VARIANT_CATEGORIES if variant_categories is None else variant_categories
    return category in categories


def requires_size_selection(product: ProductResponse, variant_categories: Optional[Iterable[str]] = None) -> bool:
    return is_variant_category(product.category, variant_categories) and bool(product.sizes)


def resolve_variant(
    product: ProductResponse,
    size: Optional[str] = None,
    color: Optional[str] = None,
    variant_categories: Optional[Iterable[str]] = None,
) -> ResolvedVariant:
    """
    Valida la selección y decide el precio unitario.

    - Categoría de ropa con tallas definidas: la talla es obligatoria.
    - Producto con colores definidos: el color es obligatorio.
    - Con talla: precio de la talla si existe, si no offerPrice; MRP de la
      talla si existe, si no el precio base del producto.
    - Sin talla aplicable: offerPrice y precio base. Una talla enviada para un
      producto sin variantes de talla se descarta.
    """
    if not product.in_stock:
        raise ProductOutOfStock(f"'{product.name}' is out of stock")

    size_option = None
    if requires_size_selection(product, variant_categories):
        if not size:
            raise MissingSizeSelection()
        size_option = find_size(product, size)
        if size_option is None:
            raise UnknownSizeSelection(f"Size '{size}' is not available for '{product.name}'")
        if not size_option.in_stock:
            raise ProductOutOfStock(f"Size '{size_option.name}' of '{product.name}' is out of stock")

    color_name = None
    if product.colors:
        if not color:
            raise MissingColorSelection()
        color_option = find_color(product, color)
        if color_option is None:
            raise UnknownColorSelection(f"Color '{color}' is not available for '{product.name}'")
        color_name = color_option.name

    if size_option is not None:
        unit_price = size_option.price if size_option.price is not None else product.offer_price
        mrp = size_option.mrp_price if size_option.mrp_price is not None else product.price
        return ResolvedVariant(
            unit_price=as_money(unit_price),
            mrp=as_money(mrp),
            size=size_option.name,
            color=color_name,
        )

    return ResolvedVariant(
        unit_price=as_money(product.offer_price),
        mrp=as_money(product.price),
        size=None,
        color=color_name,
    )
