# backend/app/schemas/cart_schema.py
"""
Esquemas Pydantic para la gestión del carrito de la compra.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from app.core.exceptions import MalformedCartEntry
from app.schemas.product_schema import CamelModel, ProductResponse
from app.services.cart_components.cart_entry import read_entry


class CartItemAdd(CamelModel):
    """Esquema para añadir una unidad de una variante al carrito."""
    product_id: str
    size: Optional[str] = None
    color: Optional[str] = None


class CartQuantityUpdate(CamelModel):
    quantity: int = Field(..., ge=1)


class CartUpdate(CamelModel):
    """Sustitución completa del carrito (la clave es la CartKey)."""
    cart_items: Dict[str, Any] = {}

    @field_validator("cart_items")
    @classmethod
    def validate_entries(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        for cart_key, raw_value in value.items():
            try:
                entry = read_entry(raw_value)
            except MalformedCartEntry as e:
                raise ValueError(f"Invalid cart entry '{cart_key}': {e}")
            if entry.quantity < 1:
                raise ValueError(f"Invalid cart entry '{cart_key}': quantity must be at least 1")
        return value


class CartRow(CamelModel):
    """Línea del carrito resuelta contra el catálogo, lista para mostrar."""
    cart_key: str
    product: ProductResponse
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    unit_price: float
    subtotal: float


class CartView(CamelModel):
    """Esquema que representa el estado completo del carrito."""
    items: Dict[str, Any]  # Mapa almacenado tal cual (CartKey -> entrada)
    rows: List[CartRow]
    count: int
    total: float
    currency: str
