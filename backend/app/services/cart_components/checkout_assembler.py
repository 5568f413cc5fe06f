# backend/app/services/cart_components/checkout_assembler.py
"""
Convierte el carrito resuelto en las líneas del pedido.

Solo entran las líneas que se pueden resolver contra el catálogo actual: es
preferible omitir un artículo que cobrar un precio no verificado.
"""

from typing import List, Optional

from app.schemas.order_schema import OrderLine, OrderRequest
from app.services.cart_components.cart_engine import CartEngine
from app.services.cart_components.catalog import Catalog


def to_order_lines(cart: CartEngine, catalog: Optional[Catalog] = None) -> List[OrderLine]:
    return [
        OrderLine(product=row.product.id, quantity=row.quantity, size=row.size, color=row.color)
        for row in cart.materialize_display_rows(catalog)
    ]


def build_order_request(cart: CartEngine, address_id: str, catalog: Optional[Catalog] = None) -> OrderRequest:
    """Cuerpo `{items, address}` común a los pedidos contra reembolso y online."""
    return OrderRequest(items=to_order_lines(cart, catalog), address=address_id)
