# backend/app/services/cart_components/catalog.py
"""
Instantánea indexada del catálogo.

Se construye una vez por carga del catálogo para que el motor del carrito
resuelva cada línea por ID en O(1) en lugar de recorrer la lista de productos.
"""

from typing import Dict, Iterable, Iterator, List, Optional

from app.schemas.product_schema import ProductResponse


class Catalog:
    """Vista de solo lectura del catálogo en un momento dado."""

    def __init__(self, products: Iterable[ProductResponse] = ()):
        self._products: List[ProductResponse] = list(products)
        self._by_id: Dict[str, ProductResponse] = {}
        for product in self._products:
            # Ante IDs duplicados gana la primera aparición
            self._by_id.setdefault(product.id, product)

    def get(self, product_id: Optional[str]) -> Optional[ProductResponse]:
        if product_id is None:
            return None
        return self._by_id.get(product_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def __iter__(self) -> Iterator[ProductResponse]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    @property
    def products(self) -> List[ProductResponse]:
        return list(self._products)
