# backend/app/services/cart_components/cart_engine.py
"""
Motor del carrito de la sesión activa.

Mantiene en memoria el mapa CartKey -> entrada del usuario autenticado y
expone las operaciones de añadir, fijar cantidad, quitar una unidad, contar,
totalizar y materializar las líneas a mostrar. Tras cada mutación se invoca el
callback opcional `on_change` con la instantánea completa del carrito; la capa
de servicio escribe esa instantánea en el usuario antes de responder.

Política de errores:
- Las selecciones inválidas se validan antes de llamar al motor.
- Las entradas cuya clave ya no corresponde a un producto del catálogo se
  excluyen de totales y líneas, pero se conservan en el mapa almacenado.
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from app.core.exceptions import InvalidCartQuantity, MalformedCartEntry, UnresolvableCartEntry
from app.schemas.cart_schema import CartRow
from app.schemas.product_schema import ProductResponse
from app.services.cart_components.cart_entry import (
    CartEntry,
    CurrentCartEntry,
    LegacyCartEntry,
    StoredCartValue,
    as_money,
    price_snapshot,
    read_entry,
    round_money,
    to_stored,
)
from app.services.cart_components.cart_key_codec import compose_cart_key, decompose_cart_key
from app.services.cart_components.catalog import Catalog
from app.services.cart_components.variant_resolver import find_size

logger = logging.getLogger(__name__)

CartSnapshot = Dict[str, StoredCartValue]
OnChange = Callable[[CartSnapshot], None]


class CartEngine:
    """
    Carrito de una sesión. No es un singleton: cada petición/sesión construye
    el suyo a partir del registro del usuario.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        entries: Optional[Mapping[str, CartEntry]] = None,
        on_change: Optional[OnChange] = None,
    ):
        self.catalog = catalog if catalog is not None else Catalog()
        self._entries: Dict[str, CartEntry] = dict(entries or {})
        self._on_change = on_change

    @classmethod
    def from_stored(
        cls,
        stored: Optional[Mapping[str, Any]],
        catalog: Optional[Catalog] = None,
        on_change: Optional[OnChange] = None,
    ) -> "CartEngine":
        """Carga el mapa persistido aceptando ambos formatos de entrada."""
        entries: Dict[str, CartEntry] = {}
        for cart_key, raw_value in (stored or {}).items():
            try:
                entry = read_entry(raw_value)
            except MalformedCartEntry as e:
                logger.warning(f"⚠️ CARRITO: Entrada '{cart_key}' descartada por formato inválido: {e}")
                continue
            if entry.quantity <= 0:
                logger.debug(f"CARRITO: Entrada '{cart_key}' con cantidad {entry.quantity} ignorada")
                continue
            entries[str(cart_key)] = entry
        return cls(catalog=catalog, entries=entries, on_change=on_change)

    # ========================================
    # ESTADO
    # ========================================

    def refresh_catalog(self, catalog: Catalog) -> None:
        """Sustituye la instantánea del catálogo usada para resolver las líneas."""
        self.catalog = catalog

    @property
    def entries(self) -> Dict[str, CartEntry]:
        return dict(self._entries)

    def get_entry(self, cart_key: str) -> Optional[CartEntry]:
        return self._entries.get(cart_key)

    def __contains__(self, cart_key: object) -> bool:
        return cart_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> CartSnapshot:
        """Mapa completo en su forma almacenable."""
        return {cart_key: to_stored(entry) for cart_key, entry in self._entries.items()}

    # ========================================
    # MUTACIONES
    # ========================================

    def add_item(
        self,
        product_id: str,
        size: Optional[str] = None,
        color: Optional[str] = None,
        unit_price: Optional[Any] = None,
    ) -> CartSnapshot:
        """
        Añade una unidad de la variante. Si la línea existe se incrementa; una
        entrada antigua se convierte al formato objeto sin precio capturado.
        """
        cart_key = compose_cart_key(product_id, size, color)
        existing = self._entries.get(cart_key)

        if existing is None:
            entry = CurrentCartEntry(
                quantity=1,
                product_id=product_id,
                size=size,
                color=color,
                size_price=as_money(unit_price) if unit_price is not None else None,
            )
        elif isinstance(existing, LegacyCartEntry):
            entry = CurrentCartEntry(
                quantity=existing.quantity + 1,
                product_id=product_id,
                size=size,
                color=color,
            )
        else:
            entry = existing.model_copy(update={"quantity": existing.quantity + 1})

        self._entries[cart_key] = entry
        return self._commit()

    def set_quantity(self, cart_key: str, quantity: int) -> CartSnapshot:
        """Sobrescribe la cantidad conservando precio y metadatos. Clave inexistente: no hace nada."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidCartQuantity(f"Quantity must be a positive integer, got {quantity!r}")

        existing = self._entries.get(cart_key)
        if existing is None:
            return self.snapshot()

        self._entries[cart_key] = self._with_quantity(cart_key, existing, quantity)
        return self._commit()

    def remove_one(self, cart_key: str) -> CartSnapshot:
        """Quita una unidad; al llegar a 0 la línea se elimina. Clave inexistente: no hace nada."""
        existing = self._entries.get(cart_key)
        if existing is None:
            return self.snapshot()

        remaining = existing.quantity - 1
        if remaining <= 0:
            del self._entries[cart_key]
        else:
            self._entries[cart_key] = self._with_quantity(cart_key, existing, remaining)
        return self._commit()

    def clear(self) -> CartSnapshot:
        self._entries = {}
        return self._commit()

    # ========================================
    # CONSULTAS
    # ========================================

    def count(self) -> int:
        """Suma de cantidades de todas las entradas, en cualquiera de los dos formatos."""
        return sum(entry.quantity for entry in self._entries.values() if entry.quantity > 0)

    def total(self) -> Decimal:
        """Importe total redondeado a 2 decimales; las líneas no resolubles no cuentan."""
        amount = Decimal("0")
        for cart_key, entry, product, size, _color in self._resolved_lines(self.catalog):
            amount += self._unit_price(entry, product, size) * entry.quantity
        return round_money(amount)

    def materialize_display_rows(self, catalog: Optional[Catalog] = None) -> List[CartRow]:
        """Una fila por línea resoluble, en el orden de iteración del mapa."""
        rows = []
        for cart_key, entry, product, size, color in self._resolved_lines(catalog if catalog is not None else self.catalog):
            unit_price = self._unit_price(entry, product, size)
            rows.append(
                CartRow(
                    cart_key=cart_key,
                    product=product,
                    quantity=entry.quantity,
                    size=size,
                    color=color,
                    unit_price=float(unit_price),
                    subtotal=float(round_money(unit_price * entry.quantity)),
                )
            )
        return rows

    # ========================================
    # RESOLUCIÓN CONTRA EL CATÁLOGO
    # ========================================

    def _resolved_lines(self, catalog: Catalog):
        for cart_key, entry in self._entries.items():
            if entry.quantity <= 0:
                continue
            try:
                product, size, color = self._resolve_line(cart_key, entry, catalog)
            except UnresolvableCartEntry as e:
                logger.debug(f"CARRITO: Línea excluida: {e}")
                continue
            yield cart_key, entry, product, size, color

    @staticmethod
    def _resolve_line(
        cart_key: str, entry: CartEntry, catalog: Catalog
    ) -> Tuple[ProductResponse, Optional[str], Optional[str]]:
        """
        Devuelve (producto, talla, color) de una línea. Las entradas actuales
        usan su identidad explícita: si su producto ya no existe la línea no se
        resuelve. La clave solo se decodifica para entradas sin identidad.
        """
        if isinstance(entry, CurrentCartEntry) and entry.product_id:
            product = catalog.get(entry.product_id)
            if product is None:
                raise UnresolvableCartEntry(cart_key)
            return product, entry.size, entry.color

        decoded = decompose_cart_key(cart_key, catalog)
        product = catalog.get(decoded.product_id) if decoded.resolved else None
        if product is None:
            raise UnresolvableCartEntry(cart_key)

        if isinstance(entry, CurrentCartEntry):
            return product, entry.size or decoded.size, entry.color or decoded.color
        return product, decoded.size, decoded.color

    @staticmethod
    def _unit_price(entry: CartEntry, product: ProductResponse, size: Optional[str]) -> Decimal:
        """
        Precedencia: precio capturado en la entrada; si no lo hay, precio de la
        talla del catálogo cuando la talla existe; si no, offerPrice.
        """
        snapshot = price_snapshot(entry)
        if snapshot is not None:
            return snapshot

        size_option = find_size(product, size)
        if size_option is not None and size_option.price is not None:
            return as_money(size_option.price)

        return as_money(product.offer_price)

    def _with_quantity(self, cart_key: str, entry: CartEntry, quantity: int) -> CurrentCartEntry:
        """Nueva cantidad en formato objeto; una entrada antigua toma su identidad de la clave."""
        if isinstance(entry, CurrentCartEntry):
            return entry.model_copy(update={"quantity": quantity})

        decoded = decompose_cart_key(cart_key, self.catalog)
        if not decoded.resolved:
            # Sin producto conocido la identidad se deja vacía y se vuelve a
            # deducir de la clave cuando el catálogo la reconozca.
            return CurrentCartEntry(quantity=quantity)
        return CurrentCartEntry(
            quantity=quantity,
            product_id=decoded.product_id,
            size=decoded.size,
            color=decoded.color,
        )

    def _commit(self) -> CartSnapshot:
        snapshot = self.snapshot()
        if self._on_change is not None:
            try:
                self._on_change(snapshot)
            except Exception as e:
                logger.error(f"❌ CARRITO: Fallo en el callback on_change del carrito: {e}", exc_info=True)
        return snapshot
