# backend/app/services/cart_components/cart_entry.py
"""
Normalizador de entradas del carrito.

En el registro del usuario conviven dos formatos por cada clave:
- antiguo: un entero positivo con la cantidad (sin precio guardado).
- actual: `{qty, productId, size, sizePrice, color}`.

Aquí se convierten ambos a un tipo etiquetado (`LegacyCartEntry` |
`CurrentCartEntry`) y se genera el formato a persistir. Las escrituras nuevas
producen siempre el formato objeto.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from app.core.exceptions import MalformedCartEntry

TWO_PLACES = Decimal("0.01")

StoredCartValue = Union[int, Dict[str, Any]]


def as_money(value: Any) -> Decimal:
    """Convierte un precio (float, int, str o Decimal) a Decimal sin arrastrar error binario."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    """Redondeo comercial a 2 decimales (mitad hacia arriba, no truncado)."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class LegacyCartEntry(BaseModel):
    """Entrada antigua: solo cantidad. Talla y color se deducen de la clave."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy"] = "legacy"
    quantity: int


class CurrentCartEntry(BaseModel):
    """Entrada actual con la identidad de la variante y el precio capturado al añadir."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["current"] = "current"
    quantity: int
    product_id: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    size_price: Optional[Decimal] = None


CartEntry = Union[LegacyCartEntry, CurrentCartEntry]


def _read_quantity(value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedCartEntry(f"Quantity must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise MalformedCartEntry(f"Quantity must be an integer, got {value!r}")


def _read_optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value) or None
    raise MalformedCartEntry(f"Expected text, got {value!r}")


def read_entry(raw_value: Any) -> CartEntry:
    """
    Interpreta un valor almacenado.

    Un número es una entrada antigua; un objeto es una entrada actual cuya
    cantidad es `qty` (0 si falta) y cuyo precio capturado es `sizePrice`
    cuando existe y no es nulo. Cualquier otra cosa es MalformedCartEntry.
    """
    if isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool):
        return LegacyCartEntry(quantity=_read_quantity(raw_value))

    if isinstance(raw_value, Mapping):
        size_price = raw_value.get("sizePrice")
        if size_price is not None:
            if isinstance(size_price, bool) or not isinstance(size_price, (int, float, str, Decimal)):
                raise MalformedCartEntry(f"sizePrice must be a number, got {size_price!r}")
            try:
                size_price = as_money(size_price)
            except ArithmeticError:
                raise MalformedCartEntry(f"sizePrice must be a number, got {size_price!r}")

        return CurrentCartEntry(
            quantity=_read_quantity(raw_value.get("qty", 0)),
            product_id=_read_optional_text(raw_value.get("productId")),
            size=_read_optional_text(raw_value.get("size")),
            color=_read_optional_text(raw_value.get("color")),
            size_price=size_price,
        )

    raise MalformedCartEntry(f"Unsupported cart entry value: {raw_value!r}")


def write_entry(
    product_id: Optional[str],
    size: Optional[str],
    color: Optional[str],
    quantity: int,
    unit_price_snapshot: Optional[Decimal] = None,
) -> Dict[str, Any]:
    """Genera el formato objeto que se persiste en el registro del usuario."""
    return {
        "qty": quantity,
        "productId": product_id,
        "size": size,
        "sizePrice": float(unit_price_snapshot) if unit_price_snapshot is not None else None,
        "color": color,
    }


def to_stored(entry: CartEntry) -> StoredCartValue:
    """
    Forma almacenable de una entrada en memoria. Las entradas antiguas que no se
    han tocado se conservan tal cual; todo lo que el motor modifica ya es
    CurrentCartEntry.
    """
    if isinstance(entry, LegacyCartEntry):
        return entry.quantity
    return write_entry(entry.product_id, entry.size, entry.color, entry.quantity, entry.size_price)


def price_snapshot(entry: CartEntry) -> Optional[Decimal]:
    if isinstance(entry, CurrentCartEntry):
        return entry.size_price
    return None
