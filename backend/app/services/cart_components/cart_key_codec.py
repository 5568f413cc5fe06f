# backend/app/services/cart_components/cart_key_codec.py
"""
Codificación de las claves del carrito.

Cada línea del carrito se guarda bajo una clave `productId[-size][-color]`.
El separador no se escapa, así que un ID de producto puede contener guiones y
la única forma de recuperarlo es contrastar prefijos contra los IDs conocidos
del catálogo. Las entradas nuevas guardan además productId/size/color de forma
explícita en el valor; este decodificador solo es imprescindible para las
entradas antiguas que únicamente guardan la cantidad.
"""

from typing import Container, NamedTuple, Optional

KEY_SEPARATOR = "-"


class DecodedCartKey(NamedTuple):
    product_id: str
    size: Optional[str]
    color: Optional[str]
    # False cuando ningún prefijo coincide con un producto conocido
    resolved: bool


def compose_cart_key(product_id: str, size: Optional[str] = None, color: Optional[str] = None) -> str:
    """Une productId, talla y color con '-', omitiendo los componentes ausentes."""
    cart_key = str(product_id)
    if size:
        cart_key += f"{KEY_SEPARATOR}{size}"
    if color:
        cart_key += f"{KEY_SEPARATOR}{color}"
    return cart_key


def decompose_cart_key(cart_key: str, known_product_ids: Container[str]) -> DecodedCartKey:
    """
    Recupera productId, talla y color a partir de una clave almacenada.

    Orden de búsqueda: "todo menos el último segmento" como productId (el
    último segmento es la talla); después la clave completa; por último los
    prefijos más cortos, de mayor a menor, para claves con talla y color. El
    primer segmento tras el prefijo es la talla y el resto (que puede contener
    guiones) el color. Si nada coincide se devuelve la clave entera como
    productId marcada como no resuelta.
    """
    parts = cart_key.split(KEY_SEPARATOR)

    if len(parts) > 1:
        candidate_id = KEY_SEPARATOR.join(parts[:-1])
        if candidate_id in known_product_ids:
            return DecodedCartKey(candidate_id, parts[-1] or None, None, True)

    if cart_key in known_product_ids:
        return DecodedCartKey(cart_key, None, None, True)

    for cut in range(len(parts) - 2, 0, -1):
        candidate_id = KEY_SEPARATOR.join(parts[:cut])
        if candidate_id in known_product_ids:
            remainder = parts[cut:]
            size = remainder[0] or None
            color = KEY_SEPARATOR.join(remainder[1:]) or None
            return DecodedCartKey(candidate_id, size, color, True)

    return DecodedCartKey(cart_key, None, None, False)
