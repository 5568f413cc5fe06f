# backend/app/core/exceptions.py
"""
Excepciones de dominio de la tienda.

Los errores de validación del carrito se lanzan siempre antes de mutar el
estado y llevan un código `reason` estable para que la interfaz pueda mostrar
el mensaje adecuado. El resto de errores del núcleo del carrito se recuperan
localmente (exclusión de la línea o registro en el log).
"""

from typing import Dict


class StorefrontError(Exception):
    """Error base de la aplicación."""


# ========================================
# ERRORES DE VALIDACIÓN (corregibles por el usuario)
# ========================================

class CartValidationError(StorefrontError):
    """Selección inválida: bloquea la mutación del carrito."""
    reason = "invalid_selection"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, str]:
        return {"reason": self.reason, "message": self.message}


class MissingSizeSelection(CartValidationError):
    reason = "missing_size"

    def __init__(self, message: str = "Please select Size to continue"):
        super().__init__(message)


class MissingColorSelection(CartValidationError):
    reason = "missing_color"

    def __init__(self, message: str = "Please select Color to continue"):
        super().__init__(message)


class UnknownSizeSelection(CartValidationError):
    reason = "unknown_size"


class UnknownColorSelection(CartValidationError):
    reason = "unknown_color"


class ProductOutOfStock(CartValidationError):
    reason = "out_of_stock"


class InvalidCartQuantity(CartValidationError):
    reason = "invalid_quantity"


# ========================================
# ERRORES RECUPERADOS LOCALMENTE
# ========================================

class MalformedCartEntry(StorefrontError):
    """Valor almacenado que no es ni un entero positivo ni un objeto de línea."""


class UnresolvableCartEntry(StorefrontError):
    """La clave del carrito ya no corresponde a ningún producto del catálogo."""

    def __init__(self, cart_key: str):
        super().__init__(f"Cart key '{cart_key}' does not match any catalog product")
        self.cart_key = cart_key


class PersistenceFailure(StorefrontError):
    """Falló la escritura en segundo plano del carrito en el registro del usuario."""


class ImageUploadError(StorefrontError):
    """El servicio externo de imágenes no está disponible o rechazó la subida."""
