# backend/app/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.

Se encarga de definir los esquemas del catálogo, incluyendo las variantes de
talla y color. Los nombres de los campos se exponen en camelCase
(`offerPrice`, `inStock`, `mrpPrice`) porque es el formato que consume la
tienda web; internamente se trabaja en snake_case.
"""

import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def normalize_size_name(value: str) -> str:
    """Normaliza un nombre de talla: mayúsculas y espacios convertidos en '_' ("uk 6" -> "UK_6")."""
    return re.sub(r"\s+", "_", value.strip().upper())


def promote_plain_sizes(value: Any) -> Any:
    """Acepta tallas como texto plano ("M") además del formato objeto."""
    if value is None:
        return []
    if isinstance(value, list):
        return [{"name": item} if isinstance(item, str) else item for item in value]
    return value


class CamelModel(BaseModel):
    """Base común: alias camelCase, población por nombre y lectura desde ORM."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ========================================
# ESQUEMAS AUXILIARES (VARIANTES)
# ========================================

class SizeOption(CamelModel):
    """Variante de talla. Si no tiene precio propio se usa el offerPrice del producto."""
    name: str
    price: Optional[float] = Field(default=None, gt=0)
    mrp_price: Optional[float] = Field(default=None, gt=0)
    in_stock: bool = True
    sku: Optional[str] = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        normalized = normalize_size_name(value)
        if not normalized:
            raise ValueError("Size name cannot be empty")
        return normalized


class ColorOption(CamelModel):
    """Variante de color con imagen de muestra opcional."""
    name: str = Field(..., max_length=40)
    image: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Color name cannot be empty")
        return value


# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(CamelModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str
    description: List[str] = []
    price: float = Field(..., gt=0)
    offer_price: float = Field(..., gt=0)
    image: List[str] = Field(..., min_length=1)
    category: str
    in_stock: bool = True
    sizes: List[SizeOption] = []
    colors: List[ColorOption] = []

    @field_validator("sizes", mode="before")
    @classmethod
    def accept_plain_sizes(cls, value: Any) -> Any:
        return promote_plain_sizes(value)

    @field_validator("name", "category")
    @classmethod
    def strip_required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be empty")
        return value


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un producto con las URLs de imagen ya alojadas."""
    pass


class ProductDraft(ProductBase):
    """Datos del formulario multipart: las imágenes llegan como ficheros aparte."""
    image: List[str] = []


class ProductUpdate(CamelModel):
    """Esquema para actualizar un producto. Todos los campos son opcionales."""
    name: Optional[str] = None
    description: Optional[List[str]] = None
    price: Optional[float] = Field(default=None, gt=0)
    offer_price: Optional[float] = Field(default=None, gt=0)
    image: Optional[List[str]] = Field(default=None, min_length=1)
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    sizes: Optional[List[SizeOption]] = None
    colors: Optional[List[ColorOption]] = None

    @field_validator("sizes", mode="before")
    @classmethod
    def accept_plain_sizes(cls, value: Any) -> Any:
        if value is None:
            return None
        return promote_plain_sizes(value)


class ProductStockUpdate(CamelModel):
    in_stock: bool


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class ProductResponse(ProductBase):
    """
    Esquema de respuesta para un producto. Es también la forma en la que el
    núcleo del carrito ve cada producto del catálogo.
    """
    id: str
    image: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
