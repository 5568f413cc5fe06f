# backend/app/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para los modelos Order y OrderItem.
"""

from datetime import datetime
from typing import List, Optional
import enum

from pydantic import Field

from app.schemas.address_schema import AddressResponse
from app.schemas.product_schema import CamelModel


class PaymentType(str, enum.Enum):
    """Formas de pago admitidas."""
    COD = "COD"
    ONLINE = "Online"


class OrderStatus(str, enum.Enum):
    """Define los posibles estados de un pedido."""
    PLACED = "Order Placed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class OrderLine(CamelModel):
    """Línea de pedido tal y como la envía la tienda: {product, quantity, size}."""
    product: str = Field(..., description="ID del producto")
    quantity: int = Field(..., gt=0)
    size: Optional[str] = None
    color: Optional[str] = None


class OrderRequest(CamelModel):
    """Cuerpo común de los endpoints de pedido contra reembolso y pago online."""
    items: List[OrderLine] = []
    address: str = Field(..., description="ID de la dirección de envío")


class OrderItemResponse(CamelModel):
    product_id: str
    product_name: str
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    price: float


class OrderResponse(CamelModel):
    """Esquema completo de respuesta para un pedido."""
    id: str
    user_id: str
    amount: float
    status: str
    payment_type: PaymentType
    is_paid: bool
    address: Optional[AddressResponse] = None
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime] = None
