# backend/app/db/models/order_model.py
"""
Este archivo contiene el modelo de pedido para la aplicación.
"""

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base, new_document_id
from app.db.models.address_model import Address  # noqa: F401  (relación Order.address)
from app.db.models.user_model import User  # noqa: F401  (relación Order.user)

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(24), primary_key=True, default=new_document_id)
    user_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    address_id = Column(String(24), ForeignKey("addresses.id"), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(50), nullable=False, default="Order Placed")
    payment_type = Column(String(20), nullable=False)  # "COD" | "Online"
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    user = relationship("User", back_populates="orders")
    address = relationship("Address")

    def __repr__(self):
        return f"<Order(id={self.id}, user_id='{self.user_id}', status='{self.status}')>"


class OrderItem(Base):
    __tablename__ = "order_items"

    item_id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(24), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(24), nullable=False)
    # Nombre copiado al crear el pedido: el producto puede desaparecer del catálogo
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    size = Column(String(50), nullable=True)
    color = Column(String(100), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)  # Precio unitario al momento de la compra

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem(id={self.item_id}, order_id={self.order_id}, product_id='{self.product_id}')>"
