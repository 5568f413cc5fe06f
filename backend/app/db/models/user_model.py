# backend/app/db/models/user_model.py
"""
Se encarga de definir el modelo de usuario, incluido el carrito persistido.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base, JSONDocument, new_document_id

class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=new_document_id)
    # UID del proveedor de identidad externo; nulo para cuentas antiguas con contraseña
    firebase_uid = Column(String(128), unique=True, index=True, nullable=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=True)  # Hash bcrypt
    role = Column(String(20), nullable=False, default="user")  # "user" | "seller"
    refresh_token = Column(Text, nullable=True)
    refresh_token_expiry = Column(DateTime(timezone=True), nullable=True)
    # Mapa CartKey -> cantidad (formato antiguo) u objeto {qty, productId, size, sizePrice, color}
    cart_items = Column(JSONDocument, nullable=False, default=dict)
    last_login = Column(DateTime(timezone=True), nullable=True)
    login_attempts = Column(Integer, nullable=False, default=0)
    is_locked = Column(Boolean, nullable=False, default=False)
    locked_until = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    addresses = relationship("Address", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
