# backend/app/db/models/product_model.py
from sqlalchemy import Boolean, Column, DateTime, Numeric, String
from sqlalchemy.sql import func

from app.db.database import Base, JSONDocument, new_document_id

class Product(Base):
    """
    Producto del catálogo. Las variantes de talla y color se guardan como
    documentos JSON dentro del propio producto.
    """
    __tablename__ = "products"

    id = Column(String(24), primary_key=True, default=new_document_id)
    name = Column(String(255), nullable=False, index=True)
    description = Column(JSONDocument, nullable=False, default=list)  # Lista de líneas
    price = Column(Numeric(10, 2), nullable=False)
    offer_price = Column(Numeric(10, 2), nullable=False)
    image = Column(JSONDocument, nullable=False, default=list)  # URLs; la primera es la miniatura
    category = Column(String(100), nullable=False, index=True)
    in_stock = Column(Boolean, nullable=False, default=True)
    # [{name, price, mrpPrice, inStock, sku}]
    sizes = Column(JSONDocument, nullable=False, default=list)
    # [{name, image}]
    colors = Column(JSONDocument, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
