# backend/app/db/models/hero_banner_model.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from app.db.database import Base, new_document_id

class HeroBanner(Base):
    """Banner promocional de la portada (versiones escritorio y móvil)."""
    __tablename__ = "hero_banners"

    id = Column(String(24), primary_key=True, default=new_document_id)
    desktop_image_url = Column(Text, nullable=True)
    mobile_image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    # "order" es palabra reservada en SQL; el atributo se llama sort_order
    sort_order = Column("order", Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<HeroBanner(id={self.id}, order={self.sort_order}, active={self.is_active})>"
