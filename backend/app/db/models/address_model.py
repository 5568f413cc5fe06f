# backend/app/db/models/address_model.py
"""
Se encarga de definir las direcciones de envío de los usuarios.
"""

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.db.database import Base, new_document_id

class Address(Base):
    __tablename__ = "addresses"

    id = Column(String(24), primary_key=True, default=new_document_id)
    user_id = Column(String(24), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    street = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zipcode = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=False)

    user = relationship("User", back_populates="addresses")
