# backend/app/schemas/address_schema.py
"""
Esquemas Pydantic para la libreta de direcciones del usuario.
"""

from pydantic import EmailStr, Field

from app.schemas.product_schema import CamelModel


class AddressBase(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zipcode: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=5)


class AddressCreate(AddressBase):
    pass


class AddressResponse(AddressBase):
    id: str
    user_id: str
