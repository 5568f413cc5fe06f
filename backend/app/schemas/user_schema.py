# backend/app/schemas/user_schema.py
"""
Esquemas Pydantic para usuarios y autenticación.
"""

from typing import Any, Dict, Optional
import enum

from pydantic import EmailStr, Field

from app.schemas.product_schema import CamelModel


class UserRole(str, enum.Enum):
    USER = "user"
    SELLER = "seller"


class UserRegister(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class FirebaseAuthRequest(CamelModel):
    id_token: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class UserPublic(CamelModel):
    """Datos del usuario que se devuelven al cliente (sin credenciales)."""
    id: str
    name: str
    email: str
    role: UserRole


class UserProfile(UserPublic):
    # Carrito persistido tal cual está almacenado (CartKey -> entrada)
    cart_items: Dict[str, Any] = {}


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    user: UserPublic
    token: Optional[str] = None
    refresh_token: Optional[str] = None


class RefreshTokenResponse(CamelModel):
    success: bool = True
    message: str = "Token refreshed successfully"
    refresh_token: str
