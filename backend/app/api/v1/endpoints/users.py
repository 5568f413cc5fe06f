# backend/app/api/v1/endpoints/users.py
"""
Endpoints de usuarios: acceso con el proveedor externo, cuentas con
contraseña, perfil y cierre de sesión.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.config import Settings
from app.db.models.user_model import User
from app.schemas.user_schema import (
    AuthResponse,
    FirebaseAuthRequest,
    RefreshTokenRequest,
    RefreshTokenResponse,
    UserLogin,
    UserProfile,
    UserPublic,
    UserRegister,
)
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()

DAY_SECONDS = 24 * 60 * 60


def _set_cookie(response: Response, settings: Settings, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=key,
        value=value,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "strict",
        max_age=max_age,
    )


@router.post("/firebase-auth", response_model=AuthResponse)
async def firebase_auth(
    auth_in: FirebaseAuthRequest,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
):
    """Verifica el ID token externo y emite un refresh token propio."""
    user, refresh_token = await auth_service.firebase_login(db, auth_in.id_token)
    _set_cookie(response, settings, "refreshToken", refresh_token, settings.REFRESH_TOKEN_EXPIRE_DAYS * DAY_SECONDS)
    logger.info(f"✅ AUTH: Acceso de {user.email}")
    return AuthResponse(
        message="Authentication successful",
        user=UserPublic.model_validate(user),
        refresh_token=refresh_token,
    )


@router.post("/refresh-token", response_model=RefreshTokenResponse)
async def refresh_token(
    token_in: RefreshTokenRequest,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
):
    new_token = await auth_service.rotate_refresh_token(db, token_in.refresh_token)
    _set_cookie(response, settings, "refreshToken", new_token, settings.REFRESH_TOKEN_EXPIRE_DAYS * DAY_SECONDS)
    return RefreshTokenResponse(refresh_token=new_token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_in: UserRegister,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
):
    user, token = await auth_service.register(db, user_in)
    _set_cookie(response, settings, "token", token, settings.ACCESS_TOKEN_EXPIRE_DAYS * DAY_SECONDS)
    return AuthResponse(message="New user created successfully", user=UserPublic.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login_user(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
):
    user, token = await auth_service.login(db, credentials)
    _set_cookie(response, settings, "token", token, settings.ACCESS_TOKEN_EXPIRE_DAYS * DAY_SECONDS)
    logger.info(f"✅ AUTH: Login de {user.email}")
    return AuthResponse(message="User logged-in successfully", user=UserPublic.model_validate(user), token=token)


@router.get("/me", response_model=UserProfile)
async def read_current_user(user: User = Depends(deps.get_current_user)):
    """Perfil del usuario autenticado, incluido el carrito almacenado."""
    return user


@router.post("/logout")
async def logout_user(
    response: Response,
    db: AsyncSession = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user),
):
    """Invalida el refresh token y borra las cookies de sesión."""
    await auth_service.logout(db, user)
    response.delete_cookie("refreshToken")
    response.delete_cookie("token")
    return {"success": True, "message": "Logged out successfully"}
