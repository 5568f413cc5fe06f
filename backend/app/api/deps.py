# backend/app/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API: sesión de base de datos, configuración, catálogo,
servicio de imágenes y usuario autenticado.
Los tests sustituyen estas dependencias mediante `app.dependency_overrides`.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import AsyncSessionLocal
from app.db.models.user_model import User
from app.services.auth_service import auth_service
from app.services.cart_components.catalog import Catalog
from app.services.catalog_service import CatalogService, catalog_service
from app.services.image_storage_service import ImageStorageService, image_storage_service

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session

def get_settings():
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings

def get_catalog_service() -> CatalogService:
    return catalog_service

async def get_catalog(
    db: AsyncSession = Depends(get_db),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Catalog:
    """Instantánea del catálogo para la petición en curso."""
    return await catalog.get_catalog(db)

def get_image_storage() -> ImageStorageService:
    return image_storage_service

# ========================================
# AUTENTICACIÓN
# ========================================

def _extract_token(request: Request) -> Optional[str]:
    """Cabecera `Authorization: Bearer <token>` o, si no viene, la cookie `token`."""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        if token:
            return token
    return request.cookies.get("token")

async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated, token missing, please login to access this",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await auth_service.authenticate(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

async def require_seller(user: User = Depends(get_current_user)) -> User:
    if user.role != "seller":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: For Seller only, you're not authorized to access this"
        )
    return user
