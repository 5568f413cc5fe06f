# backend/app/core/security.py
"""
Utilidades de seguridad: tokens de sesión locales, hash de contraseñas y
verificación de ID tokens del proveedor de identidad externo (Firebase).
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"


# ========================================
# CONTRASEÑAS
# ========================================

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# ========================================
# TOKENS LOCALES
# ========================================

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Token de sesión firmado con JWT_SECRET; `sub` es el ID del usuario."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {"sub": subject, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(subject: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode = {"sub": subject, "exp": expire, "type": "refresh", "jti": uuid.uuid4().hex}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Devuelve el ID del usuario o None si el token no es válido o ha caducado."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") not in (None, "access"):
        return None
    return payload.get("sub")


# ========================================
# PROVEEDOR EXTERNO (FIREBASE)
# ========================================

def is_external_token(token: str) -> bool:
    """True si el emisor (sin verificar) del token es el proveedor externo."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return False
    issuer = claims.get("iss") or ""
    return isinstance(issuer, str) and issuer.startswith(FIREBASE_ISSUER_PREFIX)


async def verify_external_token(token: str) -> Dict[str, Any]:
    """
    Verifica un ID token de Firebase con las claves públicas de Google.
    Lanza ValueError si la verificación está desactivada o el token no es válido.
    """
    if not settings.FIREBASE_PROJECT_ID:
        raise ValueError("External identity verification is not configured")

    request = google_requests.Request()
    claims = await run_in_threadpool(
        google_id_token.verify_firebase_token, token, request, settings.FIREBASE_PROJECT_ID
    )
    if not claims:
        raise ValueError("Invalid ID token")
    # Firebase expone el UID en `sub` (y en `user_id`)
    claims.setdefault("uid", claims.get("user_id") or claims.get("sub"))
    return claims
