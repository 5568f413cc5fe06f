# backend/app/services/auth_service.py
"""
Servicio de autenticación.

Dos vías de acceso conviven:
- Proveedor externo (Firebase): el cliente envía un ID token verificado con
  las claves públicas de Google; el usuario se crea en el primer acceso y
  recibe un refresh token de 30 días.
- Cuentas antiguas con email y contraseña (bcrypt), con bloqueo temporal tras
  varios intentos fallidos y token de sesión de 7 días.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import security
from app.core.config import settings
from app.crud import user_crud
from app.db.models.user_model import User
from app.schemas.user_schema import UserLogin, UserRegister, UserRole

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Algunos motores (SQLite) devuelven fechas sin zona horaria; se asumen UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class AuthService:

    # ========================================
    # PROVEEDOR EXTERNO
    # ========================================

    async def firebase_login(self, db: AsyncSession, id_token: str) -> Tuple[User, str]:
        try:
            claims = await security.verify_external_token(id_token)
        except Exception as e:
            logger.warning(f"⚠️ AUTH: ID token rechazado: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid or expired token: {e}"
            )

        uid = claims["uid"]
        email = (claims.get("email") or "").lower()
        user = await user_crud.get_user_by_firebase_uid(db, uid)
        if user is None and email:
            # Cuenta antigua con el mismo email: se vincula al UID externo
            user = await user_crud.get_user_by_email(db, email)
            if user is not None:
                user = await user_crud.update_user(db, user, {"firebase_uid": uid})

        if user is None:
            if not email:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ID token has no email")
            admin_email = (settings.FIREBASE_ADMIN_EMAIL or "").lower()
            role = UserRole.SELLER.value if admin_email and email == admin_email else UserRole.USER.value
            user = await user_crud.create_user(
                db,
                name=claims.get("name") or email.split("@")[0],
                email=email,
                role=role,
                firebase_uid=uid,
            )
            logger.info(f"🆕 AUTH: Usuario {user.email} creado con rol '{role}'")

        refresh_token = await self._issue_refresh_token(db, user, reset_lock=True)
        return user, refresh_token

    async def rotate_refresh_token(self, db: AsyncSession, refresh_token: str) -> str:
        user = await user_crud.get_user_by_refresh_token(db, refresh_token)
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
        expiry = _as_utc(user.refresh_token_expiry)
        if expiry is None or _utcnow() > expiry:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token expired")
        return await self._issue_refresh_token(db, user)

    async def _issue_refresh_token(self, db: AsyncSession, user: User, reset_lock: bool = False) -> str:
        refresh_token = security.create_refresh_token(user.id)
        updates = {
            "refresh_token": refresh_token,
            "refresh_token_expiry": _utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        }
        if reset_lock:
            updates.update({"last_login": _utcnow(), "login_attempts": 0, "is_locked": False, "locked_until": None})
        await user_crud.update_user(db, user, updates)
        return refresh_token

    # ========================================
    # CUENTAS CON CONTRASEÑA
    # ========================================

    async def register(self, db: AsyncSession, user_in: UserRegister) -> Tuple[User, str]:
        if await user_crud.get_user_by_email(db, user_in.email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

        user = await user_crud.create_user(
            db,
            name=user_in.name,
            email=user_in.email,
            password_hash=security.get_password_hash(user_in.password),
        )
        logger.info(f"🆕 AUTH: Usuario {user.email} registrado")
        return user, security.create_access_token(user.id)

    async def login(self, db: AsyncSession, credentials: UserLogin) -> Tuple[User, str]:
        user = await user_crud.get_user_by_email(db, credentials.email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if user.is_locked:
            locked_until = _as_utc(user.locked_until)
            if locked_until is not None and _utcnow() < locked_until:
                raise HTTPException(
                    status_code=status.HTTP_423_LOCKED,
                    detail="Account temporarily locked due to too many failed login attempts"
                )
            user = await user_crud.update_user(db, user, {"is_locked": False, "login_attempts": 0, "locked_until": None})

        if not security.verify_password(credentials.password, user.password):
            await user_crud.register_failed_login(
                db,
                user,
                max_attempts=settings.MAX_LOGIN_ATTEMPTS,
                locked_until=_utcnow() + timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES),
            )
            logger.warning(f"⚠️ AUTH: Contraseña incorrecta para {user.email} ({user.login_attempts} intentos)")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        user = await user_crud.update_user(db, user, {"login_attempts": 0, "last_login": _utcnow()})
        return user, security.create_access_token(user.id)

    async def logout(self, db: AsyncSession, user: User) -> None:
        await user_crud.update_user(db, user, {"refresh_token": None, "refresh_token_expiry": None})

    # ========================================
    # AUTENTICACIÓN DE PETICIONES
    # ========================================

    async def authenticate(self, db: AsyncSession, token: str) -> Optional[User]:
        """Usuario del token (externo o local) o None si no es válido."""
        if security.is_external_token(token):
            try:
                claims = await security.verify_external_token(token)
            except Exception as e:
                logger.debug(f"AUTH: Token externo no válido: {e}")
                return None
            return await user_crud.get_user_by_firebase_uid(db, claims["uid"])

        user_id = security.decode_access_token(token)
        if not user_id:
            return None
        return await user_crud.get_user(db, user_id)

# Instancia única del servicio para ser usada en la aplicación
auth_service = AuthService()
