# backend/app/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path
import os

# Apunta al directorio 'backend/'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    BASE_DIR: Path = BASE_DIR
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Aroma Mart API"
    PROJECT_VERSION: str = "0.1.0"
    APP_ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Configuración de la base de datos
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "postgres")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "user")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "aromamart_db")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    # Si se define, tiene prioridad sobre los parámetros POSTGRES_*
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        """URL de conexión a la base de datos asíncrona."""
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Configuración de Redis (caché del catálogo)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", 6379))
    CATALOG_CACHE_ENABLED: bool = True
    CATALOG_CACHE_TTL_SECONDS: int = 300

    # Autenticación - JWT_SECRET REQUERIDO del .env (sensible)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    MAX_LOGIN_ATTEMPTS: int = 5
    LOGIN_LOCKOUT_MINUTES: int = 15

    # Proveedor de identidad externo (Firebase) - Opcionales
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_ADMIN_EMAIL: Optional[str] = None

    # Catálogo
    VARIANT_CATEGORIES: List[str] = ["Mens-Clothing", "Womens-Clothing", "Kids-Clothing"]
    CURRENCY: str = "₹"

    # Almacenamiento de imágenes (Google Drive)
    GOOGLE_CREDENTIALS_FILE: str = "google-credentials.json"
    GOOGLE_DRIVE_IMAGES_FOLDER: str = "aroma-mart-images"
    ALLOWED_IMAGE_EXTENSIONS: List[str] = ["jpg", "jpeg", "png", "webp"]

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def is_production(self) -> bool:
        return self.APP_ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = False

# Instancia global de la configuración
settings = Settings()
