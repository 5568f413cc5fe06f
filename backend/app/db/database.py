# backend/app/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión usando SQLAlchemy asíncrono y define
los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)
- Tipo JSON portable (JSONB en PostgreSQL)

La dependencia get_db() vive en app/api/deps.py.
"""

import uuid

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from app.core.config import settings # Importamos nuestra configuración

# Crear el motor de base de datos asíncrono
engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Crear un sessionmaker asíncrono
# expire_on_commit=False es importante para que los objetos sigan siendo utilizables
# después de que la transacción se haya confirmado.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Clase base declarativa para todos los modelos ORM
Base = declarative_base()

# Documentos JSON: JSONB en PostgreSQL, JSON genérico en el resto de motores
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def new_document_id() -> str:
    """ID opaco de 24 caracteres hexadecimales para los registros."""
    return uuid.uuid4().hex[:24]
