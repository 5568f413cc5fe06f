# backend/app/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación FastAPI completa:
logging, CORS, traducción de los errores de dominio a respuestas HTTP y
registro de los routers de la API.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings  # Configuración centralizada de la aplicación
from app.core.exceptions import CartValidationError, ImageUploadError
from app.db.init_db import init_db
from app.api.v1.api_router import api_router_v1  # Router principal de la API v1

# ========================================
# CONFIGURACIÓN DE LOGGING
# ========================================

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de la tienda online Aroma Mart"
)

# El frontend envía cookies de sesión, por eso los orígenes se enumeran
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========================================
# ERRORES DE DOMINIO
# ========================================

@app.exception_handler(CartValidationError)
async def cart_validation_error_handler(request: Request, exc: CartValidationError):
    """Selección inválida (talla, color, stock o cantidad): 400 con el motivo concreto."""
    logger.info(f"⚠️ CARRITO: Selección rechazada ({exc.reason}): {exc.message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.to_detail()})


@app.exception_handler(ImageUploadError)
async def image_upload_error_handler(request: Request, exc: ImageUploadError):
    logger.error(f"❌ IMAGEN: {exc}")
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

app.include_router(api_router_v1, prefix=settings.API_V1_STR)

# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Example:
        GET /
        Response: {"message": "Bienvenido a Aroma Mart API v0.1.0"}
    """
    return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@app.on_event("startup")
async def startup_event():
    """
    Crea las tablas que falten. Si la base de datos no responde el error se
    propaga y la aplicación no arranca.
    """
    await init_db()
