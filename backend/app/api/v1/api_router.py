# backend/app/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar y configurar todos los routers de la versión 1 de la API.
"""

from fastapi import APIRouter

# Importación de routers especializados por dominio de negocio
from app.api.v1.endpoints import (
    addresses,
    cart,
    hero_banners,
    orders,
    products,
    users,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

api_router_v1 = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# ROUTER DE USUARIOS
# Acceso (proveedor externo y contraseña), perfil y cierre de sesión
api_router_v1.include_router(
    users.router,
    prefix="/user",                 # Prefijo: /api/v1/user
    tags=["Users"]
)

# ROUTER DE PRODUCTOS
# Catálogo público y administración para vendedores
api_router_v1.include_router(
    products.router,
    prefix="/product",
    tags=["Products"]
)

# ROUTER DEL CARRITO
# Carrito de la sesión del usuario autenticado
api_router_v1.include_router(
    cart.router,
    prefix="/cart",
    tags=["Cart"]
)

# ROUTER DE DIRECCIONES
api_router_v1.include_router(
    addresses.router,
    prefix="/address",
    tags=["Addresses"]
)

# ROUTER DE PEDIDOS
api_router_v1.include_router(
    orders.router,
    prefix="/order",
    tags=["Orders"]
)

# ROUTER DE BANNERS DE PORTADA
api_router_v1.include_router(
    hero_banners.router,
    prefix="/hero-banners",
    tags=["Hero Banners"]
)
