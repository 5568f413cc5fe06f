# backend/tests/conftest.py
"""
Fixtures comunes de la suite.

La configuración se fija por variables de entorno antes de importar la
aplicación: base de datos SQLite en memoria, caché del catálogo desactivada y
un secreto JWT de pruebas.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite://"
os.environ["CATALOG_CACHE_ENABLED"] = "false"
os.environ["GOOGLE_CREDENTIALS_FILE"] = "missing-google-credentials.json"
os.environ["FIREBASE_PROJECT_ID"] = ""

from typing import Any, Dict, List, Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api import deps
from app.core.exceptions import ImageUploadError
from app.core.security import create_access_token, get_password_hash
from app.crud import product_crud, user_crud
from app.db.init_db import init_db
from app.main import app
from app.schemas.product_schema import ProductCreate, ProductResponse
from app.services.catalog_service import CatalogService


def make_product(
    product_id: str = "P",
    name: str = "Product",
    price: float = 100,
    offer_price: float = 80,
    category: str = "Grocery",
    sizes: Optional[List[Any]] = None,
    colors: Optional[List[Any]] = None,
    in_stock: bool = True,
) -> ProductResponse:
    """Producto en memoria para las pruebas del núcleo del carrito."""
    return ProductResponse(
        id=product_id,
        name=name,
        description=["Test product"],
        price=price,
        offer_price=offer_price,
        image=["https://images.test/product.png"],
        category=category,
        in_stock=in_stock,
        sizes=sizes or [],
        colors=colors or [],
    )


class FakeImageStorage:
    """Sustituto del servicio de imágenes que registra subidas y borrados."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploaded: List[str] = []
        self.deleted: List[str] = []

    def upload_image(self, content: bytes, filename: str, mimetype: str) -> str:
        if self.fail:
            raise ImageUploadError("Image storage is not configured")
        url = f"https://images.test/{len(self.uploaded) + 1}/{filename}"
        self.uploaded.append(url)
        return url

    def delete_image(self, url: str) -> bool:
        self.deleted.append(url)
        return True


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
def image_storage():
    return FakeImageStorage()


@pytest.fixture
async def client(session_factory, image_storage):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_catalog_service] = lambda: CatalogService(cache_enabled=False)
    app.dependency_overrides[deps.get_image_storage] = lambda: image_storage

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ========================================
# DATOS DE PRUEBA
# ========================================

async def create_test_user(
    session_factory,
    email: str = "buyer@aromamart.com",
    role: str = "user",
    password: Optional[str] = None,
    cart_items: Optional[Dict[str, Any]] = None,
):
    async with session_factory() as db:
        user = await user_crud.create_user(
            db,
            name=email.split("@")[0],
            email=email,
            role=role,
            password_hash=get_password_hash(password) if password else None,
        )
        if cart_items:
            user = await user_crud.update_cart_items(db, user.id, cart_items)
    return user


def auth_headers(user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


async def create_test_product(session_factory, **fields):
    data = {
        "name": "Basmati Rice",
        "description": ["Long grain"],
        "price": 120,
        "offerPrice": 100,
        "image": ["https://images.test/rice.png"],
        "category": "Grocery",
    }
    data.update(fields)
    async with session_factory() as db:
        return await product_crud.create_product(db, ProductCreate.model_validate(data))


@pytest.fixture
async def buyer(session_factory):
    return await create_test_user(session_factory)


@pytest.fixture
async def seller(session_factory):
    return await create_test_user(session_factory, email="seller@aromamart.com", role="seller")


@pytest.fixture
async def tshirt(session_factory):
    """Camiseta con tallas (L con precio propio) y colores."""
    return await create_test_product(
        session_factory,
        name="Cotton T-Shirt",
        price=500,
        offerPrice=400,
        category="Mens-Clothing",
        sizes=["M", {"name": "L", "price": 450, "mrpPrice": 550}],
        colors=[{"name": "Red"}, {"name": "Navy Blue"}],
    )


@pytest.fixture
async def rice(session_factory):
    return await create_test_product(session_factory)


HOME_ADDRESS = {
    "firstName": "Asha",
    "lastName": "Rao",
    "email": "asha@aromamart.com",
    "street": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "zipcode": "560001",
    "country": "India",
    "phone": "9876543210",
}
