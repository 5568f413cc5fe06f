import json

import pytest

from app.api import deps
from app.main import app

from conftest import FakeImageStorage, auth_headers

PRODUCT = "/api/v1/product"


def _payload(**fields):
    data = {
        "name": "Cotton Kurta",
        "description": ["Pure cotton", "Machine wash"],
        "price": 900,
        "offerPrice": 799,
        "image": ["https://images.test/kurta.png"],
        "category": "Mens-Clothing",
        "sizes": ["m", "xl", {"name": "xxl", "price": 849, "mrpPrice": 999}],
        "colors": [{"name": "White"}],
    }
    data.update(fields)
    return data


async def test_seller_creates_product_directly(client, seller):
    response = await client.post(f"{PRODUCT}/add-direct", json=_payload(), headers=auth_headers(seller))
    assert response.status_code == 201
    product = response.json()
    assert product["offerPrice"] == 799
    assert product["inStock"] is True
    assert [size["name"] for size in product["sizes"]] == ["M", "XL", "XXL"]
    assert product["sizes"][2]["price"] == 849
    assert product["sizes"][2]["mrpPrice"] == 999
    assert product["colors"] == [{"name": "White", "image": None}]

    listing = await client.get(f"{PRODUCT}/list")
    assert [item["id"] for item in listing.json()] == [product["id"]]

    detail = await client.get(f"{PRODUCT}/{product['id']}")
    assert detail.status_code == 200
    assert detail.json()["name"] == "Cotton Kurta"


async def test_product_admin_is_seller_only(client, buyer):
    response = await client.post(f"{PRODUCT}/add-direct", json=_payload())
    assert response.status_code == 401

    response = await client.post(f"{PRODUCT}/add-direct", json=_payload(), headers=auth_headers(buyer))
    assert response.status_code == 403


@pytest.mark.parametrize(
    "fields",
    [
        {"price": 0},
        {"offerPrice": -5},
        {"image": []},
        {"sizes": [{"name": "M", "price": 0}]},
        {"colors": [{"name": "x" * 41}]},
    ],
)
async def test_invalid_products_are_rejected(client, seller, fields):
    response = await client.post(f"{PRODUCT}/add-direct", json=_payload(**fields), headers=auth_headers(seller))
    assert response.status_code == 422


async def test_unknown_product_returns_404(client):
    response = await client.get(f"{PRODUCT}/does-not-exist")
    assert response.status_code == 404


async def test_update_and_stock(client, seller, rice):
    headers = auth_headers(seller)
    response = await client.patch(f"{PRODUCT}/{rice.id}", json={"offerPrice": 95, "sizes": ["5 kg"]}, headers=headers)
    assert response.status_code == 200
    assert response.json()["offerPrice"] == 95
    assert response.json()["sizes"][0]["name"] == "5_KG"
    assert response.json()["name"] == "Basmati Rice"

    response = await client.patch(f"{PRODUCT}/{rice.id}/stock", json={"inStock": False}, headers=headers)
    assert response.status_code == 200
    assert response.json()["inStock"] is False


async def test_delete_removes_hosted_images(client, seller, rice, image_storage):
    response = await client.delete(f"{PRODUCT}/{rice.id}", headers=auth_headers(seller))
    assert response.status_code == 200
    assert image_storage.deleted == ["https://images.test/rice.png"]

    response = await client.get(f"{PRODUCT}/{rice.id}")
    assert response.status_code == 404


async def test_multipart_add_uploads_images(client, seller, image_storage):
    product_data = _payload(image=[], colors=[{"name": "White"}, {"name": "Black", "image": "https://cdn.test/black.png"}, {"name": "Grey"}])
    response = await client.post(
        f"{PRODUCT}/add",
        data={"productData": json.dumps(product_data)},
        files=[
            ("images", ("front.png", b"front-bytes", "image/png")),
            ("images", ("back.jpg", b"back-bytes", "image/jpeg")),
            ("colorImages", ("white.webp", b"white-bytes", "image/webp")),
        ],
        headers=auth_headers(seller),
    )
    assert response.status_code == 201
    product = response.json()
    assert product["image"] == ["https://images.test/1/front.png", "https://images.test/2/back.jpg"]
    assert product["colors"] == [
        {"name": "White", "image": "https://images.test/3/white.webp"},
        {"name": "Black", "image": "https://cdn.test/black.png"},
        {"name": "Grey", "image": None},
    ]


async def test_multipart_add_rejects_unsupported_files(client, seller, image_storage):
    response = await client.post(
        f"{PRODUCT}/add",
        data={"productData": json.dumps(_payload(image=[]))},
        files=[("images", ("anim.gif", b"gif-bytes", "image/gif"))],
        headers=auth_headers(seller),
    )
    assert response.status_code == 400
    assert image_storage.uploaded == []


async def test_multipart_add_rejects_bad_product_data(client, seller):
    response = await client.post(
        f"{PRODUCT}/add",
        data={"productData": "{not json"},
        files=[("images", ("front.png", b"front-bytes", "image/png"))],
        headers=auth_headers(seller),
    )
    assert response.status_code == 400


async def test_image_host_failure_returns_502(client, seller):
    app.dependency_overrides[deps.get_image_storage] = lambda: FakeImageStorage(fail=True)
    response = await client.post(
        f"{PRODUCT}/add",
        data={"productData": json.dumps(_payload(image=[]))},
        files=[("images", ("front.png", b"front-bytes", "image/png"))],
        headers=auth_headers(seller),
    )
    assert response.status_code == 502
