import json

from app.crud import user_crud
from app.main import app

from conftest import auth_headers, create_test_user

CART = "/api/v1/cart"


async def _call_app(path, payload, headers, on_response_sent):
    """
    Llama a la aplicación ASGI directamente y ejecuta `on_response_sent` en
    cuanto se envía el último fragmento del cuerpo, antes de que la aplicación
    termine de procesar la petición.
    """
    body = json.dumps(payload).encode()
    raw_headers = [(b"host", b"test"), (b"content-type", b"application/json"), (b"content-length", str(len(body)).encode())]
    raw_headers += [(name.lower().encode(), value.encode()) for name, value in headers.items()]
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": raw_headers,
        "client": ("testclient", 50000),
        "server": ("test", 80),
    }
    request_sent = False
    statuses = []

    async def receive():
        nonlocal request_sent
        if not request_sent:
            request_sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return {"type": "http.disconnect"}

    async def send(message):
        if message["type"] == "http.response.start":
            statuses.append(message["status"])
        elif message["type"] == "http.response.body" and not message.get("more_body", False):
            await on_response_sent()

    await app(scope, receive, send)
    return statuses[0]


async def _stored_cart(client, user):
    response = await client.get("/api/v1/user/me", headers=auth_headers(user))
    assert response.status_code == 200
    return response.json()["cartItems"]


async def test_cart_requires_authentication(client):
    response = await client.get(CART)
    assert response.status_code == 401


async def test_add_item_resolves_price_and_persists(client, buyer, tshirt):
    response = await client.post(
        f"{CART}/items",
        json={"productId": tshirt.id, "size": "l", "color": "red"},
        headers=auth_headers(buyer),
    )
    assert response.status_code == 201
    view = response.json()
    cart_key = f"{tshirt.id}-L-Red"
    assert view["count"] == 1
    assert view["total"] == 450
    assert view["currency"] == "₹"
    assert view["rows"][0]["cartKey"] == cart_key
    assert view["rows"][0]["unitPrice"] == 450

    assert await _stored_cart(client, buyer) == {
        cart_key: {"qty": 1, "productId": tshirt.id, "size": "L", "sizePrice": 450.0, "color": "Red"}
    }


async def test_repeated_adds_increment_one_line(client, buyer, tshirt):
    for _ in range(2):
        response = await client.post(
            f"{CART}/items",
            json={"productId": tshirt.id, "size": "M", "color": "Navy Blue"},
            headers=auth_headers(buyer),
        )
        assert response.status_code == 201

    view = (await client.get(CART, headers=auth_headers(buyer))).json()
    assert view["count"] == 2
    assert view["total"] == 800
    assert list(view["items"]) == [f"{tshirt.id}-M-Navy Blue"]


async def test_missing_size_is_rejected_without_mutation(client, buyer, tshirt):
    response = await client.post(
        f"{CART}/items",
        json={"productId": tshirt.id, "color": "Red"},
        headers=auth_headers(buyer),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == {"reason": "missing_size", "message": "Please select Size to continue"}
    assert await _stored_cart(client, buyer) == {}


async def test_missing_color_is_rejected(client, buyer, tshirt):
    response = await client.post(
        f"{CART}/items",
        json={"productId": tshirt.id, "size": "M"},
        headers=auth_headers(buyer),
    )
    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "missing_color"


async def test_unknown_product_returns_404(client, buyer):
    response = await client.post(f"{CART}/items", json={"productId": "nope"}, headers=auth_headers(buyer))
    assert response.status_code == 404


async def test_set_quantity_remove_one_and_clear(client, buyer, rice):
    headers = auth_headers(buyer)
    await client.post(f"{CART}/items", json={"productId": rice.id}, headers=headers)

    response = await client.put(f"{CART}/items/{rice.id}", json={"quantity": 4}, headers=headers)
    assert response.status_code == 200
    assert response.json()["count"] == 4
    assert response.json()["total"] == 400

    response = await client.put(f"{CART}/items/{rice.id}", json={"quantity": 0}, headers=headers)
    assert response.status_code == 422

    response = await client.delete(f"{CART}/items/{rice.id}", headers=headers)
    assert response.json()["count"] == 3
    assert (await _stored_cart(client, buyer))[rice.id]["qty"] == 3

    response = await client.delete(CART, headers=headers)
    assert response.json()["count"] == 0
    assert await _stored_cart(client, buyer) == {}


async def test_stale_key_operations_are_no_ops(client, buyer, rice):
    headers = auth_headers(buyer)
    await client.post(f"{CART}/items", json={"productId": rice.id}, headers=headers)

    response = await client.delete(f"{CART}/items/missing-key", headers=headers)
    assert response.status_code == 200
    assert response.json()["count"] == 1


async def test_replace_cart_accepts_legacy_entries(client, buyer, tshirt, rice):
    headers = auth_headers(buyer)
    response = await client.patch(
        f"{CART}/update",
        json={"cartItems": {f"{tshirt.id}-L": 2, rice.id: {"qty": 1, "productId": rice.id}, "X123": 5}},
        headers=headers,
    )
    assert response.status_code == 200
    view = response.json()
    # 2 x 450 (precio de la talla L) + 100; X123 no cuenta en el total
    assert view["total"] == 1000
    assert view["count"] == 8
    assert {row["cartKey"] for row in view["rows"]} == {f"{tshirt.id}-L", rice.id}
    assert (await _stored_cart(client, buyer))["X123"] == 5


async def test_replace_cart_rejects_malformed_values(client, buyer):
    response = await client.patch(
        f"{CART}/update",
        json={"cartItems": {"abc": "many"}},
        headers=auth_headers(buyer),
    )
    assert response.status_code == 422


async def test_order_lines_exclude_unknown_products(client, session_factory, tshirt, rice):
    user = await create_test_user(
        session_factory,
        email="lines@aromamart.com",
        cart_items={f"{tshirt.id}-M-Red": 2, rice.id: 1, "X123": 3},
    )
    response = await client.get(f"{CART}/order-lines", headers=auth_headers(user))
    assert response.status_code == 200
    lines = {line["product"]: line for line in response.json()}
    assert set(lines) == {tshirt.id, rice.id}
    assert lines[tshirt.id] == {"product": tshirt.id, "quantity": 2, "size": "M", "color": "Red"}


async def test_add_is_stored_before_the_response_is_sent(client, session_factory, buyer, rice):
    headers = auth_headers(buyer)
    seen = {}

    async def next_add():
        async with session_factory() as db:
            seen["stored"] = (await user_crud.get_user(db, buyer.id)).cart_items
        seen["second"] = await client.post(f"{CART}/items", json={"productId": rice.id}, headers=headers)

    status = await _call_app(f"{CART}/items", {"productId": rice.id}, headers, next_add)
    assert status == 201

    assert seen["stored"][rice.id]["qty"] == 1
    assert seen["second"].json()["count"] == 2
    assert (await _stored_cart(client, buyer))[rice.id]["qty"] == 2
