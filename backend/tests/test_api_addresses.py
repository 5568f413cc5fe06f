from conftest import HOME_ADDRESS as HOME, auth_headers, create_test_user

ADDRESS = "/api/v1/address"


async def test_add_and_list_addresses(client, buyer):
    response = await client.post(f"{ADDRESS}/add", json=HOME, headers=auth_headers(buyer))
    assert response.status_code == 201
    address = response.json()
    assert address["userId"] == buyer.id
    assert address["city"] == "Bengaluru"

    response = await client.get(f"{ADDRESS}/get", headers=auth_headers(buyer))
    assert [item["id"] for item in response.json()] == [address["id"]]


async def test_addresses_are_private(client, buyer, session_factory):
    await client.post(f"{ADDRESS}/add", json=HOME, headers=auth_headers(buyer))
    other = await create_test_user(session_factory, email="other@aromamart.com")

    response = await client.get(f"{ADDRESS}/get", headers=auth_headers(other))
    assert response.json() == []


async def test_invalid_address_is_rejected(client, buyer):
    response = await client.post(
        f"{ADDRESS}/add", json={**HOME, "email": "not-an-email"}, headers=auth_headers(buyer)
    )
    assert response.status_code == 422


async def test_address_requires_authentication(client):
    assert (await client.post(f"{ADDRESS}/add", json=HOME)).status_code == 401
