import pytest
from jose import jwt

from app.core import security
from app.core.config import settings

from conftest import auth_headers

USER = "/api/v1/user"


@pytest.fixture
def external_tokens(monkeypatch):
    """Sustituye la verificación contra Google por un diccionario token -> claims."""
    known = {}

    async def fake_verify(token):
        if token not in known:
            raise ValueError("Invalid ID token")
        return dict(known[token])

    monkeypatch.setattr(security, "verify_external_token", fake_verify)
    return known


def _external_token(uid):
    return jwt.encode({"iss": "https://securetoken.google.com/aroma-test", "sub": uid}, "unused", algorithm="HS256")


async def test_register_login_and_profile(client):
    response = await client.post(
        f"{USER}/register",
        json={"name": "Asha", "email": "Asha@Aromamart.com", "password": "secret123"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "asha@aromamart.com"
    assert response.json()["user"]["role"] == "user"
    assert "token" in response.cookies

    response = await client.post(f"{USER}/login", json={"email": "asha@aromamart.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["token"]

    response = await client.get(f"{USER}/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["cartItems"] == {}
    assert "password" not in response.json()


async def test_cookie_authentication(client, buyer):
    client.cookies.set("token", security.create_access_token(buyer.id))
    response = await client.get(f"{USER}/me")
    assert response.status_code == 200
    assert response.json()["id"] == buyer.id


async def test_invalid_token_is_rejected(client):
    response = await client.get(f"{USER}/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


async def test_duplicate_registration_conflicts(client):
    payload = {"name": "Ravi", "email": "ravi@aromamart.com", "password": "secret123"}
    assert (await client.post(f"{USER}/register", json=payload)).status_code == 201
    assert (await client.post(f"{USER}/register", json=payload)).status_code == 409


async def test_unknown_email_returns_404(client):
    response = await client.post(f"{USER}/login", json={"email": "ghost@aromamart.com", "password": "secret123"})
    assert response.status_code == 404


async def test_account_locks_after_failed_attempts(client):
    await client.post(f"{USER}/register", json={"name": "Mia", "email": "mia@aromamart.com", "password": "secret123"})

    for _ in range(settings.MAX_LOGIN_ATTEMPTS):
        response = await client.post(f"{USER}/login", json={"email": "mia@aromamart.com", "password": "wrong-pass"})
        assert response.status_code == 401

    response = await client.post(f"{USER}/login", json={"email": "mia@aromamart.com", "password": "secret123"})
    assert response.status_code == 423


async def test_firebase_auth_creates_seller_for_admin_email(client, external_tokens, monkeypatch):
    monkeypatch.setattr(settings, "FIREBASE_ADMIN_EMAIL", "owner@aromamart.com")
    external_tokens["id-token"] = {"uid": "fb-owner", "email": "Owner@aromamart.com", "name": "Owner"}

    response = await client.post(f"{USER}/firebase-auth", json={"idToken": "id-token"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "seller"
    assert body["user"]["email"] == "owner@aromamart.com"
    assert body["refreshToken"]

    # El mismo UID no crea un segundo usuario
    again = await client.post(f"{USER}/firebase-auth", json={"idToken": "id-token"})
    assert again.json()["user"]["id"] == body["user"]["id"]


async def test_firebase_auth_rejects_invalid_token(client, external_tokens):
    response = await client.post(f"{USER}/firebase-auth", json={"idToken": "forged"})
    assert response.status_code == 401


async def test_external_bearer_token_authenticates(client, external_tokens):
    token = _external_token("fb-user")
    external_tokens[token] = {"uid": "fb-user", "email": "shopper@aromamart.com"}
    await client.post(f"{USER}/firebase-auth", json={"idToken": token})

    response = await client.get(f"{USER}/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "shopper@aromamart.com"
    assert response.json()["role"] == "user"


async def test_refresh_token_rotation_and_logout(client, external_tokens):
    token = _external_token("fb-rotate")
    external_tokens[token] = {"uid": "fb-rotate", "email": "rotate@aromamart.com"}
    refresh_token = (await client.post(f"{USER}/firebase-auth", json={"idToken": token})).json()["refreshToken"]

    response = await client.post(f"{USER}/refresh-token", json={"refreshToken": refresh_token})
    assert response.status_code == 200
    rotated = response.json()["refreshToken"]
    assert rotated != refresh_token

    stale = await client.post(f"{USER}/refresh-token", json={"refreshToken": refresh_token})
    assert stale.status_code == 401

    response = await client.post(f"{USER}/logout", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200

    response = await client.post(f"{USER}/refresh-token", json={"refreshToken": rotated})
    assert response.status_code == 401


async def test_me_without_credentials(client):
    response = await client.get(f"{USER}/me")
    assert response.status_code == 401


async def test_seller_guard(client, buyer, seller):
    assert (await client.get("/api/v1/order/seller", headers=auth_headers(buyer))).status_code == 403
    assert (await client.get("/api/v1/order/seller", headers=auth_headers(seller))).status_code == 200
