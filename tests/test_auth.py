from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from wishlist_hub.core.auth import create_access_token, decode_access_token
from wishlist_hub.core.errors import AuthenticationError

from conftest import ALICE, bearer


def test_token_round_trip(make_settings):
    settings = make_settings()
    principal = decode_access_token(settings, create_access_token(settings, ALICE, "Alice Johnson"))
    assert principal.id == ALICE
    assert principal.name == "Alice Johnson"


def test_token_signed_with_another_secret_is_invalid(make_settings):
    token = create_access_token(make_settings(JWT_SECRET="other"), ALICE, None)
    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(make_settings(), token)
    assert exc_info.value.message == "invalid token"


def test_expired_token_is_invalid(make_settings):
    settings = make_settings()
    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    token = jwt.encode({"sub": "1", "exp": past}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    with pytest.raises(AuthenticationError):
        decode_access_token(settings, token)


def test_token_without_numeric_subject_is_invalid(make_settings):
    settings = make_settings()
    token = jwt.encode({"sub": "alice"}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    with pytest.raises(AuthenticationError):
        decode_access_token(settings, token)


def test_login_returns_bearer_token(client):
    resp = client.post("/auth/login", json={"user": "  Alice "})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"

    me = client.get("/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == ALICE
    assert me.json()["public_name"] == "Alice Johnson"


def test_login_accepts_username_alias(client):
    assert client.post("/auth/login", json={"username": "bob"}).status_code == 200


def test_login_unknown_user(client):
    resp = client.post("/auth/login", json={"user": "mallory"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "unknown user"}


def test_missing_token(client):
    resp = client.get("/wishlists/mine")
    assert resp.status_code == 401
    assert resp.json() == {"error": "missing token"}
    assert resp.headers["www-authenticate"] == "Bearer"


def test_garbage_token(client):
    resp = client.get("/wishlists/mine", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "invalid token"}


def test_api_me_alias(client, stack):
    resp = client.get("/api/me", headers=bearer(stack.settings, ALICE))
    assert resp.status_code == 200
    assert resp.json()["id"] == ALICE


@pytest.mark.parametrize(
    "path",
    ["/health", "/products", "/products/search?q=lego", "/products/byIds?ids=1", "/products/1", "/categories"],
)
def test_public_routes_need_no_token(client, path):
    assert client.get(path).status_code == 200


def test_user_directory_requires_token(client, stack):
    assert client.get("/users?ids=1,2").status_code == 401

    resp = client.get("/users?ids=2,1,99", headers=bearer(stack.settings, ALICE))
    assert resp.status_code == 200
    assert sorted(u["id"] for u in resp.json()) == [1, 2]


def test_unknown_user_profile(client, stack):
    resp = client.get("/users/99", headers=bearer(stack.settings, ALICE))
    assert resp.status_code == 404
    assert resp.json() == {"error": "user not found"}
