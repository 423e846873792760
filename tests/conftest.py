import httpx
import pytest
from fastapi.testclient import TestClient

from wishlist_hub.core.auth import create_access_token
from wishlist_hub.core.config import Settings
from wishlist_hub.database import create_db_and_tables
from wishlist_hub.main import (
    create_catalog_app,
    create_collaboration_app,
    create_gateway_app,
    create_identity_app,
    create_wishlist_app,
)
from wishlist_hub.seed import seed_products, seed_users

ALICE, BOB, CAROL, DAVE = 1, 2, 3, 4


class Stack:
    """
    The four leaf apps on one SQLite file, wired into a gateway in-process.

    ASGITransport does not run lifespans, so tables and demo data are set up
    here explicitly.
    """

    def __init__(self, settings: Settings, upstreams: dict | None = None):
        self.settings = settings
        self.identity = create_identity_app(settings)
        self.catalog = create_catalog_app(settings)
        self.wishlist = create_wishlist_app(settings)
        self.collaboration = create_collaboration_app(settings)

        engine = self.identity.state.engine
        create_db_and_tables(engine)
        seed_users(engine)
        seed_products(engine)

        self.leaves = {
            "identity": self.identity,
            "catalog": self.catalog,
            "wishlist": self.wishlist,
            "collaboration": self.collaboration,
        }
        transports = {
            name: httpx.ASGITransport(app=app, raise_app_exceptions=False)
            for name, app in self.leaves.items()
        }
        transports.update(upstreams or {})
        self.gateway = create_gateway_app(settings, transports)

    def set_clock(self, clock) -> None:
        self.collaboration.state.clock = clock

    def dispose(self) -> None:
        for app in self.leaves.values():
            app.state.engine.dispose()


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides) -> Settings:
        values = {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'hub.db'}",
            "JWT_SECRET": "test-secret",
            "SEED_DEMO_DATA": False,
            "LOG_LEVEL": "WARNING",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def make_stack(make_settings):
    stacks = []

    def _make(upstreams: dict | None = None, **overrides) -> Stack:
        stack = Stack(make_settings(**overrides), upstreams)
        stacks.append(stack)
        return stack

    yield _make
    for stack in stacks:
        stack.dispose()


@pytest.fixture
def stack(make_stack) -> Stack:
    return make_stack()


@pytest.fixture
def client(stack):
    with TestClient(stack.gateway) as c:
        yield c


def bearer(settings: Settings, user_id: int, name: str | None = None) -> dict:
    token = create_access_token(settings, user_id, name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login(client):
    """Log in through the gateway and return ready-to-use headers."""

    def _login(username: str) -> dict:
        resp = client.post("/auth/login", json={"user": username})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


def create_wishlist(client, headers, name="Birthday", **extra) -> dict:
    resp = client.post("/wishlists", json={"name": name, **extra}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def invite(client, headers, wishlist_id, role=None) -> dict:
    body = {"role": role} if role else {}
    resp = client.post(f"/wishlists/{wishlist_id}/invites", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
