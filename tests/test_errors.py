import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wishlist_hub.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    error_for_status,
    register_exception_handlers,
)
from wishlist_hub.core.query import parse_ids


@pytest.fixture
def app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret internals")

    @app.get("/forbidden")
    def forbidden():
        raise AuthorizationError()

    @app.get("/typed/{item_id}")
    def typed(item_id: int):
        return {"item_id": item_id}

    return app


def test_unexpected_error_hides_details(app):
    resp = TestClient(app, raise_server_exceptions=False).get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {"error": "internal server error"}


def test_app_error_uses_default_message(app):
    resp = TestClient(app).get("/forbidden")
    assert resp.status_code == 403
    assert resp.json() == {"error": "access denied"}


def test_request_validation_is_400(app):
    resp = TestClient(app).get("/typed/abc")
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("path.item_id:")


def test_unknown_route_keeps_envelope(app):
    resp = TestClient(app).get("/nowhere")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


@pytest.mark.parametrize(
    "status_code, cls",
    [
        (400, ValidationError),
        (401, AuthenticationError),
        (403, AuthorizationError),
        (404, NotFoundError),
        (409, UpstreamError),
        (500, UpstreamError),
    ],
)
def test_error_for_status(status_code, cls):
    error = error_for_status(status_code, "from downstream")
    assert type(error) is cls
    assert error.message == "from downstream"


def test_error_for_status_without_message_uses_default():
    assert error_for_status(404).message == "not found"


def test_parse_ids():
    assert parse_ids(None) == []
    assert parse_ids("3, 1,,3 ") == [3, 1]
    with pytest.raises(ValidationError):
        parse_ids("1,two")
