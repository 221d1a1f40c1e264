"""Tests for OperatorMiddleware - operator resolution and public paths."""

from unittest.mock import Mock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from auth.exceptions import AuthorizationGapError
from auth.security_middleware import OperatorMiddleware, current_operator
from auth.types import Operator


@pytest.fixture
def identity_provider(operator):
    """Resolves 'test-token' to the test operator; anything else is unknown."""
    provider = Mock()
    provider.resolve.side_effect = lambda token: operator if token == "test-token" else None
    return provider


@pytest.fixture
def app_with_middleware(identity_provider):
    app = FastAPI()
    app.add_middleware(OperatorMiddleware, identity_provider=identity_provider)

    @app.get("/api/data")
    async def protected_route(request: Request):
        return {"email": current_operator(request).email}

    @app.post("/api/view/{quote_id}")
    async def public_view(request: Request, quote_id: str):
        operator = request.state.operator
        return {"operator": operator.email if operator else None}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


@pytest.fixture
def client(app_with_middleware):
    return TestClient(app_with_middleware, raise_server_exceptions=False)


class TestProtectedPaths:

    def test_no_cookie_returns_401(self, client):
        response = client.get("/api/data")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"

    def test_unknown_token_returns_401(self, client, identity_provider):
        client.cookies.set("session_token", "stale")

        response = client.get("/api/data")

        assert response.status_code == 401
        identity_provider.resolve.assert_called_once_with("stale")

    def test_valid_token_attaches_operator(self, client, operator):
        client.cookies.set("session_token", "test-token")

        response = client.get("/api/data")

        assert response.status_code == 200
        assert response.json() == {"email": operator.email}


class TestPublicPaths:

    def test_health(self, client):
        assert client.get("/health").status_code == 200

    def test_share_view_without_session(self, client):
        response = client.post("/api/view/AB23CD")

        assert response.status_code == 200
        assert response.json() == {"operator": None}

    def test_share_view_with_session(self, client, operator):
        client.cookies.set("session_token", "test-token")

        response = client.post("/api/view/AB23CD")

        assert response.json() == {"operator": operator.email}


class TestCurrentOperator:

    def test_raises_without_operator(self):
        request = Mock()
        request.state.operator = None

        with pytest.raises(AuthorizationGapError, match="saving quotes"):
            current_operator(request, "saving quotes")

    def test_returns_operator(self):
        request = Mock()
        request.state.operator = Operator(email="ana@agency.example.com")

        assert current_operator(request).email == "ana@agency.example.com"
