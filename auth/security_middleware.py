"""Operator identity middleware for FastAPI."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import AuthorizationGapError
from auth.types import IdentityProvider, Operator

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"


class OperatorMiddleware(BaseHTTPMiddleware):
    """Resolves the operator behind a request.

    For operator routes:
    1. Reads the session token from the 'session_token' cookie
    2. Resolves it through the external IdentityProvider
    3. Stores the Operator on request.state.operator

    Client share-link routes and health checks are public; they run with
    request.state.operator = None.
    """

    PUBLIC_PATHS = [
        "/api/view/",
        "/health",
        "/docs",
        "/openapi.json",
    ]

    def __init__(self, app, identity_provider: IdentityProvider):
        super().__init__(app)
        self._identity = identity_provider

    def _is_public_path(self, path: str) -> bool:
        for public_path in self.PUBLIC_PATHS:
            if path == public_path or path.startswith(public_path):
                return True
        return False

    async def dispatch(self, request: Request, call_next):
        request.state.operator = None
        path = request.url.path

        token = request.cookies.get(SESSION_COOKIE)
        operator = self._identity.resolve(token) if token else None

        if self._is_public_path(path):
            # Logged-in operators skip the share password on public views
            request.state.operator = operator
            return await call_next(request)

        if operator is None:
            logger.warning(f"Blocked unauthenticated request to {path}")
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Operator login required",
                ).model_dump(mode="json"),
            )

        request.state.operator = operator
        return await call_next(request)


def current_operator(request: Request, action: str = "this action") -> Operator:
    """
    Operator for the request.

    Raises:
        AuthorizationGapError: If no operator is attached.
    """
    operator = getattr(request.state, "operator", None)
    if operator is None:
        raise AuthorizationGapError(action)
    return operator
