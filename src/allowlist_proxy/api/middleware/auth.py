"""
Authentication middleware.

Resolves the calling principal for each request. The principal is what the
proxy compares against its owner; authentication only establishes who is
calling, authorization stays with the proxy.

Supports API keys via x-api-key header and a plain principal via x-user-id.
Once API keys are configured the x-user-id header is ignored unless it is
explicitly trusted, so the owner principal cannot be claimed with a header.
"""

import hashlib
import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from allowlist_proxy.api.schemas.exceptions import error_body

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def hash_api_key(api_key: str) -> str:
    """Hash an API key for storage and comparison."""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request authentication.

    Supported methods, in order:
    - API keys via x-api-key header, mapped to a principal by key hash
    - Direct principal via x-user-id header, when trusted

    Read-only requests are always let through; queries are open to any
    caller. Mutating requests without a principal are rejected with 401 when
    ``require_auth`` is set.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        require_auth: bool = True,
        user_id_header: str = "x-user-id",
        api_key_header: str = "x-api-key",
        public_paths: set[str] | None = None,
        api_keys: dict[str, str] | None = None,
        trust_user_id_header: bool | None = None,
    ) -> None:
        """
        Initialize authentication middleware.

        Args:
            app: ASGI application
            require_auth: Whether mutating requests need a principal
            user_id_header: Header containing the principal
            api_key_header: Header containing an API key
            public_paths: Path prefixes that bypass auth
            api_keys: API key hash -> principal
            trust_user_id_header: Accept x-user-id as the principal. Defaults
                to True only when no API keys are configured.
        """
        super().__init__(app)
        self._require_auth = require_auth
        self._user_id_header = user_id_header.lower()
        self._api_key_header = api_key_header.lower()
        self._public_paths = public_paths or set()
        self._api_keys = api_keys or {}
        if trust_user_id_header is None:
            trust_user_id_header = not self._api_keys
        self._trust_user_id_header = trust_user_id_header
        self._hint = (
            "Provide an API key (x-api-key) or principal (x-user-id)"
            if trust_user_id_header
            else "Provide an API key (x-api-key)"
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Authenticate the request and store the principal in request state."""
        user_id, auth_method = self._authenticate(request)
        request.state.user_id = user_id
        request.state.auth_method = auth_method

        needs_principal = (
            self._require_auth
            and request.method not in SAFE_METHODS
            and not self._is_public_path(request.url.path)
        )
        if needs_principal and not user_id:
            logger.debug(f"Rejected unauthenticated {request.method} {request.url.path}")
            return JSONResponse(
                status_code=401,
                content=error_body(
                    "authentication_required",
                    "Authentication required",
                    {"hint": self._hint},
                ),
            )

        if user_id:
            logger.debug(f"Authenticated request from {user_id} ({auth_method}) on {request.url.path}")

        return await call_next(request)

    def _is_public_path(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._public_paths)

    def _authenticate(self, request: Request) -> tuple[str | None, str | None]:
        """
        Return (principal, auth_method) for the request.

        An API key that is presented but unknown is not silently downgraded
        to the x-user-id header, and that header only counts when trusted.
        """
        api_key = request.headers.get(self._api_key_header)
        if api_key:
            principal = self._api_keys.get(hash_api_key(api_key))
            if principal:
                return principal, "api_key"
            logger.warning("Invalid API key presented")
            return None, None

        user_id = request.headers.get(self._user_id_header)
        if user_id:
            if self._trust_user_id_header:
                return user_id, "user_id_header"
            logger.warning(f"Ignored untrusted {self._user_id_header} header ({user_id})")

        return None, None
