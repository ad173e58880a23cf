"""
HTTP client for the Allowlist Proxy API.

Wraps the REST endpoints with plain method calls. Domain errors reported by
the service are raised again as the same exception classes, so callers can
handle ``AuthorizationError`` or ``ExistRegistryError`` exactly as they would
against an in-process proxy.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from allowlist_proxy.core.exceptions import (
    ERROR_TYPES,
    AllowlistProxyError,
    ServiceError,
    error_from_dict,
)
from allowlist_proxy.core.models import RegistryInfo

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _segment(value: str) -> str:
    return quote(value, safe="")


class ProxyClient:
    """
    Client for a running Allowlist Proxy service.

    Args:
        base_url: Service root, e.g. ``http://127.0.0.1:8000``
        user_id: Principal sent as ``x-user-id``
        api_key: API key sent as ``x-api-key`` (takes precedence server-side)
        timeout: Request timeout in seconds
        http_client: Pre-built client to use instead of creating one. It is
            not closed by ``close()``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_id: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers: dict[str, str] = {}
        if user_id:
            self._headers["x-user-id"] = user_id
        if api_key:
            self._headers["x-api-key"] = api_key

        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(base_url=self._base_url, timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ProxyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # =========================================================================
    # Proxy
    # =========================================================================

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def info(self) -> dict[str, Any]:
        """Name, version, owner and registry count."""
        return self._request("GET", f"{API_PREFIX}/proxy")

    def transfer_ownership(self, new_owner: str) -> None:
        self._request(
            "POST", f"{API_PREFIX}/proxy/transfer-ownership", json={"new_owner": new_owner}
        )

    def is_allowlist(self, identity: str) -> bool:
        data = self._request("GET", f"{API_PREFIX}/allowlist/{_segment(identity)}")
        return bool(data["allowed"])

    # =========================================================================
    # Registries
    # =========================================================================

    def registries(self) -> list[str]:
        return list(self._request("GET", f"{API_PREFIX}/registries")["registries"])

    def registry_info(self, address: str) -> RegistryInfo:
        data = self._request("GET", f"{API_PREFIX}/registries/{_segment(address)}")
        return RegistryInfo(label=data["label"], paused=data["paused"])

    def add_registry(self, label: str, source: str) -> None:
        self._request("POST", f"{API_PREFIX}/registries", json={"label": label, "source": source})

    def remove_registry(self, address: str) -> None:
        self._request("DELETE", f"{API_PREFIX}/registries/{_segment(address)}")

    def pause_registry(self, address: str) -> None:
        self._request("POST", f"{API_PREFIX}/registries/{_segment(address)}/pause")

    def unpause_registry(self, address: str) -> None:
        self._request("POST", f"{API_PREFIX}/registries/{_segment(address)}/unpause")

    # =========================================================================
    # Blacklist
    # =========================================================================

    def is_blacklist(self, identity: str) -> bool:
        data = self._request("GET", f"{API_PREFIX}/blacklist/{_segment(identity)}")
        return bool(data["blacklisted"])

    def add_blacklist(self, identity: str) -> None:
        self._request("POST", f"{API_PREFIX}/blacklist", json={"identity": identity})

    def remove_blacklist(self, identity: str) -> None:
        self._request("DELETE", f"{API_PREFIX}/blacklist/{_segment(identity)}")

    # =========================================================================
    # Hosted sources
    # =========================================================================

    def create_source(
        self, address: str | None = None, allowlist: list[str] | None = None
    ) -> dict[str, Any]:
        """Host a new source owned by this client's principal."""
        payload: dict[str, Any] = {"allowlist": list(allowlist or [])}
        if address:
            payload["address"] = address
        return self._request("POST", f"{API_PREFIX}/sources", json=payload)

    def list_sources(self) -> list[dict[str, Any]]:
        return list(self._request("GET", f"{API_PREFIX}/sources")["sources"])

    def get_source(self, address: str) -> dict[str, Any]:
        return self._request("GET", f"{API_PREFIX}/sources/{_segment(address)}")

    def source_add_allowlist(self, address: str, identity: str) -> None:
        self._request(
            "POST",
            f"{API_PREFIX}/sources/{_segment(address)}/allowlist",
            json={"identity": identity},
        )

    def source_remove_allowlist(self, address: str, identity: str) -> None:
        self._request(
            "DELETE", f"{API_PREFIX}/sources/{_segment(address)}/allowlist/{_segment(identity)}"
        )

    def source_is_allowlist(self, address: str, identity: str) -> bool:
        data = self._request(
            "GET", f"{API_PREFIX}/sources/{_segment(address)}/allowlist/{_segment(identity)}"
        )
        return bool(data["allowed"])

    # =========================================================================
    # Internals
    # =========================================================================

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Send one request and decode the JSON body.

        Raises:
            AllowlistProxyError: The domain error reported by the service
            ServiceError: If the service is unreachable or answers with a
                non-domain error
        """
        logger.debug(f"{method} {path}")
        try:
            response = self._client.request(method, path, json=json, headers=self._headers)
        except httpx.HTTPError as e:
            raise ServiceError(f"Cannot reach proxy service: {e}", url=self._base_url) from e

        if response.is_success:
            return response.json()

        raise self._error_for(response)

    def _error_for(self, response: httpx.Response) -> AllowlistProxyError:
        """Exception matching an error response."""
        try:
            error = response.json().get("error") or {}
        except ValueError:
            error = {}

        error_type = error.get("type", "")
        message = error.get("message") or f"HTTP {response.status_code}"
        details = error.get("details") or {}

        if error_type in ERROR_TYPES:
            return error_from_dict(
                {"error_type": error_type, "message": message, "details": details}
            )
        return ServiceError(
            message,
            status_code=response.status_code,
            url=str(response.url),
            details={"type": error_type, **details} if error_type else details,
        )
