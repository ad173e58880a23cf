"""Tests for the HTTP client, run against the real application."""

from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from allowlist_proxy.client import ProxyClient
from allowlist_proxy.core.exceptions import (
    AccountNotBlacklistedError,
    AuthorizationError,
    ExistRegistryError,
    NotExistRegistryError,
    PausedRegistryError,
    ServiceError,
    SourceNotFoundError,
)
from allowlist_proxy.core.models import RegistryInfo

A = "0x00000000000000000000000000000000000000a1"
B = "0x00000000000000000000000000000000000000b2"


@pytest.fixture
def owner(api_client: TestClient) -> ProxyClient:
    return ProxyClient("http://testserver", user_id="owner", http_client=api_client)


@pytest.fixture
def issuer(api_client: TestClient) -> ProxyClient:
    return ProxyClient("http://testserver", user_id="issuer", http_client=api_client)


@pytest.fixture
def mallory(api_client: TestClient) -> ProxyClient:
    return ProxyClient("http://testserver", user_id="mallory", http_client=api_client)


class TestProxyClient:
    """Tests for ProxyClient calls."""

    def test_info_and_health(self, owner: ProxyClient) -> None:
        info = owner.info()
        assert info["name"] == "Investment Token"
        assert info["version"] == "1.0.0"
        assert owner.health()["status"] == "healthy"

    def test_registry_lifecycle(self, owner: ProxyClient, issuer: ProxyClient) -> None:
        address = issuer.create_source(allowlist=[A])["address"]
        owner.add_registry("Token X", address)

        assert owner.registries() == [address]
        assert owner.registry_info(address) == RegistryInfo("Token X", False)
        assert owner.is_allowlist(A)

        owner.pause_registry(address)
        assert owner.registry_info(address).paused
        assert not owner.is_allowlist(A)

        owner.unpause_registry(address)
        owner.remove_registry(address)
        assert owner.registries() == []

    def test_blacklist(self, owner: ProxyClient) -> None:
        owner.add_blacklist(A)
        assert owner.is_blacklist(A)
        owner.remove_blacklist(A)
        assert not owner.is_blacklist(A)

    def test_sources(self, issuer: ProxyClient) -> None:
        created = issuer.create_source(address=A)
        assert created == {"address": A, "owner": "issuer", "size": 0}

        issuer.source_add_allowlist(A, B)
        assert issuer.source_is_allowlist(A, B)
        assert issuer.get_source(A)["size"] == 1

        issuer.source_remove_allowlist(A, B)
        assert not issuer.source_is_allowlist(A, B)
        assert [s["address"] for s in issuer.list_sources()] == [A]

    def test_transfer_ownership(self, owner: ProxyClient, mallory: ProxyClient) -> None:
        owner.transfer_ownership("mallory")
        mallory.add_blacklist(A)
        assert owner.info()["owner"] == "mallory"


class TestErrorMapping:
    """Service errors come back as the same exception classes."""

    def test_authorization_error(self, mallory: ProxyClient) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            mallory.add_blacklist(A)
        assert exc_info.value.caller == "mallory"

    def test_duplicate_registry(self, owner: ProxyClient, issuer: ProxyClient) -> None:
        address = issuer.create_source()["address"]
        owner.add_registry("X", address)
        with pytest.raises(ExistRegistryError):
            owner.add_registry("Y", address)

    def test_missing_errors(self, owner: ProxyClient) -> None:
        with pytest.raises(NotExistRegistryError):
            owner.remove_registry(B)
        with pytest.raises(AccountNotBlacklistedError):
            owner.remove_blacklist(A)
        with pytest.raises(SourceNotFoundError):
            owner.add_registry("X", B)

    def test_transition_error(self, owner: ProxyClient, issuer: ProxyClient) -> None:
        address = issuer.create_source()["address"]
        owner.add_registry("X", address)
        owner.pause_registry(address)
        with pytest.raises(PausedRegistryError) as exc_info:
            owner.pause_registry(address)
        assert exc_info.value.subject == address

    def test_unauthenticated_is_service_error(self, api_client: TestClient) -> None:
        anonymous = ProxyClient("http://testserver", http_client=api_client)
        with pytest.raises(ServiceError) as exc_info:
            anonymous.add_blacklist(A)
        assert exc_info.value.status_code == 401

    def test_connection_failure(self) -> None:
        http_client = MagicMock(spec=httpx.Client)
        http_client.request.side_effect = httpx.ConnectError("refused")

        client = ProxyClient("http://127.0.0.1:1", http_client=http_client)
        with pytest.raises(ServiceError) as exc_info:
            client.info()
        assert exc_info.value.url == "http://127.0.0.1:1"


class TestClientLifecycle:
    """Tests for client ownership of the HTTP connection."""

    def test_external_client_not_closed(self) -> None:
        http_client = MagicMock(spec=httpx.Client)
        with ProxyClient("http://x", http_client=http_client):
            pass
        http_client.close.assert_not_called()

    def test_base_url_trailing_slash(self) -> None:
        client = ProxyClient("http://127.0.0.1:8000/")
        assert client.base_url == "http://127.0.0.1:8000"
        client.close()
