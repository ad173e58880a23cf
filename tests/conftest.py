"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from allowlist_proxy.api.app import create_app
from allowlist_proxy.config import ProxySettings
from allowlist_proxy.proxy.engine import AllowlistRegistryProxy
from allowlist_proxy.registry.allowlist import AllowlistRegistry
from allowlist_proxy.registry.catalog import SourceCatalog

# Keep the CLI pointed away from any real service
os.environ.setdefault("AP_URL", "http://testserver")

OWNER = "owner"
REGISTRY_OWNER = "registry-admin"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def proxy() -> AllowlistRegistryProxy:
    """An initialized proxy owned by OWNER."""
    instance = AllowlistRegistryProxy()
    instance.initialize("Investment Token", caller=OWNER)
    return instance


@pytest.fixture
def make_registry() -> Callable[..., AllowlistRegistry]:
    """Factory for registries pre-filled with allowed identities."""

    def _make(*identities: str, address: str | None = None) -> AllowlistRegistry:
        registry = AllowlistRegistry(owner=REGISTRY_OWNER, address=address)
        for identity in identities:
            registry.add_allowlist(identity, caller=REGISTRY_OWNER)
        return registry

    return _make


@pytest.fixture
def settings() -> ProxySettings:
    """Settings for an API instance with authentication on."""
    return ProxySettings(proxy_name="Investment Token", owner=OWNER, require_auth=True)


@pytest.fixture
def catalog() -> SourceCatalog:
    return SourceCatalog()


@pytest.fixture
def api_client(settings: ProxySettings, catalog: SourceCatalog) -> Generator[TestClient, None, None]:
    """TestClient for an app serving a fresh proxy."""
    app = create_app(settings, catalog=catalog)
    with TestClient(app) as client:
        yield client
