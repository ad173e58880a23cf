"""
Configuration for the allowlist proxy service.

All settings come from ``AP_*`` environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field, field_validator

from allowlist_proxy.core.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(env_var: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {env_var}", env_var=env_var, value=raw)


def _parse_api_keys(raw: str) -> dict[str, str]:
    """Parse ``hash:principal`` pairs separated by commas."""
    keys: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        key_hash, sep, principal = item.partition(":")
        if not sep or not key_hash or not principal:
            raise ConfigurationError(
                "API keys must be 'hash:principal' pairs",
                env_var="AP_API_KEYS",
                value=item,
            )
        keys[key_hash.strip()] = principal.strip()
    return keys


class ProxySettings(BaseModel):
    """Service settings."""

    proxy_name: str = Field(default="Investment Token", description="Name passed to initialize")
    owner: str = Field(default="owner", description="Principal that initializes and owns the proxy")
    audit_dir: Path | None = Field(default=None, description="Audit trail directory (disabled if unset)")
    require_auth: bool = Field(default=True, description="Reject unauthenticated mutations")
    api_keys: dict[str, str] = Field(default_factory=dict, description="API key hash -> principal")
    trust_user_id_header: bool | None = Field(
        default=None,
        description="Accept x-user-id as the principal (default: only when no API keys are set)",
    )
    log_level: str = Field(default="INFO", description="Logging level name")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)
    url: str = Field(default="http://127.0.0.1:8000", description="Base URL used by the CLI client")

    model_config = {"extra": "forbid"}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProxySettings":
        """
        Load settings from the environment.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if "AP_PROXY_NAME" in env:
            values["proxy_name"] = env["AP_PROXY_NAME"]
        if env.get("AP_OWNER"):
            values["owner"] = env["AP_OWNER"]
        if env.get("AP_AUDIT_DIR"):
            values["audit_dir"] = Path(env["AP_AUDIT_DIR"])
        if "AP_REQUIRE_AUTH" in env:
            values["require_auth"] = _parse_bool("AP_REQUIRE_AUTH", env["AP_REQUIRE_AUTH"])
        if env.get("AP_API_KEYS"):
            values["api_keys"] = _parse_api_keys(env["AP_API_KEYS"])
        if env.get("AP_TRUST_USER_ID_HEADER"):
            values["trust_user_id_header"] = _parse_bool(
                "AP_TRUST_USER_ID_HEADER", env["AP_TRUST_USER_ID_HEADER"]
            )
        if env.get("AP_LOG_LEVEL"):
            values["log_level"] = env["AP_LOG_LEVEL"]
        if env.get("AP_HOST"):
            values["host"] = env["AP_HOST"]
        if env.get("AP_URL"):
            values["url"] = env["AP_URL"]
        if env.get("AP_PORT"):
            try:
                values["port"] = int(env["AP_PORT"])
            except ValueError:
                raise ConfigurationError(
                    "AP_PORT must be an integer", env_var="AP_PORT", value=env["AP_PORT"]
                ) from None

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
