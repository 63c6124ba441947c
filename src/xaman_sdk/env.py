from __future__ import annotations

import os
from typing import Any, Callable, TypeVar
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .domain.errors import XamanConfigurationError

DEFAULT_BASE_URL = "https://xaman.app/api/v1"
DEFAULT_WEBSOCKET_URL = "wss://xaman.app/sign"
DEFAULT_XRPL_NODE = "wss://testnet.xrpl-labs.com/"

SettingsT = TypeVar("SettingsT", bound=BaseModel)


def _validate_uuid(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} is required")
    try:
        UUID(value)
    except ValueError as e:
        raise ValueError(f"Invalid {label}. Must be a valid UUID.") from e
    return value


def _validate_url(value: str, label: str, schemes: set[str]) -> str:
    if not value:
        raise ValueError(f"{label} cannot be empty")
    parsed = urlparse(value)
    if parsed.scheme not in schemes:
        allowed = " or ".join(f"{s}://" for s in sorted(schemes))
        raise ValueError(f"{label} must start with {allowed}")
    if not parsed.netloc:
        raise ValueError(f"{label} must include a host")
    return value


class XamanSettings(BaseModel):
    """Typed, read-only settings for the Xaman REST and subscription APIs."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    api_secret: str
    base_url: str = DEFAULT_BASE_URL
    websocket_url: str = DEFAULT_WEBSOCKET_URL
    http_timeout: float = Field(30.0, gt=0)
    max_retries: int = Field(3, ge=0)
    retry_delay: float = Field(1.0, ge=0)
    # Time given to the backend to distribute a payload before subscribing.
    subscribe_delay: float = Field(0.075, ge=0)

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        return _validate_uuid(v, "API Key")

    @field_validator("api_secret")
    @classmethod
    def validate_api_secret(cls, v: str) -> str:
        return _validate_uuid(v, "API Secret")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return _validate_url(v, "Base URL", {"http", "https"})

    @field_validator("websocket_url")
    @classmethod
    def validate_websocket_url(cls, v: str) -> str:
        return _validate_url(v, "WebSocket URL", {"ws", "wss"})


class XrplSettings(BaseModel):
    """Settings for the ledger node used by the XRPL client."""

    model_config = ConfigDict(frozen=True)

    node_websocket_url: str = DEFAULT_XRPL_NODE
    max_retries: int = Field(5, ge=1)
    retry_delay: float = Field(3.0, ge=0)
    timeout: float = Field(30.0, gt=0)

    @field_validator("node_websocket_url")
    @classmethod
    def validate_node_websocket_url(cls, v: str) -> str:
        return _validate_url(v, "XRPL node URL", {"ws", "wss"})


def build_settings(factory: Callable[..., SettingsT], **values: Any) -> SettingsT:
    """Construct settings, turning pydantic errors into configuration errors."""
    try:
        return factory(**values)
    except ValidationError as e:
        raise XamanConfigurationError(f"Invalid SDK configuration: {e}") from e


def get_settings() -> XamanSettings:
    """Return typed settings sourced from ``XAMAN_*`` env vars."""
    api_key = os.environ.get("XAMAN_API_KEY")
    api_secret = os.environ.get("XAMAN_API_SECRET")
    if not (api_key and api_secret):
        raise XamanConfigurationError(
            "XAMAN_API_KEY and XAMAN_API_SECRET are required"
        )
    return build_settings(
        XamanSettings,
        api_key=api_key,
        api_secret=api_secret,
        base_url=os.environ.get("XAMAN_BASE_URL", DEFAULT_BASE_URL),
        websocket_url=os.environ.get("XAMAN_WEBSOCKET_URL", DEFAULT_WEBSOCKET_URL),
        http_timeout=os.environ.get("XAMAN_HTTP_TIMEOUT", "30"),
        max_retries=os.environ.get("XAMAN_MAX_RETRIES", "3"),
        retry_delay=os.environ.get("XAMAN_RETRY_DELAY", "1"),
        subscribe_delay=os.environ.get("XAMAN_SUBSCRIBE_DELAY", "0.075"),
    )


def get_xrpl_settings() -> XrplSettings:
    """Return typed ledger settings sourced from ``XRPL_*`` env vars."""
    return build_settings(
        XrplSettings,
        node_websocket_url=os.environ.get("XRPL_NODE_WSS", DEFAULT_XRPL_NODE),
        max_retries=os.environ.get("XRPL_MAX_RETRIES", "5"),
        retry_delay=os.environ.get("XRPL_RETRY_DELAY", "3"),
        timeout=os.environ.get("XRPL_TIMEOUT", "30"),
    )
