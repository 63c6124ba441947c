"""Composition root: wires settings, transports and endpoint clients together."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Optional, Type

import httpx

from .application.misc_dtos import PingResponseDTO
from .domain.errors import XamanConfigurationError
from .env import (
    XamanSettings,
    XrplSettings,
    build_settings,
    get_settings,
    get_xrpl_settings,
)
from .infrastructure.http.http_client import XamanHttpClient
from .infrastructure.misc_client import XamanMiscClient
from .infrastructure.payload_client import XamanPayloadClient
from .infrastructure.user_store_client import XamanUserStoreClient
from .infrastructure.websocket.subscription import PayloadSubscriptionTransport
from .infrastructure.xapp_client import XamanXAppClient
from .infrastructure.xapp_jwt_client import XamanXAppJwtClient
from .infrastructure.xrpl.xrpl_client import XrplClient


class XamanClient:
    """Entry point to the Xaman API.

    >>> async with XamanClient.from_env() as xaman:
    ...     pong = await xaman.ping()
    """

    def __init__(
        self,
        settings: XamanSettings,
        xrpl_settings: Optional[XrplSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._http = XamanHttpClient(settings, transport=transport)

        self.payload = XamanPayloadClient(
            self._http,
            PayloadSubscriptionTransport(settings.websocket_url),
            subscribe_delay=settings.subscribe_delay,
        )
        self.misc = XamanMiscClient(self._http)
        self.xapp = XamanXAppClient(self._http, settings.api_secret)
        self.xapp_jwt = XamanXAppJwtClient(self._http)
        self.user_store = XamanUserStoreClient(self._http)
        self.xrpl = XrplClient(xrpl_settings)

    @classmethod
    def from_env(cls) -> "XamanClient":
        """Build a client from ``XAMAN_*`` and ``XRPL_*`` environment variables."""
        return cls(get_settings(), get_xrpl_settings())

    @classmethod
    def builder(cls) -> "XamanClientBuilder":
        return XamanClientBuilder()

    async def ping(self) -> PingResponseDTO:
        """Check credentials and return the application's details."""
        return await self.misc.ping()

    async def aclose(self) -> None:
        await self.payload.aclose()

    async def __aenter__(self) -> "XamanClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()


class XamanClientBuilder:
    """Fluent construction of an ``XamanClient``; configuration is checked in ``build``."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._xrpl_values: dict[str, Any] = {}
        self._transport: Optional[httpx.AsyncBaseTransport] = None

    def with_api_key(self, api_key: str) -> "XamanClientBuilder":
        self._values["api_key"] = api_key
        return self

    def with_api_secret(self, api_secret: str) -> "XamanClientBuilder":
        self._values["api_secret"] = api_secret
        return self

    def with_base_url(self, base_url: str) -> "XamanClientBuilder":
        self._values["base_url"] = base_url
        return self

    def with_websocket_url(self, websocket_url: str) -> "XamanClientBuilder":
        self._values["websocket_url"] = websocket_url
        return self

    def with_timeout(self, seconds: float) -> "XamanClientBuilder":
        self._values["http_timeout"] = seconds
        return self

    def with_max_retries(self, max_retries: int) -> "XamanClientBuilder":
        self._values["max_retries"] = max_retries
        return self

    def with_retry_delay(self, seconds: float) -> "XamanClientBuilder":
        self._values["retry_delay"] = seconds
        return self

    def with_xrpl_node(self, node_websocket_url: str) -> "XamanClientBuilder":
        self._xrpl_values["node_websocket_url"] = node_websocket_url
        return self

    def with_transport(
        self, transport: httpx.AsyncBaseTransport
    ) -> "XamanClientBuilder":
        """Route REST calls through ``transport`` (proxies, mocks)."""
        self._transport = transport
        return self

    def build(self) -> XamanClient:
        if not self._values.get("api_key"):
            raise XamanConfigurationError(
                "API key is required. Use with_api_key() to set it."
            )
        if not self._values.get("api_secret"):
            raise XamanConfigurationError(
                "API secret is required. Use with_api_secret() to set it."
            )
        settings = build_settings(XamanSettings, **self._values)
        xrpl_settings = build_settings(XrplSettings, **self._xrpl_values)
        return XamanClient(settings, xrpl_settings, transport=self._transport)
