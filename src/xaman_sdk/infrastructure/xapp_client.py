from __future__ import annotations

from typing import Union

from ..application.xapp_dtos import (
    XAppEventRequestDTO,
    XAppEventResponseDTO,
    XAppOttResponseDTO,
    XAppPushRequestDTO,
    XAppPushResponseDTO,
)
from ..domain.errors import XamanValidationError
from ..domain.shared.transport_protocol import RequestSender
from ..domain.validators import to_sha1_hash


def _require(value: str, label: str) -> None:
    if not value or not value.strip():
        raise XamanValidationError(f"{label} cannot be empty")


def ott_refetch_hash(one_time_token: str, api_secret: str, device_id: str) -> str:
    """Proof of origin required to re-read a one-time token's data."""
    return to_sha1_hash(f"{one_time_token}.{api_secret}.{device_id}".upper()).lower()


class XamanXAppClient:
    """Endpoints used by xApps: one-time token data, events and pushes."""

    def __init__(self, sender: RequestSender, api_secret: str) -> None:
        self._sender = sender
        self._api_secret = api_secret

    async def get_ott_data(self, one_time_token: str) -> XAppOttResponseDTO:
        _require(one_time_token, "One-time token")
        return await self._sender.send(
            "GET", f"platform/xapp/ott/{one_time_token}", XAppOttResponseDTO
        )

    async def refetch_ott_data(
        self, one_time_token: str, device_id: str
    ) -> XAppOttResponseDTO:
        """Read a one-time token's data again (only from the launching device)."""
        _require(one_time_token, "One-time token")
        _require(device_id, "Device ID")
        token_hash = ott_refetch_hash(one_time_token, self._api_secret, device_id)
        return await self._sender.send(
            "GET",
            f"platform/xapp/ott/{one_time_token}/{token_hash}",
            XAppOttResponseDTO,
        )

    async def event(self, request: XAppEventRequestDTO) -> XAppEventResponseDTO:
        self._validate_notification(request)
        return await self._sender.send(
            "POST", "platform/xapp/event", XAppEventResponseDTO, body=request
        )

    async def push(self, request: XAppPushRequestDTO) -> XAppPushResponseDTO:
        self._validate_notification(request)
        return await self._sender.send(
            "POST", "platform/xapp/push", XAppPushResponseDTO, body=request
        )

    @staticmethod
    def _validate_notification(
        request: Union[XAppPushRequestDTO, XAppEventRequestDTO]
    ) -> None:
        _require(request.user_token, "User token")
        _require(request.body, "Body")
