from __future__ import annotations

from typing import Any, Mapping, Union

from ..application.xapp_jwt_dtos import (
    XAppJwtAuthorizeResponseDTO,
    XAppJwtNFTokenDetailDTO,
    XAppJwtUserDataResponseDTO,
    XAppJwtUserDataUpdateResponseDTO,
)
from ..domain.errors import XamanValidationError
from ..domain.shared.transport_protocol import RequestSender


def _require(value: str, label: str) -> None:
    if not value or not value.strip():
        raise XamanValidationError(f"{label} cannot be empty")


class XamanXAppJwtClient:
    """xApp endpoints authenticated with a one-time token or a bearer JWT.

    Each call builds its own HTTP client carrying the extra auth header and
    hands it to the sender, so retries and error decoding stay uniform.
    """

    def __init__(self, sender: RequestSender) -> None:
        self._sender = sender

    async def authorize(self, one_time_token: str) -> XAppJwtAuthorizeResponseDTO:
        """Exchange an xApp's one-time token for a JWT."""
        _require(one_time_token, "One-time token")
        async with self._sender.build_client(
            use_credentials=True, extra_headers={"X-API-OTT": one_time_token}
        ) as client:
            return await self._sender.send(
                "GET",
                "xapp-jwt/authorize",
                XAppJwtAuthorizeResponseDTO,
                client=client,
            )

    async def get_user_data(self, jwt: str, key: str) -> XAppJwtUserDataResponseDTO:
        _require(key, "Key")
        return await self._bearer_send(
            "GET", f"xapp-jwt/userdata/{key}", XAppJwtUserDataResponseDTO, jwt
        )

    async def set_user_data(
        self, jwt: str, key: str, data: Union[str, Mapping[str, Any]]
    ) -> XAppJwtUserDataUpdateResponseDTO:
        """Store ``data`` (a JSON string or a mapping) under ``key``."""
        _require(key, "Key")
        if isinstance(data, str):
            _require(data, "JSON")
        elif not data:
            raise XamanValidationError("Data cannot be empty")
        else:
            data = dict(data)
        return await self._bearer_send(
            "POST",
            f"xapp-jwt/userdata/{key}",
            XAppJwtUserDataUpdateResponseDTO,
            jwt,
            body=data,
        )

    async def delete_user_data(
        self, jwt: str, key: str
    ) -> XAppJwtUserDataUpdateResponseDTO:
        _require(key, "Key")
        return await self._bearer_send(
            "DELETE", f"xapp-jwt/userdata/{key}", XAppJwtUserDataUpdateResponseDTO, jwt
        )

    async def get_nftoken_detail(
        self, jwt: str, token_id: str
    ) -> XAppJwtNFTokenDetailDTO:
        _require(token_id, "Token ID")
        return await self._bearer_send(
            "GET", f"xapp-jwt/nftoken-detail/{token_id}", XAppJwtNFTokenDetailDTO, jwt
        )

    async def _bearer_send(
        self,
        method: str,
        path: str,
        response_type: Any,
        jwt: str,
        body: Any = None,
    ) -> Any:
        _require(jwt, "JWT")
        async with self._sender.build_client(
            use_credentials=False, extra_headers={"Authorization": f"Bearer {jwt}"}
        ) as client:
            return await self._sender.send(
                method, path, response_type, body=body, client=client
            )
