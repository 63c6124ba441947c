"""DTOs for JWT-authenticated xApp endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from .shared.serialization import ResponseModel
from .xapp_dtos import XAppOttResponseDTO


class XAppJwtAppDTO(ResponseModel):
    name: str


class XAppJwtAuthorizeResponseDTO(ResponseModel):
    ott: XAppOttResponseDTO
    app: XAppJwtAppDTO
    jwt: str


class XAppJwtUserDataResponseDTO(ResponseModel):
    operation: str
    data: dict[str, Any] = Field(default_factory=dict)
    keys: list[str] = Field(default_factory=list)
    count: int = 0


class XAppJwtUserDataUpdateResponseDTO(ResponseModel):
    operation: str
    persisted: bool = False


class XAppJwtNFTokenDetailDTO(ResponseModel):
    issuer: Optional[str] = None
    token: Optional[str] = None
    owner: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
