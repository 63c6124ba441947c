"""DTOs for xApp (one-time token, event and push) endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from .shared.serialization import RequestModel, ResponseModel


class XAppOriginDataDTO(ResponseModel):
    payload: Optional[str] = None


class XAppOriginDTO(ResponseModel):
    type: Optional[str] = None
    data: Optional[XAppOriginDataDTO] = None


class XAppUserDeviceDTO(ResponseModel):
    currency: Optional[str] = None


class XAppAccountInfoDTO(ResponseModel):
    account: str
    name: Optional[str] = None
    domain: Optional[str] = None
    blocked: bool = False
    source: Optional[str] = None
    kyc_approved: bool = Field(False, alias="kycApproved")
    pro_subscription: bool = Field(False, alias="proSubscription")


class XAppOttResponseDTO(ResponseModel):
    """Context handed to an xApp at launch, exchanged for its one-time token."""

    locale: Optional[str] = None
    version: Optional[str] = None
    account: Optional[str] = None
    accountaccess: Optional[str] = None
    accounttype: Optional[str] = None
    style: Optional[str] = None
    origin: Optional[XAppOriginDTO] = None
    user: Optional[str] = None
    user_device: Optional[XAppUserDeviceDTO] = None
    account_info: Optional[XAppAccountInfoDTO] = None
    nodetype: Optional[str] = None
    nodewss: Optional[str] = None
    networkid: Optional[int] = None
    currency: Optional[str] = None
    subscriptions: Optional[list[str]] = None


class XAppPushRequestDTO(RequestModel):
    user_token: str
    body: str
    subtitle: Optional[str] = None
    data: Optional[dict[str, Any]] = None


class XAppEventRequestDTO(XAppPushRequestDTO):
    silent: Optional[bool] = None


class XAppPushResponseDTO(ResponseModel):
    pushed: bool = False


class XAppEventResponseDTO(ResponseModel):
    pushed: bool = False
    uuid: Optional[str] = None
