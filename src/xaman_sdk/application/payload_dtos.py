"""Data Transfer Objects for payloads (sign requests)."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import Field, field_validator

from ..domain.enums import XamanTransactionType, XrplTransactionType
from .misc_dtos import XamanApplicationDTO
from .shared.serialization import RequestModel, ResponseModel


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class PayloadReturnUrl(RequestModel):
    """Where the signer is sent after resolving the payload."""

    app: Optional[str] = None
    web: Optional[str] = None


class PayloadOptions(RequestModel):
    """Behavioral options of a sign request.

    Consistency of these options (e.g. a non-empty signer list) is enforced
    by the API, not by the SDK.
    """

    submit: Optional[bool] = Field(
        None, description="Should Xaman submit to the ledger after signing?"
    )
    pathfinding: Optional[bool] = None
    pathfinding_fallback: Optional[bool] = None
    multisign: Optional[bool] = None
    expire: Optional[int] = Field(
        None, description="Minutes after which the payload expires"
    )
    signers: Optional[list[str]] = Field(
        None, description="Accounts that are allowed to sign"
    )
    force_network: Optional[str] = None
    return_url: Optional[PayloadReturnUrl] = None


class PayloadCustomMeta(RequestModel):
    """Caller metadata attached to a payload."""

    identifier: Optional[str] = Field(
        None, description="Your own identifier for this payload, must be unique"
    )
    blob: Optional[dict[str, Any]] = None
    instruction: Optional[str] = Field(
        None, description="Message shown to the signer"
    )


class _PayloadRequestBase(RequestModel):
    user_token: Optional[str] = Field(
        None, description="Push token to deliver the request to a device"
    )
    options: Optional[PayloadOptions] = None
    custom_meta: Optional[PayloadCustomMeta] = None


class JsonPayloadRequest(_PayloadRequestBase):
    """A sign request built from a raw JSON transaction document."""

    txjson: dict[str, Any]

    @classmethod
    def from_json(cls, tx_json: str, **kwargs: Any) -> "JsonPayloadRequest":
        return cls(txjson=json.loads(tx_json), **kwargs)


class BlobPayloadRequest(_PayloadRequestBase):
    """A sign request for a pre-built binary transaction (hex)."""

    txblob: str = Field(..., min_length=1)

    @field_validator("txblob")
    @classmethod
    def validate_txblob(cls, v: str) -> str:
        try:
            bytes.fromhex(v)
        except ValueError as e:
            raise ValueError("Transaction blob must be hex encoded") from e
        return v


class TransactionPayload(dict[str, Any]):
    """A structured transaction template (arbitrary transaction fields).

    >>> tx = TransactionPayload("Payment", Destination="rPEPPER...", Amount="1000")
    """

    def __init__(
        self,
        transaction_type: Union[str, XrplTransactionType, XamanTransactionType],
        **fields: Any,
    ) -> None:
        if isinstance(transaction_type, (XrplTransactionType, XamanTransactionType)):
            transaction_type = transaction_type.value
        super().__init__(TransactionType=transaction_type, **fields)

    def to_request(self, **kwargs: Any) -> JsonPayloadRequest:
        """Wrap the template into a request, optionally with options/meta."""
        return JsonPayloadRequest(txjson=dict(self), **kwargs)


PayloadRequest = Union[JsonPayloadRequest, BlobPayloadRequest, TransactionPayload]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class PayloadNextDTO(ResponseModel):
    always: str
    no_push_msg_received: Optional[str] = None


class PayloadRefsDTO(ResponseModel):
    qr_png: str
    qr_matrix: str
    qr_uri_quality_opts: list[str] = Field(default_factory=list)
    websocket_status: str


class PayloadHandle(ResponseModel):
    """Identifies a created sign request; the durable key for later lookups."""

    uuid: str
    next: PayloadNextDTO
    refs: PayloadRefsDTO
    pushed: bool = False


class PayloadDetailsMetaDTO(ResponseModel):
    exists: bool = False
    uuid: str
    multisign: bool = False
    submit: bool = False
    pathfinding: bool = False
    pathfinding_fallback: bool = False
    force_network: Optional[str] = None
    destination: Optional[str] = None
    resolved_destination: Optional[str] = None
    resolved: bool = False
    signed: bool = False
    cancelled: bool = False
    expired: bool = False
    pushed: bool = False
    app_opened: bool = False
    opened_by_deeplink: Optional[bool] = None
    immutable: Optional[bool] = None
    return_url_app: Optional[str] = None
    return_url_web: Optional[str] = None
    is_xapp: bool = False
    signers: Optional[list[str]] = None


class PayloadDetailsPayloadDTO(ResponseModel):
    tx_type: Optional[str] = None
    tx_destination: Optional[str] = None
    tx_destination_tag: Optional[int] = None
    request_json: dict[str, Any] = Field(default_factory=dict)
    origintype: Optional[str] = None
    signmethod: Optional[str] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    expires_in_seconds: Optional[int] = None


class PayloadSignerResponseDTO(ResponseModel):
    """The signer's response, present once the payload is resolved."""

    hex: Optional[str] = None
    txid: Optional[str] = None
    resolved_at: Optional[datetime] = None
    dispatched_to: Optional[str] = None
    dispatched_nodetype: Optional[str] = None
    dispatched_result: Optional[str] = None
    dispatched_to_node: Optional[bool] = None
    environment_nodeuri: Optional[str] = None
    environment_nodetype: Optional[str] = None
    multisign_account: Optional[str] = None
    account: Optional[str] = None
    signer: Optional[str] = None
    user: Optional[str] = None


class PayloadCustomMetaDTO(ResponseModel):
    identifier: Optional[str] = None
    blob: Optional[Any] = None
    instruction: Optional[str] = None


class PayloadDetails(ResponseModel):
    """A fresh snapshot of a sign request's state. Never cached."""

    meta: PayloadDetailsMetaDTO
    application: Optional[XamanApplicationDTO] = None
    payload: Optional[PayloadDetailsPayloadDTO] = None
    response: Optional[PayloadSignerResponseDTO] = None
    custom_meta: Optional[PayloadCustomMetaDTO] = None

    @property
    def uuid(self) -> str:
        return self.meta.uuid

    @property
    def is_terminal(self) -> bool:
        """True once the payload was signed, cancelled or expired."""
        return self.meta.signed or self.meta.cancelled or self.meta.expired

    @property
    def resolution(self) -> Optional[str]:
        """``signed``, ``cancelled`` or ``expired``; None while pending."""
        for state in ("signed", "cancelled", "expired"):
            if getattr(self.meta, state):
                return state
        return None


class CancelResultDTO(ResponseModel):
    cancelled: bool = False
    reason: Optional[str] = None


class CancelResult(ResponseModel):
    """Result of ``DELETE platform/payload/{uuid}``."""

    result: CancelResultDTO
    meta: Optional[PayloadDetailsMetaDTO] = None
    custom_meta: Optional[PayloadCustomMetaDTO] = None
