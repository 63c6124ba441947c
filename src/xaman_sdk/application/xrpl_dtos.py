"""DTOs for ledger node (rippled WebSocket API) results."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from pydantic import Field

from ..domain.validators import parse_delivered_amount, xrp_drops_to_decimal
from .shared.serialization import ResponseModel


class XrplTransactionDTO(ResponseModel):
    transaction_type: str = Field("", alias="TransactionType")
    account: str = Field("", alias="Account")
    fee: str = Field("", alias="Fee")
    destination: Optional[str] = Field(None, alias="Destination")
    amount: Optional[Any] = Field(None, alias="Amount")
    hash: str = ""
    date: Optional[int] = None
    ledger_index: Optional[int] = None


class XrplTransactionMetaDTO(ResponseModel):
    transaction_result: str = Field("", alias="TransactionResult")
    delivered_amount: Optional[Any] = None
    affected_nodes: Optional[list[dict[str, Any]]] = Field(None, alias="AffectedNodes")

    def parsed_delivered_amount(self) -> tuple[Decimal, str]:
        """Delivered amount as (value, currency); see ``parse_delivered_amount``."""
        return parse_delivered_amount(self.delivered_amount)


class XrplTransactionResult(ResponseModel):
    """Point-in-time read of a transaction.

    ``validated`` means the ledger has finalized it. Transaction fields are
    read from ``tx_json`` (API v2) or the top level of the result (API v1).
    """

    validated: bool = False
    status: str = ""
    hash: Optional[str] = None
    ledger_index: Optional[int] = None
    meta: Optional[XrplTransactionMetaDTO] = None
    tx_json: Optional[XrplTransactionDTO] = None
    raw_response: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @property
    def transaction(self) -> XrplTransactionDTO:
        if self.tx_json is not None:
            return self.tx_json
        fields = dict(self.model_extra or {})
        fields.setdefault("hash", self.hash or "")
        fields.setdefault("ledger_index", self.ledger_index)
        return XrplTransactionDTO.model_validate(fields)


class XrplAccountDataDTO(ResponseModel):
    account: str = Field("", alias="Account")
    balance: str = Field("0", alias="Balance")
    owner_count: int = Field(0, alias="OwnerCount")
    sequence: int = Field(0, alias="Sequence")

    @property
    def balance_xrp(self) -> Decimal:
        return xrp_drops_to_decimal(self.balance)


class XrplAccountResult(ResponseModel):
    """Point-in-time read of an account root."""

    account_data: XrplAccountDataDTO = Field(default_factory=XrplAccountDataDTO)
    validated: bool = False
    ledger_index: Optional[int] = None
