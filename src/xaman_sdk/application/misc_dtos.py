"""DTOs for the flat platform endpoints (ping, rates, KYC, assets, rails, hooks)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ..domain.validators import to_formatted_currency
from .shared.serialization import RequestModel, ResponseModel


class XamanApplicationDTO(ResponseModel):
    uuidv4: str
    name: str
    description: Optional[str] = None
    webhookurl: Optional[str] = None
    redirecturis: list[str] = Field(default_factory=list)
    disabled: int = 0
    icon_url: Optional[str] = None
    issued_user_token: Optional[Any] = None


class XamanCallDTO(ResponseModel):
    uuidv4: str


class XamanAuthDTO(ResponseModel):
    application: XamanApplicationDTO
    call: XamanCallDTO
    quota: dict[str, Any] = Field(default_factory=dict)


class PingResponseDTO(ResponseModel):
    pong: bool
    auth: Optional[XamanAuthDTO] = None


class KycInfoDTO(ResponseModel):
    account: str
    kyc_approved: bool = Field(False, alias="kycApproved")


class KycStatusRequestDTO(RequestModel):
    user_token: str


class KycStatusInfoDTO(ResponseModel):
    kyc_status: str = Field(..., alias="kycStatus")


class UserTokensRequestDTO(RequestModel):
    tokens: list[str] = Field(..., min_length=1)


class UserTokenValidityDTO(ResponseModel):
    user_token: str
    active: bool = False
    issued: Optional[int] = None
    expires: Optional[int] = None


class UserTokensResponseDTO(ResponseModel):
    tokens: list[UserTokenValidityDTO] = Field(default_factory=list)


class RatesCurrencyDTO(ResponseModel):
    en: str
    code: str
    symbol: Optional[str] = None
    iso_decimals: int = Field(0, alias="isoDecimals")


class RatesMetaDTO(ResponseModel):
    currency: RatesCurrencyDTO


class RatesResponseDTO(ResponseModel):
    usd: float = Field(..., alias="USD")
    xrp: float = Field(..., alias="XRP")
    meta: RatesMetaDTO = Field(..., alias="__meta")


class BalanceChangeFormattedDTO(ResponseModel):
    value: str
    currency: str


class BalanceChangeDTO(ResponseModel):
    counterparty: str
    currency: str
    value: str
    formatted: Optional[BalanceChangeFormattedDTO] = None


class TransactionResponseDTO(ResponseModel):
    """``platform/xrpl-tx/{hash}``: a transaction with its balance changes."""

    txid: str
    balance_changes: dict[str, list[BalanceChangeDTO]] = Field(
        default_factory=dict, alias="balanceChanges"
    )
    node: str
    transaction: Optional[dict[str, Any]] = None


class CuratedAssetCurrencyDTO(ResponseModel):
    id: int
    issuer_id: int
    issuer: str
    currency: str
    name: str
    avatar: Optional[str] = None
    shortlist: int = 0

    @property
    def currency_formatted(self) -> str:
        return to_formatted_currency(self.currency)


class CuratedAssetDetailsDTO(ResponseModel):
    id: int
    name: str
    domain: Optional[str] = None
    avatar: Optional[str] = None
    shortlist: int = 0
    currencies: dict[str, CuratedAssetCurrencyDTO] = Field(default_factory=dict)


class CuratedAssetsResponseDTO(ResponseModel):
    issuers: list[str] = Field(default_factory=list)
    currencies: list[str] = Field(default_factory=list)
    details: dict[str, CuratedAssetDetailsDTO] = Field(default_factory=dict)


class RailsNetworkEndpointDTO(ResponseModel):
    name: str
    url: str


class RailsNetworkExplorerDTO(ResponseModel):
    name: str
    url_tx: str
    url_account: Optional[str] = None
    url_ctid: Optional[str] = None


class RailsNetworkIconsDTO(ResponseModel):
    icon_square: str
    icon_asset: str


class RailsNetworkDTO(ResponseModel):
    chain_id: int
    color: str
    name: str
    is_livenet: bool = False
    native_asset: str
    endpoints: list[RailsNetworkEndpointDTO] = Field(default_factory=list)
    explorers: list[RailsNetworkExplorerDTO] = Field(default_factory=list)
    rpc: Optional[str] = None
    definitions: Optional[str] = None
    icons: Optional[RailsNetworkIconsDTO] = None


class RailsResponseDTO(ResponseModel):
    network_key: str
    network: RailsNetworkDTO


class HookInfoCreatorDTO(ResponseModel):
    name: Optional[str] = None
    mail: Optional[str] = None
    site: Optional[str] = None


class HookInfoDTO(ResponseModel):
    name: str
    description: str
    creator: Optional[HookInfoCreatorDTO] = None
    xapp: Optional[str] = None
    appuuid: Optional[str] = None
    icon: Optional[str] = None
    verified_accounts: Optional[list[str]] = Field(None, alias="verifiedAccounts")
    audits: Optional[list[str]] = None


class HookInfoResponseDTO(ResponseModel):
    hook_hash: str
    hook_info: HookInfoDTO


class XamanProfileDTO(ResponseModel):
    account_alias: Optional[str] = Field(None, alias="accountAlias")
    owner_alias: Optional[str] = Field(None, alias="ownerAlias")


class ThirdPartyProfileDTO(ResponseModel):
    account_alias: str = Field(..., alias="accountAlias")
    source: str


class GlobalIdDTO(ResponseModel):
    linked: Optional[datetime] = None
    profile_url: Optional[str] = Field(None, alias="profileUrl")


class AccountMetaResponseDTO(ResponseModel):
    account: str
    kyc_approved: bool = Field(False, alias="kycApproved")
    xumm_pro: bool = Field(False, alias="xummPro")
    avatar: Optional[str] = None
    xumm_profile: Optional[XamanProfileDTO] = Field(None, alias="xummProfile")
    third_party_profiles: list[ThirdPartyProfileDTO] = Field(
        default_factory=list, alias="thirdPartyProfiles"
    )
    global_id: Optional[GlobalIdDTO] = Field(None, alias="globalid")
