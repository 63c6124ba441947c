from __future__ import annotations

from typing import Sequence

from ..application.misc_dtos import (
    AccountMetaResponseDTO,
    CuratedAssetsResponseDTO,
    HookInfoDTO,
    HookInfoResponseDTO,
    KycInfoDTO,
    KycStatusInfoDTO,
    KycStatusRequestDTO,
    PingResponseDTO,
    RailsNetworkDTO,
    RailsResponseDTO,
    RatesResponseDTO,
    TransactionResponseDTO,
    UserTokensRequestDTO,
    UserTokensResponseDTO,
)
from ..domain.enums import KycStatus
from ..domain.errors import XamanApiError, XamanValidationError
from ..domain.shared.transport_protocol import RequestSender
from ..domain.validators import is_account_address, is_sha512_half, is_valid_uuid

MINIMUM_AVATAR_DIMENSIONS = 200
AVATAR_URL = "https://xaman.app/avatar/{account}_{dimensions}_{padding}.png"


class XamanMiscClient:
    """Flat platform endpoints: ping, rates, KYC, curated assets, hooks, rails."""

    def __init__(self, sender: RequestSender) -> None:
        self._sender = sender

    async def ping(self) -> PingResponseDTO:
        return await self._sender.send("GET", "platform/ping", PingResponseDTO)

    async def get_curated_assets(self) -> CuratedAssetsResponseDTO:
        return await self._sender.send(
            "GET", "platform/curated-assets", CuratedAssetsResponseDTO
        )

    async def get_hook_info(self, hook_hash: str) -> HookInfoResponseDTO:
        if not is_sha512_half(hook_hash):
            raise XamanValidationError("Invalid Hook Hash (expecting SHA-512Half)")
        info = await self._sender.send(
            "GET", f"platform/hookhash/{hook_hash}", HookInfoDTO
        )
        return HookInfoResponseDTO(hook_hash=hook_hash, hook_info=info)

    async def get_all_hook_infos(self) -> list[HookInfoResponseDTO]:
        infos = await self._sender.send(
            "GET", "platform/hookhash", dict[str, HookInfoDTO]
        )
        return [
            HookInfoResponseDTO(hook_hash=hook_hash, hook_info=info)
            for hook_hash, info in infos.items()
        ]

    async def get_rails(self) -> list[RailsResponseDTO]:
        networks = await self._sender.send(
            "GET", "platform/rails", dict[str, RailsNetworkDTO]
        )
        return [
            RailsResponseDTO(network_key=key, network=network)
            for key, network in networks.items()
        ]

    async def get_transaction(self, tx_hash: str) -> TransactionResponseDTO:
        """Fetch a ledger transaction with its balance changes through Xaman."""
        if not is_sha512_half(tx_hash):
            raise XamanValidationError(
                "Invalid Transaction Hash (expecting SHA-512Half)"
            )
        return await self._sender.send(
            "GET", f"platform/xrpl-tx/{tx_hash}", TransactionResponseDTO
        )

    async def get_kyc_status(self, user_token_or_account: str) -> KycStatus:
        """KYC state for an account address (public) or a user token."""
        if not user_token_or_account or not user_token_or_account.strip():
            raise XamanValidationError("User token or account cannot be empty")

        if is_account_address(user_token_or_account):
            info = await self._sender.send(
                "GET",
                f"platform/kyc-status/{user_token_or_account}",
                KycInfoDTO,
                use_credentials=False,
            )
            return KycStatus.SUCCESSFUL if info.kyc_approved else KycStatus.NONE

        if is_valid_uuid(user_token_or_account):
            status = await self._sender.send(
                "POST",
                "platform/kyc-status",
                KycStatusInfoDTO,
                body=KycStatusRequestDTO(user_token=user_token_or_account),
            )
            try:
                return KycStatus.from_name(status.kyc_status)
            except ValueError as e:
                raise XamanApiError(
                    500, f"Unexpected KYC status: {status.kyc_status}"
                ) from e

        raise XamanValidationError("Invalid user token or account provided")

    async def get_rates(self, currency_code: str) -> RatesResponseDTO:
        if not currency_code or not currency_code.strip():
            raise XamanValidationError("Currency code cannot be empty")
        code = currency_code.strip().upper()
        return await self._sender.send(
            "GET", f"platform/rates/{code}", RatesResponseDTO
        )

    async def verify_user_token(self, user_token: str) -> UserTokensResponseDTO:
        if not user_token or not user_token.strip():
            raise XamanValidationError("User token cannot be empty")
        return await self._sender.send(
            "GET", f"platform/user-token/{user_token}", UserTokensResponseDTO
        )

    async def verify_user_tokens(
        self, user_tokens: Sequence[str]
    ) -> UserTokensResponseDTO:
        if not user_tokens:
            raise XamanValidationError("User tokens cannot be empty")
        return await self._sender.send(
            "POST",
            "platform/user-tokens",
            UserTokensResponseDTO,
            body=UserTokensRequestDTO(tokens=list(user_tokens)),
        )

    async def get_account_meta(self, account: str) -> AccountMetaResponseDTO:
        if not is_account_address(account):
            raise XamanValidationError("Value should be a valid account address")
        return await self._sender.send(
            "GET", f"platform/account-meta/{account}", AccountMetaResponseDTO
        )

    @staticmethod
    def get_avatar_url(account: str, dimensions: int, padding: int = 0) -> str:
        if not account or not account.strip():
            raise XamanValidationError("Account cannot be empty")
        if dimensions < MINIMUM_AVATAR_DIMENSIONS:
            raise XamanValidationError(
                f"The minimum (square) dimensions are {MINIMUM_AVATAR_DIMENSIONS}."
            )
        if padding < 0:
            raise XamanValidationError(
                "The padding should be equal or greater than zero."
            )
        return AVATAR_URL.format(
            account=account, dimensions=dimensions, padding=padding
        )
