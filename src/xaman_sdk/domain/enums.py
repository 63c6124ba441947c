"""Enumerations shared by requests and responses."""

from __future__ import annotations

from enum import Enum, IntFlag


class KycStatus(str, Enum):
    """KYC state of a Xaman user, as named by the API."""

    NONE = "NONE"
    IN_PROGRESS = "IN_PROGRESS"
    REJECTED = "REJECTED"
    SUCCESSFUL = "SUCCESSFUL"

    @classmethod
    def from_name(cls, name: str) -> "KycStatus":
        """Look a status up by its API name or member name.

        Raises:
            ValueError: If ``name`` matches no status.
        """
        for member in cls:
            if name in (member.value, member.name):
                return member
        raise ValueError(f"Specified name was not found in enum KycStatus: {name}")


class XrplTransactionType(str, Enum):
    ACCOUNT_DELETE = "AccountDelete"
    ACCOUNT_SET = "AccountSet"
    CHECK_CANCEL = "CheckCancel"
    CHECK_CASH = "CheckCash"
    CHECK_CREATE = "CheckCreate"
    DEPOSIT_PREAUTH = "DepositPreauth"
    ESCROW_CANCEL = "EscrowCancel"
    ESCROW_CREATE = "EscrowCreate"
    ESCROW_FINISH = "EscrowFinish"
    NFTOKEN_ACCEPT_OFFER = "NFTokenAcceptOffer"
    NFTOKEN_BURN = "NFTokenBurn"
    NFTOKEN_CANCEL_OFFER = "NFTokenCancelOffer"
    NFTOKEN_CREATE_OFFER = "NFTokenCreateOffer"
    NFTOKEN_MINT = "NFTokenMint"
    OFFER_CANCEL = "OfferCancel"
    OFFER_CREATE = "OfferCreate"
    PAYMENT = "Payment"
    PAYMENT_CHANNEL_CLAIM = "PaymentChannelClaim"
    PAYMENT_CHANNEL_CREATE = "PaymentChannelCreate"
    PAYMENT_CHANNEL_FUND = "PaymentChannelFund"
    SET_REGULAR_KEY = "SetRegularKey"
    SIGNER_LIST_SET = "SignerListSet"
    TICKET_CREATE = "TicketCreate"
    TRUST_SET = "TrustSet"


class XamanTransactionType(str, Enum):
    """Pseudo transaction types only understood by Xaman."""

    SIGN_IN = "SignIn"


class XrplPaymentFlags(IntFlag):
    TF_NO_DIRECT_RIPPLE = 65536
    TF_PARTIAL_PAYMENT = 131072
    TF_LIMIT_QUALITY = 262144


class XrplTrustSetFlags(IntFlag):
    TF_SETF_AUTH = 65536
    TF_SET_NO_RIPPLE = 131072
    TF_CLEAR_NO_RIPPLE = 262144
    TF_SET_FREEZE = 1048576
    TF_CLEAR_FREEZE = 2097152
