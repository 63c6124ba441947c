"""Typed async client for the Xaman (formerly Xumm) platform API."""

from .application.payload_dtos import (
    BlobPayloadRequest,
    CancelResult,
    JsonPayloadRequest,
    PayloadCustomMeta,
    PayloadDetails,
    PayloadHandle,
    PayloadOptions,
    PayloadReturnUrl,
    TransactionPayload,
)
from .client import XamanClient, XamanClientBuilder
from .domain.enums import KycStatus, XamanTransactionType, XrplTransactionType
from .domain.errors import (
    XamanApiError,
    XamanConfigurationError,
    XamanError,
    XamanPayloadNotFoundError,
    XamanValidationError,
    XamanWebSocketError,
    XrplError,
    XrplTransactionNotFoundError,
)
from .domain.shared.cancellation import CancellationToken
from .env import XamanSettings, XrplSettings
from .infrastructure.payload_client import PayloadAndSubscription, PayloadEvent
from .version import __version__

__all__ = [
    "BlobPayloadRequest",
    "CancelResult",
    "CancellationToken",
    "JsonPayloadRequest",
    "KycStatus",
    "PayloadAndSubscription",
    "PayloadCustomMeta",
    "PayloadDetails",
    "PayloadEvent",
    "PayloadHandle",
    "PayloadOptions",
    "PayloadReturnUrl",
    "TransactionPayload",
    "XamanApiError",
    "XamanClient",
    "XamanClientBuilder",
    "XamanConfigurationError",
    "XamanError",
    "XamanPayloadNotFoundError",
    "XamanSettings",
    "XamanTransactionType",
    "XamanValidationError",
    "XamanWebSocketError",
    "XrplError",
    "XrplSettings",
    "XrplTransactionNotFoundError",
    "XrplTransactionType",
    "__version__",
]
