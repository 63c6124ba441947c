"""Domain-specific exceptions."""

from __future__ import annotations

from typing import Optional


class XamanError(Exception):
    """Base class for every error raised by the SDK."""


class XamanConfigurationError(XamanError):
    """Raised when credentials or client settings are missing or invalid."""


class XamanValidationError(XamanError):
    """Raised when caller input is malformed, before any network call."""


class XamanApiError(XamanError):
    """Raised when the Xaman API returns a non-success response.

    Attributes:
        status_code: HTTP status code (500 for synthetic failures)
        reference: Error reference to quote to Xaman support, if any
        code: Numeric Xaman error code, if any
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        reference: Optional[str] = None,
        code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.reference = reference
        self.code = code

    def __repr__(self) -> str:
        return (
            f"XamanApiError(status_code={self.status_code}, message={self.message!r}, "
            f"reference={self.reference!r}, code={self.code!r})"
        )


class XamanPayloadNotFoundError(XamanError):
    """Raised when a sign request does not exist."""

    def __init__(self, payload_uuid: str) -> None:
        super().__init__(f"Payload with UUID '{payload_uuid}' not found")
        self.payload_uuid = payload_uuid


class XamanWebSocketError(XamanError):
    """Raised on connection failures or mid-stream drops of a WebSocket."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class XrplError(XamanError):
    """Raised when a ledger node rejects a command or cannot be reached.

    ``error_code`` carries the node's error sentinel (e.g. ``actNotFound``)
    when the node answered with one.
    """

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class XrplTransactionNotFoundError(XrplError):
    """Raised when the ledger node answers ``txnNotFound`` for a hash."""

    def __init__(self, transaction_hash: str) -> None:
        super().__init__(
            f"Transaction {transaction_hash} not found", error_code="txnNotFound"
        )
        self.transaction_hash = transaction_hash
