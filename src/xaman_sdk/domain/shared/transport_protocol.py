"""Protocol interfaces for the SDK's network seams.

These protocols define the contracts the higher-level clients depend on.
They enable dependency injection and make the clients testable by allowing
fake implementations (see ``tests/fixtures``).
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterator,
    Callable,
    Mapping,
    Optional,
    Protocol,
)

if TYPE_CHECKING:
    # Avoid circular imports by only importing types during type checking
    import httpx

    from .cancellation import CancellationToken


class RequestSender(Protocol):
    """Reliable JSON request sender for the Xaman REST API.

    Implementations inject credentials, retry server errors, and decode
    error envelopes into ``XamanApiError``.
    """

    def build_client(
        self,
        use_credentials: bool = True,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> "httpx.AsyncClient":
        """Build a pre-configured HTTP client.

        Args:
            use_credentials: Whether to add the API key/secret headers
            extra_headers: Additional headers (bearer JWT, one-time token, ...)

        Returns:
            A client owned by the caller, who must close it
        """
        ...

    async def send(
        self,
        method: str,
        path: str,
        response_type: Any,
        *,
        body: Any = None,
        use_credentials: bool = True,
        client: Optional["httpx.AsyncClient"] = None,
    ) -> Any:
        """Send one request and decode the response as ``response_type``.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            response_type: pydantic model (or any type pydantic can validate)
            body: Optional JSON body (request DTO, mapping or raw JSON string)
            use_credentials: Whether to send the API key/secret headers
            client: Optional caller-built client; used as-is and not closed

        Returns:
            The decoded response

        Raises:
            XamanApiError: On non-success responses or undecodable bodies
        """
        ...


class SubscriptionTransport(Protocol):
    """Push channel delivering the live events of a single payload."""

    def open_stream(
        self,
        payload_uuid: str,
        token: Optional["CancellationToken"] = None,
        *,
        on_open: Optional[Callable[[], None]] = None,
    ) -> AsyncIterator[str]:
        """Open one connection for ``payload_uuid`` and yield its text frames.

        ``on_open`` is called once the connection is established, before the
        first frame is received.

        The iterator ends without error when the server closes the
        connection or ``token`` is cancelled, and raises
        ``XamanWebSocketError`` on connection failures.
        """
        ...
