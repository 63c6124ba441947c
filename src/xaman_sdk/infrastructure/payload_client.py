"""Payload (sign request) lifecycle: create, fetch, cancel and subscribe."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional, Union, overload

from prometheus_client import Counter, Gauge

from ..application.payload_dtos import (
    BlobPayloadRequest,
    CancelResult,
    JsonPayloadRequest,
    PayloadDetails,
    PayloadHandle,
    PayloadRequest,
)
from ..domain.errors import (
    XamanApiError,
    XamanPayloadNotFoundError,
    XamanValidationError,
    XamanWebSocketError,
)
from ..domain.shared.cancellation import CancellationToken
from ..domain.shared.transport_protocol import RequestSender, SubscriptionTransport
from ..domain.validators import is_valid_uuid

logger = logging.getLogger(__name__)

DEFAULT_SUBSCRIBE_DELAY = 0.075

xaman_payload_subscriptions_inprogress = Gauge(
    "xaman_payload_subscriptions_inprogress",
    "Number of payload subscriptions currently receiving events",
    multiprocess_mode="livesum",
)

xaman_payload_events_total = Counter(
    "xaman_payload_events_total",
    "Total payload events delivered to subscription handlers",
)


@dataclass(frozen=True)
class PayloadEvent:
    """One message received during a payload subscription.

    ``payload`` is the details snapshot taken when the subscription started;
    it is not refreshed per event. Calling ``close`` ends the subscription
    before the next frame is delivered.
    """

    uuid: str
    data: Any
    payload: PayloadDetails
    close: Callable[[], None] = field(repr=False)

    def _get(self, key: str) -> Any:
        return self.data.get(key) if isinstance(self.data, dict) else None

    @property
    def signed(self) -> Optional[bool]:
        """True/False once the signer resolved the payload, else None."""
        value = self._get("signed")
        return value if isinstance(value, bool) else None

    @property
    def opened(self) -> bool:
        return self._get("opened") is True

    @property
    def expired(self) -> bool:
        return self._get("expired") is True

    @property
    def expires_in_seconds(self) -> Optional[int]:
        value = self._get("expires_in_seconds")
        return value if isinstance(value, int) else None

    @property
    def is_terminal(self) -> bool:
        return self.signed is not None or self.expired


PayloadEventHandler = Callable[[PayloadEvent], Any]


@dataclass(eq=False)
class PayloadAndSubscription:
    """A created payload with its running subscription.

    ``resolved`` completes when the subscription ends and re-raises any
    transport error. ``close`` ends the subscription cleanly.
    """

    created: PayloadHandle
    payload: PayloadDetails
    resolved: "asyncio.Task[None]"
    _scope: CancellationToken = field(repr=False)

    def close(self) -> None:
        self._scope.cancel()


PayloadReference = Union[str, PayloadHandle, PayloadDetails]


def _payload_uuid(payload: PayloadReference) -> str:
    if isinstance(payload, PayloadHandle):
        payload_uuid = payload.uuid
    elif isinstance(payload, PayloadDetails):
        payload_uuid = payload.meta.uuid
    else:
        payload_uuid = payload
    if not is_valid_uuid(payload_uuid):
        raise XamanValidationError(f"Invalid payload UUID: {payload_uuid!r}")
    return payload_uuid


def _request_body(
    request: PayloadRequest,
) -> Union[JsonPayloadRequest, BlobPayloadRequest]:
    if isinstance(request, (JsonPayloadRequest, BlobPayloadRequest)):
        return request
    if isinstance(request, dict):
        return JsonPayloadRequest(txjson=dict(request))
    raise XamanValidationError(
        f"Unsupported payload request type: {type(request).__name__}"
    )


class XamanPayloadClient:
    """Creates sign requests and follows them until they resolve.

    Fetching operations take ``throw_on_error``: when False (default) a
    failed call logs and returns None, when True the ``XamanApiError`` is
    raised. A payload that does not exist always raises
    ``XamanPayloadNotFoundError``, whatever the flag.
    """

    def __init__(
        self,
        sender: RequestSender,
        transport: SubscriptionTransport,
        *,
        subscribe_delay: float = DEFAULT_SUBSCRIBE_DELAY,
    ) -> None:
        self._sender = sender
        self._transport = transport
        self._subscribe_delay = subscribe_delay
        self._background: set[PayloadAndSubscription] = set()

    @staticmethod
    def _soft_fail(error: XamanApiError, throw_on_error: bool) -> None:
        if throw_on_error:
            raise error
        return None

    # -- create -------------------------------------------------------------

    @overload
    async def create(
        self, request: PayloadRequest, *, throw_on_error: Literal[True]
    ) -> PayloadHandle: ...

    @overload
    async def create(
        self, request: PayloadRequest, *, throw_on_error: Literal[False] = ...
    ) -> Optional[PayloadHandle]: ...

    async def create(
        self, request: PayloadRequest, *, throw_on_error: bool = False
    ) -> Optional[PayloadHandle]:
        body = _request_body(request)
        try:
            handle = await self._sender.send(
                "POST", "platform/payload", PayloadHandle, body=body
            )
        except XamanApiError as e:
            logger.error("Failed to create payload: %s", e)
            return self._soft_fail(e, throw_on_error)
        logger.debug("Created payload %s", handle.uuid)
        return handle

    # -- get ----------------------------------------------------------------

    @overload
    async def get(
        self, payload: PayloadReference, *, throw_on_error: Literal[True]
    ) -> PayloadDetails: ...

    @overload
    async def get(
        self, payload: PayloadReference, *, throw_on_error: Literal[False] = ...
    ) -> Optional[PayloadDetails]: ...

    async def get(
        self, payload: PayloadReference, *, throw_on_error: bool = False
    ) -> Optional[PayloadDetails]:
        payload_uuid = _payload_uuid(payload)
        return await self._fetch(
            f"platform/payload/{payload_uuid}", payload_uuid, throw_on_error
        )

    @overload
    async def get_by_custom_identifier(
        self, custom_identifier: str, *, throw_on_error: Literal[True]
    ) -> PayloadDetails: ...

    @overload
    async def get_by_custom_identifier(
        self, custom_identifier: str, *, throw_on_error: Literal[False] = ...
    ) -> Optional[PayloadDetails]: ...

    async def get_by_custom_identifier(
        self, custom_identifier: str, *, throw_on_error: bool = False
    ) -> Optional[PayloadDetails]:
        if not custom_identifier or not custom_identifier.strip():
            raise XamanValidationError("Custom identifier is required")
        return await self._fetch(
            f"platform/payload/ci/{custom_identifier}",
            custom_identifier,
            throw_on_error,
        )

    async def _fetch(
        self, path: str, key: str, throw_on_error: bool
    ) -> Optional[PayloadDetails]:
        try:
            details = await self._sender.send("GET", path, PayloadDetails)
        except XamanApiError as e:
            if e.status_code == 404:
                raise XamanPayloadNotFoundError(key) from e
            logger.error("Failed to get payload %s: %s", key, e)
            return self._soft_fail(e, throw_on_error)
        if not details.meta.exists:
            raise XamanPayloadNotFoundError(key)
        return details

    # -- cancel -------------------------------------------------------------

    @overload
    async def cancel(
        self, payload: PayloadReference, *, throw_on_error: Literal[True]
    ) -> CancelResult: ...

    @overload
    async def cancel(
        self, payload: PayloadReference, *, throw_on_error: Literal[False] = ...
    ) -> Optional[CancelResult]: ...

    async def cancel(
        self, payload: PayloadReference, *, throw_on_error: bool = False
    ) -> Optional[CancelResult]:
        payload_uuid = _payload_uuid(payload)
        try:
            result = await self._sender.send(
                "DELETE", f"platform/payload/{payload_uuid}", CancelResult
            )
        except XamanApiError as e:
            if e.status_code == 404:
                raise XamanPayloadNotFoundError(payload_uuid) from e
            logger.error("Failed to cancel payload %s: %s", payload_uuid, e)
            return self._soft_fail(e, throw_on_error)
        if result.meta is not None and not result.meta.exists:
            raise XamanPayloadNotFoundError(payload_uuid)
        return result

    # -- subscribe ----------------------------------------------------------

    async def subscribe(
        self,
        payload: PayloadReference,
        handler: PayloadEventHandler,
        token: Optional[CancellationToken] = None,
    ) -> None:
        """Deliver every event of the payload to ``handler`` until the stream ends.

        The stream ends when the server closes it, when ``token`` is
        cancelled, or when the handler calls ``event.close()``. Transport
        errors propagate. Handlers may be coroutine functions; each result is
        awaited before the next event is delivered.
        """
        payload_uuid = _payload_uuid(payload)
        details = await self._prepare(payload_uuid)
        scope = (token or CancellationToken()).linked()
        await self._consume(payload_uuid, details, handler, scope)

    async def create_and_subscribe(
        self,
        request: PayloadRequest,
        handler: PayloadEventHandler,
        token: Optional[CancellationToken] = None,
    ) -> PayloadAndSubscription:
        """Create a payload and start its subscription in the background.

        Returns once the subscription is connected; creation and setup
        failures are raised here, later failures through ``resolved``.
        """
        created = await self.create(request, throw_on_error=True)
        details = await self._prepare(created.uuid)
        scope = (token or CancellationToken()).linked()

        opened: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _on_open() -> None:
            if not opened.done():
                opened.set_result(None)

        task = asyncio.create_task(
            self._consume(created.uuid, details, handler, scope, on_open=_on_open)
        )
        try:
            await asyncio.wait({opened, task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if not opened.done():
            opened.cancel()
            # Finished before connecting: surface the setup error, if any.
            task.result()

        subscription = PayloadAndSubscription(
            created=created, payload=details, resolved=task, _scope=scope
        )
        self._background.add(subscription)
        task.add_done_callback(lambda _: self._background.discard(subscription))
        return subscription

    async def aclose(self) -> None:
        """Close background subscriptions and wait for them to end."""
        subscriptions = list(self._background)
        for subscription in subscriptions:
            subscription.close()
        results = await asyncio.gather(
            *(s.resolved for s in subscriptions), return_exceptions=True
        )
        for subscription, result in zip(subscriptions, results):
            if isinstance(result, Exception):
                logger.warning(
                    "Subscription for payload %s ended with an error: %s",
                    subscription.created.uuid,
                    result,
                )

    async def _prepare(self, payload_uuid: str) -> PayloadDetails:
        # Let the backend distribute a freshly created payload first.
        await asyncio.sleep(self._subscribe_delay)
        return await self.get(payload_uuid, throw_on_error=True)

    async def _consume(
        self,
        payload_uuid: str,
        details: PayloadDetails,
        handler: PayloadEventHandler,
        scope: CancellationToken,
        *,
        on_open: Optional[Callable[[], None]] = None,
    ) -> None:
        xaman_payload_subscriptions_inprogress.inc()
        try:
            stream = self._transport.open_stream(payload_uuid, scope, on_open=on_open)
            async with aclosing(stream) as frames:
                async for frame in frames:
                    try:
                        data = json.loads(frame)
                    except json.JSONDecodeError as e:
                        raise XamanWebSocketError(
                            f"Malformed event for payload {payload_uuid}",
                            key=payload_uuid,
                        ) from e

                    xaman_payload_events_total.inc()
                    event = PayloadEvent(
                        uuid=payload_uuid,
                        data=data,
                        payload=details,
                        close=scope.cancel,
                    )
                    result = handler(event)
                    if inspect.isawaitable(result):
                        await result
        finally:
            xaman_payload_subscriptions_inprogress.dec()
        logger.debug("Subscription for payload %s ended", payload_uuid)
