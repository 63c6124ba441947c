"""WebSocket transport for live payload events."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Optional

import aiohttp

from ...domain.errors import XamanWebSocketError
from ...domain.shared.cancellation import CancellationToken
from ...env import DEFAULT_WEBSOCKET_URL

logger = logging.getLogger(__name__)

_DROPPED_TYPES = (
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
)


async def _receive(
    ws: aiohttp.ClientWebSocketResponse, token: Optional[CancellationToken]
) -> Optional[aiohttp.WSMessage]:
    """Receive one message, or None when ``token`` fires first."""
    if token is None:
        return await ws.receive()

    receive_task = asyncio.ensure_future(ws.receive())
    cancel_task = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait(
            {receive_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for task in (receive_task, cancel_task):
            if not task.done():
                task.cancel()

    if receive_task.done() and not receive_task.cancelled():
        return receive_task.result()
    return None


class PayloadSubscriptionTransport:
    """Opens one WebSocket per subscription at ``{websocket_url}/{uuid}``.

    Each call to ``open_stream`` is independent: the payload UUID lives only
    in the call, so a single transport can serve concurrent subscriptions.
    """

    def __init__(
        self,
        websocket_url: str = DEFAULT_WEBSOCKET_URL,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._websocket_url = websocket_url.rstrip("/")
        self._session = session

    def _url(self, payload_uuid: str) -> str:
        return f"{self._websocket_url}/{payload_uuid}"

    async def open_stream(
        self,
        payload_uuid: str,
        token: Optional[CancellationToken] = None,
        *,
        on_open: Optional[Callable[[], None]] = None,
    ) -> AsyncIterator[str]:
        if token is not None and token.cancelled:
            return

        if self._session is not None:
            session = self._session
            close_session = False
        else:
            session = aiohttp.ClientSession()
            close_session = True

        ws: Optional[aiohttp.ClientWebSocketResponse] = None
        try:
            try:
                ws = await session.ws_connect(self._url(payload_uuid))
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(
                    "Failed to connect to WebSocket for payload %s: %s",
                    payload_uuid,
                    e,
                )
                raise XamanWebSocketError(
                    f"Failed to connect to WebSocket for payload {payload_uuid}: {e}",
                    key=payload_uuid,
                ) from e

            logger.info("Payload %s: subscription active", payload_uuid)
            if on_open is not None:
                on_open()

            while not (token is not None and token.cancelled):
                msg = await _receive(ws, token)
                if msg is None:
                    logger.info("Payload %s: subscription cancelled", payload_uuid)
                    return

                if msg.type == aiohttp.WSMsgType.TEXT:
                    text = msg.data
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    try:
                        text = msg.data.decode("utf-8")
                    except UnicodeDecodeError as e:
                        raise XamanWebSocketError(
                            f"Undecodable frame for payload {payload_uuid}",
                            key=payload_uuid,
                        ) from e
                elif msg.type == aiohttp.WSMsgType.CLOSE:
                    logger.info(
                        "Payload %s: WebSocket closed by server (code %s)",
                        payload_uuid,
                        msg.data,
                    )
                    return
                elif msg.type in _DROPPED_TYPES:
                    # No close frame was received: the connection was lost.
                    logger.error(
                        "WebSocket for payload %s dropped (code %s)",
                        payload_uuid,
                        ws.close_code,
                    )
                    raise XamanWebSocketError(
                        f"WebSocket connection for payload {payload_uuid} "
                        f"dropped unexpectedly (code {ws.close_code})",
                        key=payload_uuid,
                    )
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    cause = ws.exception()
                    logger.error("WebSocket error for payload %s: %s", payload_uuid, cause)
                    raise XamanWebSocketError(
                        f"WebSocket error for payload {payload_uuid}: {cause}",
                        key=payload_uuid,
                    ) from cause
                else:
                    continue

                if text:
                    logger.debug("Payload %s: received %s", payload_uuid, text)
                    yield text
        finally:
            if ws is not None and not ws.closed:
                await ws.close()
            if close_session:
                await session.close()
