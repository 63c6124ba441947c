"""Cooperative cancellation tokens for long-lived streams.

asyncio task cancellation stays the primary way to abort an operation. A
``CancellationToken`` covers the remaining case: ending a stream cleanly
from several independent places (the caller, or an event handler running
inside the stream) without raising into the consumer.
"""

from __future__ import annotations

import asyncio
from typing import Optional


class CancellationToken:
    """A one-shot signal that can be linked to a parent token.

    A linked token counts as cancelled once either itself or any ancestor
    has been cancelled. Cancelling a linked token never affects its parent.
    """

    def __init__(self, parent: Optional["CancellationToken"] = None) -> None:
        self._event = asyncio.Event()
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def linked(self) -> "CancellationToken":
        """Derive a child token that also fires when this one does."""
        return CancellationToken(parent=self)

    async def wait(self) -> None:
        """Block until this token or one of its ancestors is cancelled."""
        if self._parent is None:
            await self._event.wait()
            return

        waiters = [
            asyncio.ensure_future(self._event.wait()),
            asyncio.ensure_future(self._parent.wait()),
        ]
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
