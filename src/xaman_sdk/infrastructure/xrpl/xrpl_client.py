"""Read-only ledger queries over a node's WebSocket API."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError

from ...application.xrpl_dtos import XrplAccountResult, XrplTransactionResult
from ...domain.errors import (
    XamanValidationError,
    XrplError,
    XrplTransactionNotFoundError,
)
from ...domain.validators import is_account_address, is_sha512_half
from ...env import XrplSettings

logger = logging.getLogger(__name__)

TXN_NOT_FOUND = "txnNotFound"


class XrplClient:
    """Queries a ledger node, one WebSocket connection per command.

    Connections are never pooled: each call connects, sends one command,
    reads one reply and closes, whatever the outcome.
    """

    def __init__(self, settings: Optional[XrplSettings] = None) -> None:
        self._settings = settings or XrplSettings()

    @property
    def settings(self) -> XrplSettings:
        return self._settings

    async def query_once(self, command: dict[str, Any]) -> dict[str, Any]:
        """Send one command and return the decoded reply.

        Raises:
            XrplError: When the node replies with a top-level ``error`` or
                cannot be reached
        """
        command = {"id": str(uuid.uuid4()), **command}
        url = self._settings.node_websocket_url
        timeout = aiohttp.ClientTimeout(total=self._settings.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.ws_connect(url) as ws:
                    logger.debug("Connected to XRPL node at %s", url)
                    await ws.send_str(json.dumps(command))
                    logger.debug("Sent command to XRPL node: %s", command)

                    msg = await ws.receive(timeout=self._settings.timeout)
                    if msg.type in (
                        aiohttp.WSMsgType.TEXT,
                        aiohttp.WSMsgType.BINARY,
                    ):
                        raw = msg.data
                    else:
                        raise XrplError(
                            f"Unexpected {msg.type.name} message from XRPL node"
                        )
        except XrplError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.error("Error communicating with XRPL node: %s", e)
            raise XrplError("Error communicating with XRPL node") from e

        logger.debug("Received response from XRPL node: %s", raw)
        try:
            response = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise XrplError("Malformed response from XRPL node") from e
        if not isinstance(response, dict):
            raise XrplError("Empty response from XRPL node")

        error = response.get("error")
        if error is not None:
            message = response.get("error_message") or error
            logger.warning("XRPL error: %s", message)
            raise XrplError(f"XRPL error: {message}", error_code=str(error))
        return response

    async def get_transaction(self, tx_hash: str) -> XrplTransactionResult:
        if not is_sha512_half(tx_hash):
            raise XamanValidationError(f"Invalid transaction hash: {tx_hash!r}")

        command = {"command": "tx", "transaction": tx_hash, "binary": False}
        try:
            response = await self.query_once(command)
        except XrplError as e:
            if e.error_code == TXN_NOT_FOUND:
                raise XrplTransactionNotFoundError(tx_hash) from e
            raise

        result = response.get("result")
        if not isinstance(result, dict):
            raise XrplError("Failed to parse transaction response")
        if result.get("error") == TXN_NOT_FOUND:
            raise XrplTransactionNotFoundError(tx_hash)

        try:
            transaction = XrplTransactionResult.model_validate(result)
        except ValidationError as e:
            raise XrplError("Failed to parse transaction response") from e
        transaction.raw_response = response
        return transaction

    async def is_transaction_validated(self, tx_hash: str) -> bool:
        """True only when the transaction exists and is validated; never raises."""
        try:
            transaction = await self.get_transaction(tx_hash)
        except (XrplError, XamanValidationError) as e:
            logger.debug("Transaction %s is not validated: %s", tx_hash, e)
            return False
        return transaction.validated

    async def get_account_info(self, account: str) -> XrplAccountResult:
        if not is_account_address(account):
            raise XamanValidationError(f"Invalid account address: {account!r}")

        command = {
            "command": "account_info",
            "account": account,
            "strict": True,
            "ledger_index": "validated",
        }
        response = await self.query_once(command)
        result = response.get("result")
        if not isinstance(result, dict):
            raise XrplError("Failed to get account information")
        try:
            return XrplAccountResult.model_validate(result)
        except ValidationError as e:
            raise XrplError("Failed to parse account information") from e

    async def poll_for_transaction(
        self,
        tx_hash: str,
        max_attempts: Optional[int] = None,
        interval_seconds: Optional[float] = None,
    ) -> Optional[XrplTransactionResult]:
        """Poll until the transaction is validated.

        Returns:
            The validated result, or None when ``max_attempts`` queries did not
            find a validated transaction

        Raises:
            XrplError: On any ledger error other than "not found"
        """
        if max_attempts is None:
            max_attempts = self._settings.max_retries
        if interval_seconds is None:
            interval_seconds = self._settings.retry_delay

        for attempt in range(1, max_attempts + 1):
            logger.info(
                "Polling for transaction %s (attempt %d/%d)",
                tx_hash,
                attempt,
                max_attempts,
            )
            try:
                transaction = await self.get_transaction(tx_hash)
            except XrplTransactionNotFoundError:
                logger.info("Transaction %s not found yet", tx_hash)
            else:
                if transaction.validated:
                    logger.info("Transaction %s found and validated", tx_hash)
                    return transaction
                logger.info("Transaction %s found but not yet validated", tx_hash)

            if attempt < max_attempts:
                await asyncio.sleep(interval_seconds)

        logger.warning(
            "Transaction %s not found or validated after %d attempts",
            tx_hash,
            max_attempts,
        )
        return None
