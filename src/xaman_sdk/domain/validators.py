"""Pure validation and formatting helpers for ledger values.

These functions have no I/O and no state, so they can be used anywhere
(including before a network call) and tested in isolation.
"""

from __future__ import annotations

import hashlib
import re
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any, Final, Optional

_ACCOUNT_RE: Final = re.compile(r"^r[1-9A-HJ-NP-Za-km-z]{25,33}$")
_SHA512H_RE: Final = re.compile(r"^[A-Fa-f0-9]{64}$")
_UUID_RE: Final = re.compile(
    r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$"
)
_CURRENCY_HEX_RE: Final = re.compile(r"^[a-fA-F0-9]{40}$")
_DECODED_CURRENCY_RE: Final = re.compile(r"[a-zA-Z0-9]{3,}")
_TRAILING_ZERO_BYTES_RE: Final = re.compile(r"(00)+$")

XRP: Final[str] = "XRP"
DROPS_PER_XRP: Final[Decimal] = Decimal(1_000_000)
MAXIMUM_XRP_VALUE: Final[Decimal] = Decimal(100_000_000_000)
UNKNOWN_CURRENCY: Final[str] = "???"


def is_account_address(value: Optional[str]) -> bool:
    """Return True if ``value`` looks like a classic r-address."""
    return value is not None and _ACCOUNT_RE.match(value) is not None


def is_sha512_half(value: Optional[str]) -> bool:
    """Return True if ``value`` is a 64 character hex SHA-512Half hash."""
    return value is not None and _SHA512H_RE.match(value) is not None


def is_valid_uuid(value: Optional[str]) -> bool:
    """Return True if ``value`` is a lowercase, dashed UUID."""
    return value is not None and _UUID_RE.match(value) is not None


def to_formatted_currency(currency: str, max_length: int = 12) -> str:
    """Format a ledger currency code for display.

    Three-letter ISO-like codes are returned unchanged. 40 character hex
    codes are decoded (trailing zero padding stripped, ``02``-prefixed LP
    token codes skip their 8 byte prefix) and truncated to ``max_length``.
    Anything that does not decode to at least three alphanumerics gives ``???``.
    """
    currency = currency.strip()
    if len(currency) == 3 and currency.upper() != XRP:
        return currency

    if _CURRENCY_HEX_RE.match(currency):
        hex_value = _TRAILING_ZERO_BYTES_RE.sub("", currency)
        raw = bytes.fromhex(hex_value)
        if hex_value.startswith("02"):
            raw = raw[8:]
        decoded = raw.decode("utf-8", errors="replace")[:max_length]
        if _DECODED_CURRENCY_RE.search(decoded):
            return decoded

    return UNKNOWN_CURRENCY


def xrpl_string_number_to_decimal(value: str) -> Decimal:
    """Parse a ledger string number (plain or scientific notation).

    Raises:
        ValueError: If the string is not a finite number.
    """
    try:
        result = Decimal(value.strip())
    except (InvalidOperation, AttributeError) as e:
        raise ValueError(f'Unable to convert string number "{value}" to a decimal.') from e
    if not result.is_finite():
        raise ValueError(f'Unable to convert string number "{value}" to a decimal.')
    return result


def xrp_to_drops_string(value: Decimal | int | float | str) -> str:
    """Convert an XRP amount to a drops string (1 XRP = 1,000,000 drops).

    Fractions of a drop are truncated.

    Raises:
        ValueError: If the value exceeds the maximum XRP supply.
    """
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if amount > MAXIMUM_XRP_VALUE:
        raise ValueError(f"Maximum value of XRP is {MAXIMUM_XRP_VALUE}")
    drops = (amount * DROPS_PER_XRP).quantize(Decimal(1), rounding=ROUND_DOWN)
    return f"{drops:f}"


def xrp_drops_to_decimal(value: str) -> Decimal:
    """Convert a drops string to an XRP amount."""
    xrp = xrpl_string_number_to_decimal(value) / DROPS_PER_XRP
    # Normalize without switching to scientific notation for whole numbers.
    return xrp.quantize(Decimal(1)) if xrp == xrp.to_integral() else xrp.normalize()


def to_sha1_hash(value: str) -> str:
    """SHA-1 of the UTF-8 encoded string as lowercase hex."""
    return hashlib.sha1(value.encode("utf-8")).hexdigest()


def parse_delivered_amount(delivered_amount: Any) -> tuple[Decimal, str]:
    """Turn a ``delivered_amount`` from transaction metadata into (amount, currency).

    A string is native XRP in drops; an object with ``value`` and ``currency``
    is an issued currency. Anything else yields ``(0, "Unknown")``.
    """
    if isinstance(delivered_amount, str):
        try:
            return xrp_drops_to_decimal(delivered_amount), XRP
        except ValueError:
            return Decimal(0), "Unknown"

    if isinstance(delivered_amount, dict):
        value = delivered_amount.get("value")
        currency = delivered_amount.get("currency")
        if isinstance(value, str) and currency is not None:
            try:
                return xrpl_string_number_to_decimal(value), str(currency)
            except ValueError:
                return Decimal(0), "Unknown"

    return Decimal(0), "Unknown"
