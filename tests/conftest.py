"""Shared pytest fixtures for SDK tests."""

from __future__ import annotations

import pytest

from xaman_sdk.env import XamanSettings, XrplSettings

API_KEY = "aaaaaaaa-1111-4222-8333-444444444444"
API_SECRET = "bbbbbbbb-5555-4666-8777-888888888888"
PAYLOAD_UUID = "0e4f1c2a-7b1d-4c55-9a3e-2f9d8c7b6a51"
TX_HASH = "C53ECF838647FA5A4C780377025FEC7999AB4182590510CA461444B207AB74A9"
ACCOUNT = "rPEPPER7kfTD9w2To4CQk6UCfuHM9c6GDY"


@pytest.fixture
def settings() -> XamanSettings:
    """Settings with instant retries and no subscribe delay."""
    return XamanSettings(
        api_key=API_KEY,
        api_secret=API_SECRET,
        base_url="https://xaman.test/api/v1",
        max_retries=3,
        retry_delay=0,
        subscribe_delay=0,
    )


@pytest.fixture
def xrpl_settings() -> XrplSettings:
    return XrplSettings(max_retries=3, retry_delay=0, timeout=5)
