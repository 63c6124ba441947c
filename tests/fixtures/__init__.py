"""Test doubles for the SDK's network seams."""

from .fake_transport import FakeSubscriptionTransport
from .mock_api import MockXamanApi, payload_details, payload_handle, request_json
from .ws_servers import LedgerNode, SignServer

__all__ = [
    "FakeSubscriptionTransport",
    "LedgerNode",
    "MockXamanApi",
    "SignServer",
    "payload_details",
    "payload_handle",
    "request_json",
]
