"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .cancellation import CancellationToken
from .transport_protocol import RequestSender, SubscriptionTransport

__all__ = ["CancellationToken", "RequestSender", "SubscriptionTransport"]
