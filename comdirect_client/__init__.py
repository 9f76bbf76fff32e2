"""
comdirect brokerage API client.

This package establishes a TAN-activated session against the comdirect
REST API and authorizes order mutations through the validate → commit
protocol.

Public API:
    ComdirectClient: Main client
    ComdirectConfig: Configuration
    Order, OrderValidity: Order model
    ConfirmationProvider: Interface for TAN confirmation
    ConsoleConfirmationProvider, StaticConfirmationProvider: Implementations

Exceptions:
    ComdirectError: Base exception (see comdirect_client.exceptions)
"""

from .brokerage.orders import Order, OrderValidity
from .client import ComdirectClient
from .config import ComdirectConfig
from .exceptions import ComdirectError
from .tan.confirmation import (
    ConfirmationProvider,
    ConsoleConfirmationProvider,
    StaticConfirmationProvider,
)

__all__ = [
    "ComdirectClient",
    "ComdirectConfig",
    "Order",
    "OrderValidity",
    "ConfirmationProvider",
    "ConsoleConfirmationProvider",
    "StaticConfirmationProvider",
    "ComdirectError",
]
