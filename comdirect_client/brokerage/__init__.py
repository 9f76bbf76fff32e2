"""
Brokerage mutations for comdirect depots.

Public API:
    Order, OrderValidity: Order model
    MutationIntent: Base for authorizable mutations
    PlaceOrder, ChangeOrder, DeleteOrder: Order mutations
    CostIndication: Ex-ante costs of a mutation
    TransactionAuthorizer: Validate / commit protocol
    Quote, QuoteRequester: Quote tickets
"""

from .authorizer import TransactionAuthorizer, require_free_challenge
from .orders import (
    ChangeOrder,
    CostIndication,
    DeleteOrder,
    MutationIntent,
    Order,
    OrderValidity,
    PlaceOrder,
)
from .quotes import Quote, QuoteRequester

__all__ = [
    "Order",
    "OrderValidity",
    "MutationIntent",
    "PlaceOrder",
    "ChangeOrder",
    "DeleteOrder",
    "CostIndication",
    "TransactionAuthorizer",
    "require_free_challenge",
    "Quote",
    "QuoteRequester",
]
