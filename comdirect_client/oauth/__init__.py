"""
OAuth 2.0 module for comdirect API integration.

Public API:
    TokenPair: Access/refresh token with absolute expiry
    PasswordGrant, SecondaryGrant, RefreshGrant: Grant types
    OAuthTokenExchanger: Token endpoint client
"""

from .token_exchanger import OAuthTokenExchanger
from .tokens import (
    GrantType,
    PasswordGrant,
    PreSession,
    RefreshGrant,
    SecondaryGrant,
    TokenPair,
)

__all__ = [
    "TokenPair",
    "PreSession",
    "GrantType",
    "PasswordGrant",
    "SecondaryGrant",
    "RefreshGrant",
    "OAuthTokenExchanger",
]
