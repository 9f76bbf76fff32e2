"""
Two-factor (TAN) handling for comdirect sessions.

Public API:
    TanChallenge, TanChallengeType: Challenge model
    extract_tan_challenge: Header decoder shared with order authorization
    TanNegotiator: Requests a push TAN challenge
    TanActivator: Confirms the challenge and activates the session
    ConfirmationProvider: Interface for user confirmation
    ConsoleConfirmationProvider, StaticConfirmationProvider: Implementations
"""

from .activator import TanActivator
from .challenge import TanChallenge, TanChallengeType, extract_tan_challenge
from .confirmation import (
    ConfirmationProvider,
    ConsoleConfirmationProvider,
    StaticConfirmationProvider,
)
from .negotiator import TanNegotiator

__all__ = [
    "TanChallenge",
    "TanChallengeType",
    "extract_tan_challenge",
    "TanNegotiator",
    "TanActivator",
    "ConfirmationProvider",
    "ConsoleConfirmationProvider",
    "StaticConfirmationProvider",
]
