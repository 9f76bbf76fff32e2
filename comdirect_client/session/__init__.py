"""
Session handling for comdirect API integration.

Public API:
    Session: Authenticated session (ids + tokens)
    SessionStatus: Server-reported session state
    SessionEstablisher: Binds tokens to a server session
    SessionGuard: Reader-writer access to the client's session

SessionLifecycle lives in comdirect_client.session.lifecycle; it depends on
the TAN package, which itself depends on the models here.
"""

from .access import SessionGuard
from .establisher import SessionEstablisher
from .models import Session, SessionStatus, make_session_id

__all__ = [
    "Session",
    "SessionStatus",
    "SessionEstablisher",
    "SessionGuard",
    "make_session_id",
]
