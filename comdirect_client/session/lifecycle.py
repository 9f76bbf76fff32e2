"""
Session lifecycle for comdirect API access.

This module creates, refreshes and ends the client's session. Creating a
session runs the full handshake:

1. Password grant → pre-session tokens
2. Session status → server session uuid
3. TAN challenge (push TAN)
4. TAN activation after user confirmation
5. Secondary grant → tokens allowed to trade
"""

import logging
from datetime import datetime
from typing import Optional

from ..exceptions import ComdirectError, CouldNotEndSessionError
from ..oauth.token_exchanger import OAuthTokenExchanger
from ..oauth.tokens import PasswordGrant, RefreshGrant, SecondaryGrant
from ..tan.activator import TanActivator
from ..tan.negotiator import TanNegotiator
from .access import SessionGuard
from .establisher import SessionEstablisher
from .models import Session

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """
    Owns the client's single session.

    All three operations take exclusive access to the session; calls that
    only use it go through guard.read().
    """

    def __init__(
        self,
        exchanger: OAuthTokenExchanger,
        establisher: SessionEstablisher,
        negotiator: TanNegotiator,
        activator: TanActivator,
        guard: Optional[SessionGuard] = None,
    ):
        self.exchanger = exchanger
        self.establisher = establisher
        self.negotiator = negotiator
        self.activator = activator
        self.guard = guard or SessionGuard()

    def new_session(self) -> Session:
        """
        Create a fully TAN-activated session.

        Any existing session is revoked (best effort) and discarded first.

        Returns:
            The new session

        Raises:
            AuthFailureError: If a token exchange is rejected
            TanError: If no usable TAN challenge is offered
            LocalIOError: If the user's confirmation cannot be obtained
            CouldNotCreateSessionError: If TAN activation fails
        """
        with self.guard.write() as slot:
            if slot.session is not None:
                logger.warning("Revoking existing session before creating a new one")
                self._revoke_quietly(slot.session)
            slot.session = None

            pre_session = self.exchanger.exchange(PasswordGrant())
            session = self.establisher.establish(pre_session)

            challenge = self.negotiator.request_challenge(session, None)
            self.activator.activate(session, challenge)

            session.replace_tokens(
                self.exchanger.exchange(SecondaryGrant(session.access_token))
            )

            slot.session = session
            logger.info("✅ Session created")
            return session

    def refresh_session(self) -> None:
        """
        Replace the session's tokens using its refresh token.

        The session is left untouched if the exchange fails.

        Raises:
            NoActiveSessionError: If there is no session
            AuthFailureError: If the refresh token is rejected
        """
        with self.guard.write() as slot:
            session = slot.require()
            session.replace_tokens(
                self.exchanger.exchange(RefreshGrant(session.refresh_token))
            )
            logger.info("Session refreshed")

    def end_session(self) -> None:
        """
        Revoke the access token and forget the session.

        The local session is cleared even if the revoke call fails.

        Raises:
            NoActiveSessionError: If there is no session
            CouldNotEndSessionError: If the revoke call fails
        """
        with self.guard.write() as slot:
            session = slot.require()
            try:
                self.exchanger.revoke(session.access_token)
            except ComdirectError as e:
                logger.error(f"Could not revoke session token: {e}")
                raise CouldNotEndSessionError(f"Could not revoke session token: {e}") from e
            finally:
                slot.session = None
            logger.info("Session ended")

    def close(self) -> None:
        """
        Best-effort teardown: revoke the session if there is one.

        Errors are logged and not raised.
        """
        with self.guard.write() as slot:
            session = slot.session
            if session is None:
                return
            slot.session = None
            self._revoke_quietly(session)

    def _revoke_quietly(self, session: Session) -> None:
        try:
            self.exchanger.revoke(session.access_token)
            logger.info("Session revoked")
        except ComdirectError as e:
            logger.warning(f"Ignoring revoke failure: {e}")

    @property
    def has_session(self) -> bool:
        return self.guard.has_session

    @property
    def session_expires_at(self) -> Optional[datetime]:
        """Expiry of the current access token, or None without a session."""
        session = self.guard.current()
        return session.expires_at if session else None
