"""
TAN activation for session creation.

After the user has confirmed the challenge out of band, the session resource
is patched with the challenge id (and the typed TAN, where the type needs
one). The server answers with the session status, which must report the
session TAN as active.
"""

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from .. import endpoints
from ..exceptions import (
    ConfirmationTimeoutError,
    CouldNotCreateSessionError,
    LocalIOError,
    UnexpectedTanTypeError,
)
from ..session.models import Session, SessionStatus
from ..transport import HttpTransport, decode_json
from .challenge import (
    AUTHENTICATION_HEADER,
    AUTHENTICATION_INFO_HEADER,
    TanChallenge,
    TanChallengeType,
    challenge_id_header,
)
from .confirmation import ConfirmationProvider

logger = logging.getLogger(__name__)


class TanActivator:
    """Drives user confirmation of a session TAN and activates the session."""

    def __init__(
        self,
        transport: HttpTransport,
        confirmation_provider: ConfirmationProvider,
        confirmation_timeout: Optional[float] = None,
    ):
        """
        Initialize TAN activator.

        Args:
            transport: HTTP transport
            confirmation_provider: Source of user confirmations
            confirmation_timeout: Seconds to wait for the user (None waits
                                  until the provider returns)
        """
        self.transport = transport
        self.confirmation_provider = confirmation_provider
        self.confirmation_timeout = confirmation_timeout

    def activate(self, session: Session, challenge: TanChallenge) -> SessionStatus:
        """
        Confirm the challenge and activate the session TAN.

        Args:
            session: Session being created
            challenge: Challenge from TanNegotiator

        Returns:
            Session status reporting the TAN as active

        Raises:
            UnexpectedTanTypeError: If the challenge is TAN_FREI
            LocalIOError: If the user's confirmation cannot be obtained
            ConfirmationTimeoutError: If the user does not confirm in time
            CouldNotCreateSessionError: If the server does not activate the TAN
        """
        if challenge.type is TanChallengeType.FREE:
            raise UnexpectedTanTypeError("Got TAN type TAN_FREI while creating a session")

        code = self._await_confirmation(challenge)

        headers = {AUTHENTICATION_INFO_HEADER: challenge_id_header(challenge)}
        if challenge.type.requires_secret:
            if not code or not code.strip():
                raise LocalIOError(f"No TAN entered for {challenge.type.value} challenge")
            headers[AUTHENTICATION_HEADER] = code.strip()

        response = self.transport.request(
            "PATCH",
            endpoints.SESSION.format(session_uuid=session.session_uuid),
            access_token=session.access_token,
            session_id=session.session_id,
            headers=headers,
            json_data=session.identity_body(),
        )

        status = SessionStatus.from_dict(decode_json(response))
        if not status.session_tan_active:
            logger.error("Session TAN was not activated")
            raise CouldNotCreateSessionError("Server did not activate the session TAN")

        logger.info("Session TAN activated")
        return status

    def _await_confirmation(self, challenge: TanChallenge) -> Optional[str]:
        logger.info(f"Waiting for {challenge.type.value} confirmation")

        try:
            if self.confirmation_timeout is None:
                return self.confirmation_provider.await_confirmation(challenge)

            # Daemon thread: a provider still blocked after the timeout must
            # not keep the interpreter alive.
            future: Future = Future()
            waiter = threading.Thread(
                target=self._confirm_into,
                args=(future, challenge),
                name="tan-confirmation",
                daemon=True,
            )
            waiter.start()
            try:
                return future.result(timeout=self.confirmation_timeout)
            except FutureTimeoutError as e:
                logger.warning(f"TAN not confirmed within {self.confirmation_timeout}s")
                raise ConfirmationTimeoutError(
                    f"TAN not confirmed within {self.confirmation_timeout}s"
                ) from e
        except (OSError, EOFError) as e:
            logger.error(f"Could not read TAN confirmation: {e}")
            raise LocalIOError(f"Could not read TAN confirmation: {e}") from e

    def _confirm_into(self, future: Future, challenge: TanChallenge) -> None:
        try:
            future.set_result(self.confirmation_provider.await_confirmation(challenge))
        except Exception as e:
            future.set_exception(e)
