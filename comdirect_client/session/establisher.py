"""
Binding of pre-session tokens to a server session.
"""

import logging

from .. import endpoints
from ..exceptions import UnexpectedResponseShapeError
from ..oauth.tokens import PreSession
from ..transport import HttpTransport, decode_json
from .models import Session, SessionStatus, make_session_id

logger = logging.getLogger(__name__)


class SessionEstablisher:
    """Asks the server for the session uuid belonging to a fresh token pair."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    def establish(self, pre_session: PreSession) -> Session:
        """
        Bind a pre-session to a server-assigned session identity.

        Args:
            pre_session: Token pair from the password grant

        Returns:
            Session with new session id, server uuid and the given tokens

        Raises:
            UnexpectedResponseShapeError: If the status array does not hold
                                          exactly one session
        """
        session_id = make_session_id()

        response = self.transport.request(
            "GET",
            endpoints.SESSIONS,
            access_token=pre_session.access_token,
            session_id=session_id,
        )
        data = decode_json(response)

        if not isinstance(data, list) or len(data) != 1:
            raise UnexpectedResponseShapeError(
                f"Expected exactly one session status, got {data!r}"
            )

        status = SessionStatus.from_dict(data[0])
        logger.info("Session established")
        logger.debug(f"Session uuid: {status.identifier}")

        return Session(
            session_id=session_id,
            session_uuid=status.identifier,
            tokens=pre_session,
        )
