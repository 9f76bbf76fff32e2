"""
TAN challenge negotiation for session creation.

Only push TANs are supported for session activation. If the server picks
another type but lists push TAN as available, the request is repeated once
asking for push TAN explicitly. There is never a third request.
"""

import logging
from typing import Optional

from .. import endpoints
from ..exceptions import UnexpectedTanTypeError, UnsupportedTanTypeError
from ..session.models import Session
from ..transport import HttpTransport
from .challenge import (
    AUTHENTICATION_INFO_HEADER,
    TanChallenge,
    TanChallengeType,
    desired_type_header,
    extract_tan_challenge,
)

logger = logging.getLogger(__name__)


class TanNegotiator:
    """Requests a session TAN challenge the client can handle."""

    MAX_ATTEMPTS = 2

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    def request_challenge(
        self,
        session: Session,
        desired_type: Optional[TanChallengeType] = None,
    ) -> TanChallenge:
        """
        Request a push TAN challenge for the session.

        Args:
            session: Session to activate
            desired_type: TAN type to ask for on the first request (None lets
                          the server choose and allows one push TAN retry)

        Returns:
            A push TAN challenge

        Raises:
            UnsupportedTanTypeError: If push TAN is not available, or the
                                     server refuses the requested type
            UnexpectedTanTypeError: If the server substitutes another type
                                    for the requested one
        """
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            challenge = self._request(session, desired_type)

            if challenge.type is TanChallengeType.PUSH_TAN:
                logger.info(f"Received push TAN challenge (attempt {attempt})")
                return challenge

            if desired_type is not None:
                if challenge.type is desired_type:
                    raise UnsupportedTanTypeError(
                        f"Server insists on unsupported TAN type {challenge.type.value}"
                    )
                raise UnexpectedTanTypeError(
                    f"Asked for {desired_type.value}, server sent {challenge.type.value}"
                )

            if TanChallengeType.PUSH_TAN not in challenge.available_types:
                raise UnsupportedTanTypeError(
                    f"TAN type {challenge.type.value} is not supported and push TAN "
                    f"is not available"
                )

            logger.info(
                f"Server chose {challenge.type.value}, asking for push TAN instead"
            )
            desired_type = TanChallengeType.PUSH_TAN

        # desired_type is always set on the last attempt, which returns or raises
        raise UnsupportedTanTypeError("No push TAN challenge after retry")

    def _request(
        self, session: Session, desired_type: Optional[TanChallengeType]
    ) -> TanChallenge:
        headers = {}
        if desired_type is not None:
            headers[AUTHENTICATION_INFO_HEADER] = desired_type_header(desired_type)

        response = self.transport.request(
            "POST",
            endpoints.SESSION_VALIDATE.format(session_uuid=session.session_uuid),
            access_token=session.access_token,
            session_id=session.session_id,
            headers=headers,
            json_data=session.identity_body(),
        )
        return extract_tan_challenge(response.headers)
