"""
Quote requests for off-exchange (live trading) orders.

A quote needs a ticket: the outline is validated against the quote ticket
endpoint, the ticket is confirmed with the TAN_FREI challenge, and only then
is the quote itself requested. Orders on a quote are placed with PlaceOrder.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from .. import endpoints
from ..exceptions import UnexpectedResponseShapeError
from ..session.access import SessionGuard
from ..tan.challenge import (
    AUTHENTICATION_HEADER,
    AUTHENTICATION_INFO_HEADER,
    TanChallengeType,
    challenge_id_header,
    extract_tan_challenge,
)
from ..transport import HttpTransport, decode_json
from .authorizer import require_free_challenge

logger = logging.getLogger(__name__)


@dataclass
class Quote:
    """
    A quote obtained on a confirmed ticket.

    Attributes:
        ticket_id: Quote ticket the quote was requested on
        raw: Quote object as returned by the API
    """

    ticket_id: str
    raw: Dict[str, Any]


class QuoteRequester:
    """Obtains quotes through the ticket → confirm → quote sequence."""

    def __init__(self, transport: HttpTransport, guard: SessionGuard):
        self.transport = transport
        self.guard = guard

    def request_quote(self, outline: Dict[str, Any]) -> Quote:
        """
        Request a quote for a quote outline.

        Args:
            outline: Quote outline JSON (depotId, instrumentId, side, venueId,
                     quantity)

        Returns:
            Quote with its ticket id

        Raises:
            NoActiveSessionError: If there is no session
            UnexpectedTanTypeError: If the ticket challenge is not TAN_FREI
            UnexpectedResponseShapeError: If the ticket has no id
        """
        with self.guard.read() as session:
            response = self.transport.request(
                "POST",
                endpoints.QUOTE_TICKETS,
                access_token=session.access_token,
                session_id=session.session_id,
                json_data=outline,
            )
            challenge = require_free_challenge(extract_tan_challenge(response.headers))

            ticket = decode_json(response)
            ticket_id = ticket.get("quoteTicketId") if isinstance(ticket, dict) else None
            if not ticket_id:
                raise UnexpectedResponseShapeError(f"Quote ticket without id: {ticket!r}")

            self.transport.request(
                "PATCH",
                endpoints.QUOTE_TICKET.format(ticket_id=ticket_id),
                access_token=session.access_token,
                session_id=session.session_id,
                headers={
                    AUTHENTICATION_INFO_HEADER: challenge_id_header(challenge),
                    AUTHENTICATION_HEADER: TanChallengeType.FREE.value,
                },
            )

            response = self.transport.request(
                "POST",
                endpoints.QUOTES,
                access_token=session.access_token,
                session_id=session.session_id,
                json_data=outline,
            )

        logger.info(f"Quote received on ticket {ticket_id}")
        return Quote(ticket_id=str(ticket_id), raw=decode_json(response))
