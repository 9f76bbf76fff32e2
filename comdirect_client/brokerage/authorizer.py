"""
Two-phase authorization of brokerage mutations.

Every mutation is first validated, which returns a TAN challenge in the
response headers, and then committed with that challenge's id. Because the
session itself is already TAN-activated, the challenge must be TAN_FREI;
anything else aborts before the commit.
"""

import logging
from typing import Any

from ..exceptions import UnexpectedTanTypeError
from ..session.access import SessionGuard
from ..tan.challenge import (
    AUTHENTICATION_INFO_HEADER,
    TanChallenge,
    TanChallengeType,
    challenge_id_header,
    extract_tan_challenge,
)
from ..transport import HttpTransport, decode_json
from .orders import CostIndication, MutationIntent

logger = logging.getLogger(__name__)


def require_free_challenge(challenge: TanChallenge) -> TanChallenge:
    """
    Check that a transaction challenge needs no user interaction.

    Raises:
        UnexpectedTanTypeError: If the challenge is not TAN_FREI
    """
    if challenge.type is not TanChallengeType.FREE:
        logger.error(f"Transaction challenge has type {challenge.type.value}")
        raise UnexpectedTanTypeError(
            f"Expected TAN_FREI for transaction, got {challenge.type.value}"
        )
    return challenge


class TransactionAuthorizer:
    """Validates and commits brokerage mutations on the active session."""

    def __init__(self, transport: HttpTransport, guard: SessionGuard):
        self.transport = transport
        self.guard = guard

    def validate(self, intent: MutationIntent) -> TanChallenge:
        """
        Validate a mutation and obtain its challenge.

        Args:
            intent: Mutation to validate

        Returns:
            TAN_FREI challenge to pass to commit()

        Raises:
            NoActiveSessionError: If there is no session
            UnexpectedTanTypeError: If the challenge is not TAN_FREI
            UnexpectedResponseShapeError: If the challenge header is missing
        """
        with self.guard.read() as session:
            response = self.transport.request(
                "POST",
                intent.validation_path,
                access_token=session.access_token,
                session_id=session.session_id,
                json_data=intent.payload(),
            )

        challenge = require_free_challenge(extract_tan_challenge(response.headers))
        logger.debug(f"Validated {type(intent).__name__} (challenge {challenge.id})")
        return challenge

    def commit(self, intent: MutationIntent, challenge: TanChallenge) -> Any:
        """
        Commit a validated mutation.

        Args:
            intent: Mutation that was validated
            challenge: Challenge returned by validate()

        Returns:
            Whatever the intent derives from the response (the new Order
            for placements, None otherwise)

        Raises:
            NoActiveSessionError: If there is no session
            UnexpectedTanTypeError: If the challenge is not TAN_FREI
            ComdirectAPIError: If the server rejects the commit
        """
        require_free_challenge(challenge)

        with self.guard.read() as session:
            response = self.transport.request(
                intent.commit_method,
                intent.resource_path,
                access_token=session.access_token,
                session_id=session.session_id,
                headers={AUTHENTICATION_INFO_HEADER: challenge_id_header(challenge)},
                json_data=intent.payload(),
            )

        return intent.apply(response)

    def authorize(self, intent: MutationIntent) -> Any:
        """Validate, then commit."""
        challenge = self.validate(intent)
        return self.commit(intent, challenge)

    def cost_indication(self, intent: MutationIntent) -> CostIndication:
        """
        Ask for the ex-ante costs of a mutation without committing it.

        Raises:
            NoActiveSessionError: If there is no session
            UnexpectedResponseShapeError: If the response holds no values
        """
        with self.guard.read() as session:
            response = self.transport.request(
                "POST",
                intent.cost_indication_path,
                access_token=session.access_token,
                session_id=session.session_id,
                json_data=intent.payload(),
            )
        return CostIndication.from_response(intent, decode_json(response))

    def prevalidate(self, intent: MutationIntent) -> None:
        """
        Check a mutation for errors; no challenge is issued.

        Raises:
            UnprocessableRequestError: If the server finds the mutation invalid
        """
        with self.guard.read() as session:
            self.transport.request(
                "POST",
                intent.prevalidation_path,
                access_token=session.access_token,
                session_id=session.session_id,
                json_data=intent.payload(),
            )
