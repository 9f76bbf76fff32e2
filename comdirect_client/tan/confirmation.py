"""
Out-of-band TAN confirmation.

Activating a session needs the user to approve a push notification or type
in a one-time code. The protocol code never talks to the user directly; it
asks an injected ConfirmationProvider instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import click

from ..exceptions import LocalIOError, UnexpectedTanTypeError
from .challenge import TanChallenge, TanChallengeType

logger = logging.getLogger(__name__)


class ConfirmationProvider(ABC):
    """
    Source of user confirmations for TAN challenges.

    Example:
        >>> class AppProvider(ConfirmationProvider):
        >>>     def await_confirmation(self, challenge):
        >>>         return notify_and_wait(challenge)
    """

    @abstractmethod
    def await_confirmation(self, challenge: TanChallenge) -> Optional[str]:
        """
        Block until the user has confirmed the challenge.

        Args:
            challenge: Challenge to confirm

        Returns:
            The one-time code for secret-bearing types; for push TANs the
            return value is ignored
        """
        pass


class ConsoleConfirmationProvider(ConfirmationProvider):
    """Prompts on the terminal."""

    def await_confirmation(self, challenge: TanChallenge) -> Optional[str]:
        try:
            if challenge.type is TanChallengeType.PUSH_TAN:
                click.echo("Please open your photoTAN app and activate the pushTAN.")
                click.prompt(
                    "Then press enter", default="", show_default=False, prompt_suffix=""
                )
                return None

            if challenge.type is TanChallengeType.FREE:
                raise UnexpectedTanTypeError("TAN_FREI challenge needs no confirmation")

            if challenge.type is TanChallengeType.MOBILE_TAN and challenge.challenge:
                click.echo(f"Please call '{challenge.challenge}' and input the TAN.")
            else:
                logger.warning(
                    f"No prompt text for TAN type {challenge.type.value}, asking for the TAN"
                )
            return click.prompt("TAN", hide_input=True)
        except click.Abort as e:
            raise LocalIOError("TAN input aborted") from e


class StaticConfirmationProvider(ConfirmationProvider):
    """Answers every challenge immediately with a fixed code."""

    def __init__(self, code: Optional[str] = None):
        self.code = code

    def await_confirmation(self, challenge: TanChallenge) -> Optional[str]:
        return self.code
