"""Tests for session TAN activation."""

import json
import os
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path
from unittest import mock

import pytest

from comdirect_client import endpoints
from comdirect_client.exceptions import (
    ConfirmationTimeoutError,
    CouldNotCreateSessionError,
    LocalIOError,
    UnexpectedTanTypeError,
)
from comdirect_client.tan.activator import TanActivator
from comdirect_client.tan.challenge import TanChallenge, TanChallengeType
from comdirect_client.tan.confirmation import (
    ConfirmationProvider,
    StaticConfirmationProvider,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

ACTIVE = {"identifier": "session-uuid-1", "sessionTanActive": True}


def _challenge(tan_type, challenge_id="challenge-1"):
    return TanChallenge(id=challenge_id, type=tan_type)


class TestTanActivator:
    """Tests for TanActivator.activate."""

    def test_push_tan_sends_no_code(self, transport, session, http_session, make_response, base_url):
        """Push TAN confirms by id only."""
        http_session.request.return_value = make_response(200, json_data=ACTIVE)
        provider = mock.Mock(spec=ConfirmationProvider)
        provider.await_confirmation.return_value = "ignored"
        activator = TanActivator(transport, provider)
        challenge = _challenge(TanChallengeType.PUSH_TAN)

        status = activator.activate(session, challenge)

        assert status.session_tan_active
        provider.await_confirmation.assert_called_once_with(challenge)
        args, kwargs = http_session.request.call_args
        assert args == (
            "PATCH",
            base_url + endpoints.SESSION.format(session_uuid="session-uuid-1"),
        )
        assert json.loads(kwargs["headers"]["x-once-authentication-info"]) == {
            "id": "challenge-1"
        }
        assert "x-once-authentication" not in kwargs["headers"]
        assert kwargs["json"] == session.identity_body()

    def test_mobile_tan_sends_stripped_code(self, transport, session, http_session, make_response):
        http_session.request.return_value = make_response(200, json_data=ACTIVE)
        activator = TanActivator(transport, StaticConfirmationProvider(" 123456\n"))

        activator.activate(session, _challenge(TanChallengeType.MOBILE_TAN))

        headers = http_session.request.call_args[1]["headers"]
        assert headers["x-once-authentication"] == "123456"

    @pytest.mark.parametrize("code", [None, "", "   "])
    def test_empty_code_is_rejected(self, transport, session, http_session, code):
        """A secret-bearing TAN without a code never reaches the server."""
        activator = TanActivator(transport, StaticConfirmationProvider(code))

        with pytest.raises(LocalIOError):
            activator.activate(session, _challenge(TanChallengeType.PHOTO_TAN))

        http_session.request.assert_not_called()

    def test_free_tan_is_unexpected(self, transport, session, http_session):
        provider = mock.Mock(spec=ConfirmationProvider)
        activator = TanActivator(transport, provider)

        with pytest.raises(UnexpectedTanTypeError):
            activator.activate(session, _challenge(TanChallengeType.FREE))

        provider.await_confirmation.assert_not_called()
        http_session.request.assert_not_called()

    def test_inactive_session_tan(self, transport, session, http_session, make_response):
        """The server answering sessionTanActive=false fails session creation."""
        http_session.request.return_value = make_response(
            200, json_data={"identifier": "session-uuid-1", "sessionTanActive": False}
        )
        activator = TanActivator(transport, StaticConfirmationProvider())

        with pytest.raises(CouldNotCreateSessionError):
            activator.activate(session, _challenge(TanChallengeType.PUSH_TAN))

    def test_provider_io_error(self, transport, session, http_session):
        provider = mock.Mock(spec=ConfirmationProvider)
        provider.await_confirmation.side_effect = EOFError()
        activator = TanActivator(transport, provider)

        with pytest.raises(LocalIOError):
            activator.activate(session, _challenge(TanChallengeType.PUSH_TAN))

        http_session.request.assert_not_called()

    def test_confirmation_timeout(self, transport, session, http_session):
        """A provider that never answers times out without touching the wire."""
        release = threading.Event()

        class SlowProvider(ConfirmationProvider):
            def await_confirmation(self, challenge):
                release.wait(timeout=5)
                return None

        activator = TanActivator(transport, SlowProvider(), confirmation_timeout=0.05)

        try:
            with pytest.raises(ConfirmationTimeoutError):
                activator.activate(session, _challenge(TanChallengeType.PUSH_TAN))
        finally:
            release.set()

        http_session.request.assert_not_called()

    def test_timeout_does_not_block_exit(self):
        """After a timeout the process exits while the provider is still waiting."""
        script = textwrap.dedent(
            """
            import time
            from datetime import datetime, timedelta, timezone
            from unittest import mock

            from comdirect_client.exceptions import ConfirmationTimeoutError
            from comdirect_client.oauth.tokens import TokenPair
            from comdirect_client.session.models import Session
            from comdirect_client.tan.activator import TanActivator
            from comdirect_client.tan.challenge import TanChallenge, TanChallengeType
            from comdirect_client.tan.confirmation import ConfirmationProvider

            class StuckProvider(ConfirmationProvider):
                def await_confirmation(self, challenge):
                    time.sleep(60)

            tokens = TokenPair("AT", "RT", datetime.now(timezone.utc) + timedelta(minutes=5))
            session = Session("0" * 32, "uuid", tokens)
            activator = TanActivator(mock.Mock(), StuckProvider(), confirmation_timeout=0.1)
            try:
                activator.activate(session, TanChallenge("1", TanChallengeType.PUSH_TAN))
            except ConfirmationTimeoutError:
                print("timed out")
            """
        )
        env = dict(os.environ, PYTHONPATH=str(PROJECT_ROOT))

        started = time.monotonic()
        result = subprocess.run(
            [sys.executable, "-c", script],
            capture_output=True,
            text=True,
            env=env,
            timeout=30,
        )

        assert result.returncode == 0, result.stderr
        assert result.stdout.strip() == "timed out"
        assert time.monotonic() - started < 20

    def test_provider_error_within_timeout(self, transport, session, http_session):
        """Provider errors cross over from the waiting thread."""
        provider = mock.Mock(spec=ConfirmationProvider)
        provider.await_confirmation.side_effect = EOFError()
        activator = TanActivator(transport, provider, confirmation_timeout=5)

        with pytest.raises(LocalIOError):
            activator.activate(session, _challenge(TanChallengeType.PUSH_TAN))

        http_session.request.assert_not_called()

    def test_confirmation_within_timeout(self, transport, session, http_session, make_response):
        http_session.request.return_value = make_response(200, json_data=ACTIVE)
        activator = TanActivator(
            transport, StaticConfirmationProvider("999"), confirmation_timeout=5
        )

        activator.activate(session, _challenge(TanChallengeType.PHOTO_TAN_APP))

        assert http_session.request.call_args[1]["headers"]["x-once-authentication"] == "999"
