"""Tests for session establishment."""

import json
import re

import pytest

from comdirect_client import endpoints
from comdirect_client.exceptions import UnexpectedResponseShapeError
from comdirect_client.session.establisher import SessionEstablisher


class TestSessionEstablisher:
    """Tests for SessionEstablisher class."""

    @pytest.fixture
    def establisher(self, transport):
        return SessionEstablisher(transport)

    def test_establish(self, establisher, http_session, make_response, tokens, base_url):
        """establish() binds the tokens to the server session uuid."""
        http_session.request.return_value = make_response(
            200, json_data=[{"identifier": "uuid-42", "sessionTanActive": False}]
        )

        session = establisher.establish(tokens)

        assert session.session_uuid == "uuid-42"
        assert session.tokens is tokens
        assert re.fullmatch(r"[0-9a-f]{32}", session.session_id)

        args, kwargs = http_session.request.call_args
        assert args == ("GET", f"{base_url}{endpoints.SESSIONS}")
        assert kwargs["headers"]["Authorization"] == "Bearer AT1"
        request_info = json.loads(kwargs["headers"]["x-http-request-info"])
        assert request_info["clientRequestId"]["sessionId"] == session.session_id

    def test_each_session_gets_new_id(self, establisher, http_session, make_response, tokens):
        http_session.request.return_value = make_response(
            200, json_data=[{"identifier": "uuid-42", "sessionTanActive": False}]
        )

        first = establisher.establish(tokens)
        second = establisher.establish(tokens)

        assert first.session_id != second.session_id

    @pytest.mark.parametrize(
        "body",
        [
            [],
            [{"sessionTanActive": False}],
            [{"identifier": "a"}, {"identifier": "b"}],
            {"identifier": "a"},
        ],
    )
    def test_unexpected_shape(self, establisher, http_session, make_response, tokens, body):
        """Anything but a one-element array with an identifier is rejected."""
        http_session.request.return_value = make_response(200, json_data=body)

        with pytest.raises(UnexpectedResponseShapeError):
            establisher.establish(tokens)
