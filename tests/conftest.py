"""Pytest fixtures shared by the comdirect client tests.

The wire is replaced by a mocked requests.Session, so the real
HttpTransport (header building, status classification) runs in every test.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional
from unittest import mock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from comdirect_client.config import ComdirectConfig
from comdirect_client.oauth.tokens import TokenPair
from comdirect_client.session.access import SessionGuard
from comdirect_client.session.models import Session
from comdirect_client.transport import HttpTransport

BASE_URL = "https://api.test.comdirect.de"


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def config():
    """Create test client config."""
    return ComdirectConfig(
        client_id="test_client_id",
        client_secret="test_client_secret",
        username="12345678",
        password="123456",
        base_url=BASE_URL,
    )


@pytest.fixture
def http_session():
    """Mocked requests session standing in for the network."""
    session = mock.Mock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def transport(http_session):
    """Real transport over the mocked requests session."""
    return HttpTransport(BASE_URL, session=http_session)


@pytest.fixture
def make_response() -> Callable[..., mock.Mock]:
    """Factory for mocked responses.

    Example:
        >>> response = make_response(200, json_data={"ok": True},
        >>>                          headers={"x-once-authentication-info": "..."})
    """

    def _make(
        status_code: int = 200,
        json_data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        text: str = "",
    ) -> mock.Mock:
        response = mock.Mock(spec=requests.Response)
        response.status_code = status_code
        response.ok = status_code < 400
        response.headers = CaseInsensitiveDict(headers or {})
        response.text = text
        if json_data is None:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = json_data
        return response

    return _make


@pytest.fixture
def challenge_header() -> Callable[..., Dict[str, str]]:
    """Factory for x-once-authentication-info response headers."""

    def _make(
        typ: str,
        available: Optional[List[str]] = None,
        challenge_id: str = "challenge-1",
        challenge: Optional[str] = None,
    ) -> Dict[str, str]:
        data: Dict[str, Any] = {
            "id": challenge_id,
            "typ": typ,
            "availableTypes": available if available is not None else [typ],
        }
        if challenge is not None:
            data["challenge"] = challenge
        return {"x-once-authentication-info": json.dumps(data)}

    return _make


@pytest.fixture
def tokens():
    """Token pair valid for ten minutes."""
    return TokenPair(
        access_token="AT1",
        refresh_token="RT1",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=10),
    )


@pytest.fixture
def session(tokens):
    """An established session."""
    return Session(
        session_id="0123456789abcdef0123456789abcdef",
        session_uuid="session-uuid-1",
        tokens=tokens,
    )


@pytest.fixture
def guard(session):
    """Session guard holding the established session."""
    guard = SessionGuard()
    with guard.write() as slot:
        slot.session = session
    return guard
