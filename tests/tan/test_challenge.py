"""Tests for TAN challenge decoding."""

import json

import pytest
from requests.structures import CaseInsensitiveDict

from comdirect_client.exceptions import UnexpectedResponseShapeError
from comdirect_client.tan.challenge import (
    TanChallenge,
    TanChallengeType,
    challenge_id_header,
    desired_type_header,
    extract_tan_challenge,
)


class TestTanChallengeType:
    """Tests for TanChallengeType enum."""

    @pytest.mark.parametrize(
        "wire, expected",
        [
            ("P_TAN_PUSH", TanChallengeType.PUSH_TAN),
            ("P_TAN", TanChallengeType.PHOTO_TAN),
            ("P_TAN_APP", TanChallengeType.PHOTO_TAN_APP),
            ("M_TAN", TanChallengeType.MOBILE_TAN),
            ("TAN_FREI", TanChallengeType.FREE),
        ],
    )
    def test_wire_values(self, wire, expected):
        assert TanChallengeType(wire) is expected

    def test_requires_secret(self):
        """Only push and free TANs go without a typed code."""
        assert not TanChallengeType.PUSH_TAN.requires_secret
        assert not TanChallengeType.FREE.requires_secret
        assert TanChallengeType.PHOTO_TAN.requires_secret
        assert TanChallengeType.PHOTO_TAN_APP.requires_secret
        assert TanChallengeType.MOBILE_TAN.requires_secret


class TestTanChallenge:
    """Tests for TanChallenge.from_dict."""

    def test_from_dict(self):
        challenge = TanChallenge.from_dict(
            {
                "id": "123",
                "typ": "M_TAN",
                "availableTypes": ["M_TAN", "P_TAN_PUSH"],
                "challenge": "+49******1234",
            }
        )

        assert challenge.id == "123"
        assert challenge.type is TanChallengeType.MOBILE_TAN
        assert challenge.available_types == {
            TanChallengeType.MOBILE_TAN,
            TanChallengeType.PUSH_TAN,
        }
        assert challenge.challenge == "+49******1234"

    def test_unknown_available_types_are_ignored(self):
        challenge = TanChallenge.from_dict(
            {"id": "1", "typ": "P_TAN_PUSH", "availableTypes": ["P_TAN_PUSH", "SMS_TAN"]}
        )

        assert challenge.available_types == {TanChallengeType.PUSH_TAN}

    def test_missing_available_types(self):
        challenge = TanChallenge.from_dict({"id": "1", "typ": "TAN_FREI"})

        assert challenge.available_types == frozenset()
        assert challenge.challenge is None

    @pytest.mark.parametrize(
        "data",
        [
            {"typ": "P_TAN_PUSH"},
            {"id": "1"},
            {"id": "1", "typ": "SMS_TAN"},
            ["P_TAN_PUSH"],
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(UnexpectedResponseShapeError):
            TanChallenge.from_dict(data)


class TestHeaderCodec:
    """Tests for reading and writing the authentication headers."""

    def test_extract(self, challenge_header):
        headers = CaseInsensitiveDict(challenge_header("P_TAN_PUSH", challenge_id="77"))

        challenge = extract_tan_challenge(headers)

        assert challenge.id == "77"
        assert challenge.type is TanChallengeType.PUSH_TAN

    def test_extract_is_case_insensitive(self):
        headers = CaseInsensitiveDict(
            {"X-Once-Authentication-Info": json.dumps({"id": "1", "typ": "P_TAN"})}
        )

        assert extract_tan_challenge(headers).type is TanChallengeType.PHOTO_TAN

    def test_extract_missing_header(self):
        with pytest.raises(UnexpectedResponseShapeError, match="no x-once-authentication-info"):
            extract_tan_challenge(CaseInsensitiveDict())

    def test_extract_malformed_header(self):
        headers = CaseInsensitiveDict({"x-once-authentication-info": "{not json"})

        with pytest.raises(UnexpectedResponseShapeError, match="Malformed"):
            extract_tan_challenge(headers)

    def test_desired_type_header(self):
        assert desired_type_header(TanChallengeType.PUSH_TAN) == '{"typ":"P_TAN_PUSH"}'

    def test_challenge_id_header(self):
        challenge = TanChallenge(id="42", type=TanChallengeType.FREE)

        assert challenge_id_header(challenge) == '{"id":"42"}'
