"""
TAN challenge model and header codec.

The server hands out TAN challenges in the x-once-authentication-info
response header as JSON: {"id": ..., "typ": ..., "availableTypes": [...],
"challenge": ...}. The same header name carries the desired type or the
challenge id on the way back.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional

from ..exceptions import UnexpectedResponseShapeError

logger = logging.getLogger(__name__)

AUTHENTICATION_INFO_HEADER = "x-once-authentication-info"
AUTHENTICATION_HEADER = "x-once-authentication"


class TanChallengeType(Enum):
    """TAN methods offered by comdirect, keyed by their wire value."""

    PUSH_TAN = "P_TAN_PUSH"
    PHOTO_TAN = "P_TAN"
    PHOTO_TAN_APP = "P_TAN_APP"
    MOBILE_TAN = "M_TAN"
    FREE = "TAN_FREI"

    @property
    def requires_secret(self) -> bool:
        """Whether a one-time code must be typed in for this type."""
        return self not in (TanChallengeType.PUSH_TAN, TanChallengeType.FREE)


@dataclass(frozen=True)
class TanChallenge:
    """
    A TAN challenge issued by the server.

    Attributes:
        id: Correlation id echoed back when confirming
        type: TAN method the server chose
        available_types: Methods the server could offer instead
        challenge: Human-readable hint (e.g. the phone number for M_TAN)
    """

    id: str
    type: TanChallengeType
    available_types: FrozenSet[TanChallengeType] = field(default_factory=frozenset)
    challenge: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "TanChallenge":
        """
        Create TanChallenge from the decoded header JSON.

        Unknown entries in availableTypes are ignored; an unknown typ is not.

        Raises:
            UnexpectedResponseShapeError: If id or typ are missing or invalid
        """
        if not isinstance(data, dict):
            raise UnexpectedResponseShapeError(f"TAN challenge is not an object: {data!r}")

        try:
            challenge_id = str(data["id"])
            challenge_type = TanChallengeType(data["typ"])
        except KeyError as e:
            raise UnexpectedResponseShapeError(f"TAN challenge without {e}") from e
        except ValueError as e:
            raise UnexpectedResponseShapeError(f"Unknown TAN type: {data['typ']!r}") from e

        available = set()
        for raw_type in data.get("availableTypes") or []:
            try:
                available.add(TanChallengeType(raw_type))
            except ValueError:
                logger.debug(f"Ignoring unknown available TAN type {raw_type!r}")

        return cls(
            id=challenge_id,
            type=challenge_type,
            available_types=frozenset(available),
            challenge=data.get("challenge"),
        )


def extract_tan_challenge(headers: Mapping[str, str]) -> TanChallenge:
    """
    Read the TAN challenge from response headers.

    Args:
        headers: Response headers (case-insensitive mapping)

    Returns:
        Decoded TanChallenge

    Raises:
        UnexpectedResponseShapeError: If the header is missing or malformed
    """
    raw = headers.get(AUTHENTICATION_INFO_HEADER)
    if raw is None:
        raise UnexpectedResponseShapeError(
            f"Response has no {AUTHENTICATION_INFO_HEADER} header"
        )

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise UnexpectedResponseShapeError(
            f"Malformed {AUTHENTICATION_INFO_HEADER} header: {e}"
        ) from e

    return TanChallenge.from_dict(data)


def desired_type_header(tan_type: TanChallengeType) -> str:
    """Header value asking the server for a specific TAN type."""
    return json.dumps({"typ": tan_type.value}, separators=(",", ":"))


def challenge_id_header(challenge: TanChallenge) -> str:
    """Header value confirming a challenge by id."""
    return json.dumps({"id": challenge.id}, separators=(",", ":"))
