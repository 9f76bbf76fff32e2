"""
Session data models.

A Session binds a token pair to the client-generated session id and the
server-assigned session uuid. It only exists once the TAN handshake has
completed; refresh replaces its tokens in place.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ..exceptions import UnexpectedResponseShapeError
from ..oauth.tokens import TokenPair


def make_session_id() -> str:
    """
    Generate a client session id.

    The id is a 32-character lowercase hex string. It only correlates
    requests and is not a secret.
    """
    return secrets.token_hex(16)


@dataclass
class Session:
    """
    An authenticated comdirect session.

    Attributes:
        session_id: Client-generated correlation id
        session_uuid: Server-assigned session identity
        tokens: Current token pair
    """

    session_id: str
    session_uuid: str
    tokens: TokenPair

    @property
    def access_token(self) -> str:
        return self.tokens.access_token

    @property
    def refresh_token(self) -> str:
        return self.tokens.refresh_token

    @property
    def expires_at(self) -> datetime:
        return self.tokens.expires_at

    def replace_tokens(self, tokens: TokenPair) -> None:
        """Swap in a new token pair, keeping both session identifiers."""
        self.tokens = tokens

    def identity_body(self) -> Dict[str, Any]:
        """JSON body sent when negotiating and activating the session TAN."""
        return {
            "identifier": self.session_uuid,
            "sessionTanActive": True,
            "activated2FA": True,
        }


@dataclass(frozen=True)
class SessionStatus:
    """
    Session status as reported by the session endpoints.

    Attributes:
        identifier: Server-assigned session uuid
        session_tan_active: Whether the session TAN has been activated
    """

    identifier: str
    session_tan_active: bool

    @classmethod
    def from_dict(cls, data: Any) -> "SessionStatus":
        """
        Create SessionStatus from a decoded JSON object.

        Raises:
            UnexpectedResponseShapeError: If the object or its fields are missing
        """
        if not isinstance(data, dict) or "identifier" not in data:
            raise UnexpectedResponseShapeError(
                f"Session status without identifier: {data!r}"
            )
        return cls(
            identifier=str(data["identifier"]),
            session_tan_active=bool(data.get("sessionTanActive", False)),
        )
