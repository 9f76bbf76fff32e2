"""
OAuth token data for comdirect sessions.

This module defines the token pair returned by the token endpoint and the
three grant types the client exchanges for it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Union

from ..exceptions import ResponseDecodeError


@dataclass(frozen=True)
class TokenPair:
    """
    Access and refresh token with absolute expiry.

    Attributes:
        access_token: Short-lived token for API calls
        refresh_token: Token for obtaining a new pair
        expires_at: When the access token expires (timezone-aware UTC)
    """

    access_token: str
    refresh_token: str
    expires_at: datetime

    @classmethod
    def from_response(cls, data: Dict[str, Any], now: datetime) -> "TokenPair":
        """
        Create TokenPair from a token endpoint response.

        Args:
            data: Decoded JSON body with access_token, refresh_token, expires_in
            now: Time the exchange started

        Returns:
            TokenPair instance

        Raises:
            ResponseDecodeError: If fields are missing or expires_in is not
                                 a positive number of seconds
        """
        try:
            access_token = data["access_token"]
            refresh_token = data["refresh_token"]
            expires_in = int(data["expires_in"])
        except (KeyError, TypeError, ValueError) as e:
            raise ResponseDecodeError(f"Invalid response from token endpoint: {e}") from e

        if expires_in <= 0:
            raise ResponseDecodeError(f"expires_in must be positive, got {expires_in}")

        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=now + timedelta(seconds=expires_in),
        )

    @property
    def is_expired(self) -> bool:
        return datetime.now(timezone.utc) >= self.expires_at

    def expires_within(self, seconds: int) -> bool:
        """
        Check if the access token expires within given seconds.

        Callers use this to decide when to refresh; nothing refreshes
        in the background.
        """
        return datetime.now(timezone.utc) + timedelta(seconds=seconds) >= self.expires_at


# A token pair that is not yet bound to a server session
PreSession = TokenPair


@dataclass(frozen=True)
class PasswordGrant:
    """Initial login with the online banking credentials."""

    grant_type = "password"

    def fields(self, username: str, password: str) -> Dict[str, str]:
        return {"username": username, "password": password}


@dataclass(frozen=True)
class SecondaryGrant:
    """Elevation of a TAN-activated session's access token."""

    access_token: str
    grant_type = "cd_secondary"

    def fields(self, username: str, password: str) -> Dict[str, str]:
        return {"token": self.access_token}


@dataclass(frozen=True)
class RefreshGrant:
    refresh_token: str
    grant_type = "refresh_token"

    def fields(self, username: str, password: str) -> Dict[str, str]:
        return {"refresh_token": self.refresh_token}


GrantType = Union[PasswordGrant, SecondaryGrant, RefreshGrant]
