"""
OAuth token exchange for comdirect sessions.

This module performs the three grant exchanges against the token endpoint:
- password: online banking credentials → pre-session tokens
- cd_secondary: TAN-activated access token → trading tokens
- refresh_token: refresh token → new token pair

It also revokes access tokens when a session ends.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .. import endpoints
from ..config import ComdirectConfig
from ..exceptions import AuthFailureError, ComdirectAPIError
from ..transport import HttpTransport, decode_json
from .tokens import GrantType, TokenPair

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OAuthTokenExchanger:
    """
    Exchanges OAuth grants for token pairs.

    A failed exchange is never retried; the caller's current operation
    fails with it.
    """

    def __init__(
        self,
        config: ComdirectConfig,
        transport: HttpTransport,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize token exchanger.

        Args:
            config: Client configuration (credentials)
            transport: HTTP transport
            clock: Returns the current time (defaults to UTC now)
        """
        self.config = config
        self.transport = transport
        self.clock = clock or utc_now

    def exchange(self, grant: GrantType) -> TokenPair:
        """
        Exchange a grant for a token pair.

        Args:
            grant: PasswordGrant, SecondaryGrant or RefreshGrant

        Returns:
            TokenPair with absolute expiry

        Raises:
            AuthFailureError: If the token endpoint rejects the grant
            ResponseDecodeError: If the response body is malformed
            TransportError: On network failure
        """
        logger.info(f"Requesting OAuth tokens (grant_type={grant.grant_type})")

        form_data = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "grant_type": grant.grant_type,
        }
        form_data.update(grant.fields(self.config.username, self.config.password))

        started_at = self.clock()
        try:
            response = self.transport.request(
                "POST", endpoints.OAUTH_TOKEN, form_data=form_data
            )
        except ComdirectAPIError as e:
            raise AuthFailureError(
                f"Token exchange ({grant.grant_type}) failed with status {e.status_code}. "
                f"Check that your client credentials and login are correct.",
                status_code=e.status_code,
                detail=e.detail,
            ) from e

        tokens = TokenPair.from_response(decode_json(response), started_at)
        logger.info(f"Obtained tokens (grant_type={grant.grant_type})")
        return tokens

    def revoke(self, access_token: str) -> None:
        """
        Revoke an access token on the server.

        Raises:
            ComdirectAPIError: If the revoke call is rejected
            TransportError: On network failure
        """
        self.transport.request("DELETE", endpoints.OAUTH_REVOKE, access_token=access_token)
        logger.info("Access token revoked")
