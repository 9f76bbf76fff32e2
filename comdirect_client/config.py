"""
Configuration for the comdirect client.

Configuration can be loaded from environment variables or provided
programmatically. The four credentials come from the comdirect developer
portal (client id / secret) and the online banking login (username / PIN).
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import ConfigurationError


@dataclass
class ComdirectConfig:
    """
    Configuration for a comdirect API client.

    Attributes:
        client_id: OAuth client id from the developer portal
        client_secret: OAuth client secret from the developer portal
        username: Online banking user number
        password: Online banking PIN
        base_url: API host (default: https://api.comdirect.de)
        timeout: Per-request timeout in seconds
        confirmation_timeout: Seconds to wait for a TAN confirmation
                              (None waits until the provider returns)
    """

    client_id: str
    client_secret: str = field(repr=False)
    username: str
    password: str = field(repr=False)

    base_url: str = "https://api.comdirect.de"
    timeout: int = 30
    confirmation_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in ("client_id", "client_secret", "username", "password"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} cannot be empty")

        if not self.base_url.startswith("https://"):
            raise ConfigurationError(
                f"base_url must be an https URL, got {self.base_url}"
            )

        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        if self.confirmation_timeout is not None and self.confirmation_timeout <= 0:
            raise ConfigurationError("confirmation_timeout must be positive")

    @classmethod
    def from_env(cls) -> "ComdirectConfig":
        """
        Load configuration from environment variables.

        Required environment variables:
            COMDIRECT_CLIENT_ID: OAuth client id
            COMDIRECT_CLIENT_SECRET: OAuth client secret
            COMDIRECT_USERNAME: Online banking user number
            COMDIRECT_PASSWORD: Online banking PIN

        Optional environment variables:
            COMDIRECT_BASE_URL: API host (default: https://api.comdirect.de)
            COMDIRECT_TIMEOUT: Request timeout in seconds (default: 30)
            COMDIRECT_CONFIRMATION_TIMEOUT: TAN wait limit in seconds (default: none)

        Returns:
            ComdirectConfig instance

        Raises:
            ConfigurationError: If required environment variables are missing
                                or optional ones are not numbers
        """
        required = {
            "client_id": os.environ.get("COMDIRECT_CLIENT_ID"),
            "client_secret": os.environ.get("COMDIRECT_CLIENT_SECRET"),
            "username": os.environ.get("COMDIRECT_USERNAME"),
            "password": os.environ.get("COMDIRECT_PASSWORD"),
        }

        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                "Missing comdirect credentials. Set environment variables:\n"
                "  COMDIRECT_CLIENT_ID=your_client_id\n"
                "  COMDIRECT_CLIENT_SECRET=your_client_secret\n"
                "  COMDIRECT_USERNAME=your_user_number\n"
                "  COMDIRECT_PASSWORD=your_pin\n"
                f"\nMissing: {', '.join(missing)}"
            )

        confirmation_timeout = os.environ.get("COMDIRECT_CONFIRMATION_TIMEOUT")

        try:
            return cls(
                **required,
                base_url=os.environ.get("COMDIRECT_BASE_URL", "https://api.comdirect.de"),
                timeout=int(os.environ.get("COMDIRECT_TIMEOUT", "30")),
                confirmation_timeout=(
                    float(confirmation_timeout) if confirmation_timeout else None
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e
