"""
Exception classes for the comdirect client.

Every error raised by this package derives from ComdirectError, so callers
can catch the whole family with a single handler. HTTP failures carry the
status code of the response that caused them.
"""

from typing import Any, Optional


class ComdirectError(Exception):
    """
    Base exception for all comdirect client errors.

    Attributes:
        order: Order handed back to the caller when a deletion fails
               (None for every other operation)
    """

    def __init__(self, message: str = "", order: Optional[Any] = None):
        super().__init__(message)
        self.order = order


class ConfigurationError(ComdirectError):
    """Client configuration error (missing or invalid settings)."""

    pass


class NoActiveSessionError(ComdirectError):
    """Operation requires a session but none has been created."""

    pass


class TanError(ComdirectError):
    """Base class for TAN challenge negotiation failures."""

    pass


class UnsupportedTanTypeError(TanError):
    """The server only offers TAN types this client cannot handle."""

    pass


class UnexpectedTanTypeError(TanError):
    """The server answered with a TAN type that was not asked for."""

    pass


class CouldNotCreateSessionError(ComdirectError):
    """TAN activation finished but the session is not TAN-active."""

    pass


class CouldNotEndSessionError(ComdirectError):
    """Revoking the access token failed."""

    pass


class UnexpectedResponseShapeError(ComdirectError):
    """A response header or body field is missing or malformed."""

    pass


class ResponseDecodeError(ComdirectError):
    """A response body could not be decoded."""

    pass


class LocalIOError(ComdirectError):
    """The confirmation provider failed to deliver a TAN."""

    pass


class ConfirmationTimeoutError(LocalIOError):
    """The TAN confirmation was not given in time."""

    pass


class TransportError(ComdirectError):
    """Network failure before any response was received."""

    pass


class ComdirectAPIError(ComdirectError):
    """
    The API answered with a non-success status.

    Attributes:
        status_code: HTTP status code of the response
        detail: Response body text, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class AuthFailureError(ComdirectAPIError):
    """Credentials or tokens were rejected."""

    pass


class ClientError(ComdirectAPIError):
    """The request was rejected (4xx)."""

    pass


class NotFoundError(ClientError):
    """The addressed resource does not exist (404)."""

    pass


class UnprocessableRequestError(ClientError):
    """The request was understood but refused (422)."""

    pass


class ServerError(ComdirectAPIError):
    """The server failed to handle the request (5xx)."""

    pass
