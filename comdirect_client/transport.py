"""
HTTP transport for the comdirect API.

This module wraps a requests.Session and handles:

- Bearer authentication and the x-http-request-info correlation header
- Classification of non-success responses into the exception hierarchy
- JSON decoding with consistent error reporting

There are no retries here: every failure surfaces to the caller.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from .exceptions import (
    AuthFailureError,
    ClientError,
    ComdirectAPIError,
    NotFoundError,
    ResponseDecodeError,
    ServerError,
    TransportError,
    UnprocessableRequestError,
)

logger = logging.getLogger(__name__)

REQUEST_INFO_HEADER = "x-http-request-info"


def make_request_id() -> str:
    """Local wall-clock time as HHMMSSmmm."""
    return datetime.now().strftime("%H%M%S%f")[:-3]


def make_request_info(session_id: str) -> str:
    """
    Build the correlation header value sent with every session call.

    Args:
        session_id: Client-generated 32-hex-character session id

    Returns:
        JSON string {"clientRequestId": {"sessionId": ..., "requestId": ...}}
    """
    return json.dumps(
        {"clientRequestId": {"sessionId": session_id, "requestId": make_request_id()}},
        separators=(",", ":"),
    )


def decode_json(response: requests.Response) -> Any:
    """
    Decode a JSON response body.

    Raises:
        ResponseDecodeError: If the body is not valid JSON
    """
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Invalid JSON in response ({response.status_code}): {e}")
        raise ResponseDecodeError(f"Invalid JSON in response: {e}") from e


class HttpTransport:
    """
    Performs HTTP requests against the comdirect API.

    Example:
        transport = HttpTransport("https://api.comdirect.de")
        response = transport.request(
            "GET", "/api/brokerage/v3/orders/123",
            access_token=token, session_id=session_id,
        )
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize transport.

        Args:
            base_url: API host, e.g. https://api.comdirect.de
            timeout: Request timeout in seconds
            session: requests session to use (creates one if not provided)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _get_full_url(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_url}{endpoint}"

    def request(
        self,
        method: str,
        endpoint: str,
        access_token: Optional[str] = None,
        session_id: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        json_data: Optional[Any] = None,
        form_data: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Make an HTTP request and classify the outcome.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: API endpoint path
            access_token: Bearer token, if the call is authenticated
            session_id: Session id for the correlation header
            headers: Additional request headers
            json_data: JSON request body
            form_data: Form-encoded request body
            params: Query parameters

        Returns:
            Response object (2xx only)

        Raises:
            AuthFailureError: On 401 / 403
            NotFoundError: On 404
            UnprocessableRequestError: On 422
            ClientError: On any other 4xx
            ServerError: On 5xx
            TransportError: On network failure
        """
        request_headers: Dict[str, str] = {}
        if access_token:
            request_headers["Authorization"] = f"Bearer {access_token}"
        if session_id:
            request_headers[REQUEST_INFO_HEADER] = make_request_info(session_id)
        if json_data is not None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        url = self._get_full_url(endpoint)
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                headers=request_headers,
                params=params,
                json=json_data,
                data=form_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout: {method} {url}")
            raise TransportError(f"Request to comdirect API timed out: {url}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error: {e}")
            raise TransportError(f"Network error: {e}") from e

        if not response.ok:
            self._raise_for_status(method, url, response)

        logger.debug(f"Response: {response.status_code}")
        return response

    @staticmethod
    def _raise_for_status(method: str, url: str, response: requests.Response) -> None:
        status = response.status_code
        detail = response.text
        message = f"{method} {url} failed with status {status}"

        if status in (401, 403):
            logger.error(f"Authentication failed ({status}): {detail}")
            raise AuthFailureError(message, status_code=status, detail=detail)

        if status == 404:
            logger.warning(f"Resource not found (404): {url}")
            raise NotFoundError(message, status_code=status, detail=detail)

        if status == 422:
            logger.warning(f"Request refused (422): {detail}")
            raise UnprocessableRequestError(message, status_code=status, detail=detail)

        if 400 <= status < 500:
            logger.error(f"Client error ({status}): {detail}")
            raise ClientError(message, status_code=status, detail=detail)

        if status >= 500:
            logger.error(f"Server error ({status}): {detail}")
            raise ServerError(message, status_code=status, detail=detail)

        raise ComdirectAPIError(message, status_code=status, detail=detail)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
