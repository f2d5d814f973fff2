"""
Centralized network utilities for the stock API.

Raw ``requests`` failures are classified here into a small set of transport
errors, each carrying a human-readable message. Retrying is not done at this
layer: sessions are created without adapter-level retries and the caller's
cache decides when to try again.
"""

from typing import Any, Optional

import requests
from loguru import logger
from requests.adapters import HTTPAdapter


class NetworkError(Exception):
    """Base exception for network-related errors."""
    pass


class TransportError(NetworkError):
    """A single upstream request failed."""

    message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or self.message)
        self.status_code = status_code


class RequestTimeoutError(TransportError):
    """Connect or read timeout."""

    message = "Request timed out. Please check your internet connection."


class ForbiddenError(TransportError):
    """HTTP 403."""

    message = "Access to the API is forbidden. Please check your credentials."


class NotFoundError(TransportError):
    """HTTP 404."""

    message = "The requested resource was not found."


class BadRequestError(TransportError):
    """Any other 4xx response."""

    message = "Invalid request. Please check the API documentation."


class CertificateError(TransportError):
    """TLS certificate could not be validated."""

    message = "SSL certificate validation failed. Please check the API endpoint configuration."


class UnexpectedTransportError(TransportError):
    """Connection resets, 5xx responses, undecodable bodies and the like."""

    def __init__(self, detail: str = "", status_code: Optional[int] = None):
        message = f"{self.message}: {detail}" if detail else self.message
        super().__init__(message, status_code=status_code)


def classify_request_error(exc: Exception) -> TransportError:
    """
    Map a raw ``requests`` exception to a TransportError.

    Args:
        exc: Exception raised by the session or by ``raise_for_status``

    Returns:
        Classified transport error (never raises)
    """
    if isinstance(exc, TransportError):
        return exc

    # SSLError derives from ConnectionError, check it first
    if isinstance(exc, requests.exceptions.SSLError):
        return CertificateError()

    if isinstance(exc, requests.exceptions.Timeout):
        return RequestTimeoutError()

    if isinstance(exc, requests.exceptions.HTTPError):
        status_code = exc.response.status_code if exc.response is not None else None
        if status_code == 403:
            return ForbiddenError(status_code=status_code)
        if status_code == 404:
            return NotFoundError(status_code=status_code)
        if status_code is not None and 400 <= status_code < 500:
            return BadRequestError(status_code=status_code)
        return UnexpectedTransportError(str(exc), status_code=status_code)

    return UnexpectedTransportError(str(exc))


def create_session(verify_ssl: bool = True) -> requests.Session:
    """
    Create a requests session with connection pooling and no automatic retries.

    Args:
        verify_ssl: Whether TLS certificates are verified

    Returns:
        Configured requests session
    """
    session = requests.Session()

    adapter = HTTPAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl

    return session


def get_default_headers(api_key: Optional[str] = None) -> dict[str, str]:
    """
    Get default headers for HTTP requests.

    Args:
        api_key: Optional bearer token to include

    Returns:
        Dictionary of headers
    """
    headers = {
        'User-Agent': 'stock-correlation/0.1.0',
        'Accept': 'application/json',
        'Content-Type': 'application/json',
    }

    if api_key:
        headers['Authorization'] = f'Bearer {api_key}'

    return headers


class NetworkClient:
    """
    Thin JSON-over-HTTP client whose failures are always TransportErrors.

    Example:
        >>> client = NetworkClient("https://api.example.com", timeout=10)
        >>> client.get("/stocks")
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize network client.

        Args:
            base_url: Base URL for API
            api_key: Optional bearer token
            timeout: Request timeout in seconds
            verify_ssl: Whether TLS certificates are verified
            session: Pre-built session (tests pass a mock here)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or create_session(verify_ssl=verify_ssl)

    def _make_request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """
        Make HTTP request and translate any failure.

        Args:
            method: HTTP method
            endpoint: API endpoint (relative to base_url)
            **kwargs: Additional arguments for requests

        Returns:
            HTTP response with a 2xx status

        Raises:
            TransportError: On any transport or HTTP status failure
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        headers = get_default_headers(self.api_key)
        if 'headers' in kwargs:
            headers.update(kwargs['headers'])
        kwargs['headers'] = headers

        if 'timeout' not in kwargs:
            kwargs['timeout'] = self.timeout

        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            error = classify_request_error(e)
            logger.debug(f"{method} {endpoint} failed: {error}")
            raise error from e

        return response

    def get(self, endpoint: str, **kwargs: Any) -> Any:
        """GET request returning decoded JSON (None for an empty body)."""
        response = self._make_request('GET', endpoint, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UnexpectedTransportError(f"invalid JSON from {endpoint}") from e
