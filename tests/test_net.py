"""
Tests for utils/net module.
"""

from unittest.mock import MagicMock

import pytest
import requests

from utils.net import (
    BadRequestError,
    CertificateError,
    ForbiddenError,
    NetworkClient,
    NotFoundError,
    RequestTimeoutError,
    TransportError,
    UnexpectedTransportError,
    classify_request_error,
    create_session,
    get_default_headers,
)


def http_error(status_code: int) -> requests.exceptions.HTTPError:
    response = requests.Response()
    response.status_code = status_code
    return requests.exceptions.HTTPError(f"{status_code} Error", response=response)


def make_response(status_code: int = 200, content: bytes = b"{}") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.url = "https://api.example.com/stocks"
    return response


@pytest.mark.parametrize(
    "exc, expected, message",
    [
        (requests.exceptions.ReadTimeout(), RequestTimeoutError, "Request timed out"),
        (requests.exceptions.ConnectTimeout(), RequestTimeoutError, "Request timed out"),
        (http_error(403), ForbiddenError, "forbidden"),
        (http_error(404), NotFoundError, "not found"),
        (http_error(400), BadRequestError, "Invalid request"),
        (http_error(422), BadRequestError, "Invalid request"),
        (requests.exceptions.SSLError("certificate has expired"), CertificateError, "SSL certificate"),
        (http_error(503), UnexpectedTransportError, "unexpected error"),
        (requests.exceptions.ConnectionError("reset"), UnexpectedTransportError, "reset"),
    ],
)
def test_classify_request_error(exc, expected, message):
    """Test each raw failure maps to its own transport error and message."""
    error = classify_request_error(exc)

    assert type(error) is expected
    assert isinstance(error, TransportError)
    assert message in str(error)


def test_classify_keeps_status_code():
    """Test HTTP status codes are carried on the classified error."""
    assert classify_request_error(http_error(403)).status_code == 403
    assert classify_request_error(http_error(500)).status_code == 500


def test_classify_passes_through_transport_errors():
    """Test already-classified errors are returned as-is."""
    error = NotFoundError()
    assert classify_request_error(error) is error


def test_default_headers():
    """Test bearer token is only sent when configured."""
    assert "Authorization" not in get_default_headers()
    assert get_default_headers("abc")["Authorization"] == "Bearer abc"


def test_create_session_has_no_adapter_retries():
    """Test sessions leave retrying to the caller."""
    session = create_session(verify_ssl=False)

    assert session.verify is False
    assert session.get_adapter("https://x").max_retries.total == 0


def test_client_get_decodes_json():
    """Test a successful GET returns decoded JSON and sends headers and timeout."""
    session = MagicMock()
    session.request.return_value = make_response(content=b'{"stocks": {"Apple Inc.": "AAPL"}}')

    client = NetworkClient("https://api.example.com/", api_key="tok", timeout=5, session=session)
    data = client.get("/stocks", params={"minutes": 30})

    assert data == {"stocks": {"Apple Inc.": "AAPL"}}
    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert method == "GET"
    assert url == "https://api.example.com/stocks"
    assert kwargs["timeout"] == 5
    assert kwargs["params"] == {"minutes": 30}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


def test_client_empty_body_returns_none():
    """Test an empty body decodes to None."""
    session = MagicMock()
    session.request.return_value = make_response(content=b"")

    assert NetworkClient("https://api.example.com", session=session).get("/stocks") is None


def test_client_translates_http_status():
    """Test HTTP error statuses surface as classified errors."""
    session = MagicMock()
    session.request.return_value = make_response(status_code=404, content=b"missing")

    client = NetworkClient("https://api.example.com", session=session)

    with pytest.raises(NotFoundError):
        client.get("/stocks/XYZ")


def test_client_translates_timeouts():
    """Test raised requests exceptions surface as classified errors."""
    session = MagicMock()
    session.request.side_effect = requests.exceptions.ReadTimeout("slow")

    client = NetworkClient("https://api.example.com", session=session)

    with pytest.raises(RequestTimeoutError) as exc_info:
        client.get("/stocks")

    assert isinstance(exc_info.value.__cause__, requests.exceptions.ReadTimeout)


def test_client_invalid_json():
    """Test undecodable bodies are unexpected transport errors."""
    session = MagicMock()
    session.request.return_value = make_response(content=b"<html>")

    client = NetworkClient("https://api.example.com", session=session)

    with pytest.raises(UnexpectedTransportError, match="invalid JSON"):
        client.get("/stocks")
