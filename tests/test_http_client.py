# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportUnknownVariableType=false, reportMissingParameterType=false
# pyright: reportUnknownArgumentType=false
from unittest.mock import Mock, patch

import pytest
import requests

from brewerydb.networking.client import HttpClient
from brewerydb.networking.config import HttpClientConfig
from brewerydb.networking.errors import (
    ConnectionFailedError,
    HttpClientError,
    RequestTimeoutError,
)


@pytest.fixture
def config():
    return HttpClientConfig(
        user_agent="BreweryTest/1.0",
        default_headers={"X-Test": "yes"},
        timeout_seconds=5.0,
    )


@pytest.fixture
def client(config):
    return HttpClient(config)


def _mock_response(
    *,
    content: bytes = b"",
    status: int = 200,
    url: str = "http://example.com",
    reason: str = "OK",
):
    response = Mock()
    response.content = content
    response.status_code = status
    response.url = url
    response.reason = reason
    response.elapsed.total_seconds.return_value = 0.1
    return response


def test_init_sets_user_agent_and_default_headers(client):
    assert client._session.headers["User-Agent"] == "BreweryTest/1.0"
    assert client._session.headers["X-Test"] == "yes"


@patch("requests.Session.get")
def test_get_success_returns_body_and_metadata(mock_get, client):
    mock_get.return_value = _mock_response(content=b'{"data": []}')

    result = client.get("http://example.com")

    assert result.ok
    assert result.error is None
    assert result.value == b'{"data": []}'
    assert result.meta["method"] == "GET"
    assert result.meta["url"] == "http://example.com"
    assert result.meta["status_code"] == 200
    assert result.meta["timeout_s"] == 5.0
    assert result.meta["elapsed_s"] == 0.1
    mock_get.assert_called_once_with(
        "http://example.com",
        timeout=5.0,
        allow_redirects=True,
        verify=True,
    )


@patch("requests.Session.get")
def test_get_uses_connect_read_timeout_tuple(mock_get):
    client = HttpClient(
        HttpClientConfig(connect_timeout_seconds=1.0, read_timeout_seconds=3.0)
    )
    mock_get.return_value = _mock_response(content=b"ok")

    result = client.get("http://example.com")

    assert result.meta["timeout_s"] == (1.0, 3.0)
    assert mock_get.call_args.kwargs["timeout"] == (1.0, 3.0)


@patch("requests.Session.get")
def test_get_respects_verify_tls_false(mock_get, caplog):
    with caplog.at_level("WARNING", logger="brewerydb.networking.client"):
        client = HttpClient(HttpClientConfig(timeout_seconds=5.0, verify_tls=False))
    mock_get.return_value = _mock_response(content=b"ok")

    client.get("http://example.com")

    assert mock_get.call_args.kwargs["verify"] is False
    assert "verification is disabled" in caplog.text


@patch("requests.Session.get")
def test_get_does_not_follow_redirects_when_disabled(mock_get):
    client = HttpClient(HttpClientConfig(allow_redirects=False))
    mock_get.return_value = _mock_response(status=302, reason="Found")

    result = client.get("http://example.com/old")

    assert result.ok
    assert result.meta["status_code"] == 302
    assert mock_get.call_args.kwargs["allow_redirects"] is False


@patch("requests.Session.get")
def test_timeout_is_reported_once_without_retry(mock_get, client):
    mock_get.side_effect = requests.exceptions.Timeout("Timed out")

    result = client.get("http://example.com")

    assert not result.ok
    assert result.value is None
    assert isinstance(result.error, RequestTimeoutError)
    assert result.meta["final_error"] == "Timeout"
    assert mock_get.call_count == 1


@patch("requests.Session.get")
def test_connection_error_maps_to_connection_failed(mock_get, client):
    mock_get.side_effect = requests.exceptions.ConnectionError("refused")

    result = client.get("http://example.com")

    assert isinstance(result.error, ConnectionFailedError)
    assert str(result.error) == "refused"
    assert result.meta["final_error"] == "ConnectionError"


@patch("requests.Session.get")
def test_tls_failure_maps_to_connection_failed(mock_get, client):
    mock_get.side_effect = requests.exceptions.SSLError("bad certificate")

    result = client.get("https://example.com")

    assert isinstance(result.error, ConnectionFailedError)
    assert result.meta["final_error"] == "SSLError"


@patch("requests.Session.get")
def test_generic_request_exception_maps_to_base_error(mock_get, client):
    mock_get.side_effect = requests.exceptions.InvalidURL("boom")

    result = client.get("http://example.com")

    assert type(result.error) is HttpClientError
    assert result.meta["final_error"] == "InvalidURL"


@patch("requests.Session.post")
def test_post_sends_form_body(mock_post, client):
    mock_post.return_value = _mock_response(content=b"created", status=201)

    result = client.post(
        "http://example.com",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        data="a=1&b=2",
    )

    assert result.ok
    assert result.value == b"created"
    assert result.meta["method"] == "POST"
    assert result.meta["status_code"] == 201
    mock_post.assert_called_once_with(
        "http://example.com",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        data="a=1&b=2",
        timeout=5.0,
        allow_redirects=True,
        verify=True,
    )


@patch("requests.Session.get")
def test_context_cannot_override_canonical_metadata(mock_get, client):
    mock_get.return_value = _mock_response(
        content=b"ok", url="http://response.example"
    )

    result = client.get(
        "http://example.com",
        context={"url": "http://context.example", "endpoint": "beers"},
    )

    assert result.meta["url"] == "http://response.example"
    assert result.meta["endpoint"] == "beers"
    assert result.meta["context"]["url"] == "http://context.example"


def test_close_closes_session(client):
    with patch.object(client._session, "close") as mock_close:
        client.close()

    mock_close.assert_called_once_with()
