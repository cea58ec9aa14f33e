# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
"""HTTP status codes never decide success; the decoded body does."""
from unittest.mock import Mock, patch

import pytest

from brewerydb.errors import ServiceError
from brewerydb.executor import RequestExecutor
from brewerydb.networking.client import HttpClient
from brewerydb.networking.config import HttpClientConfig

BASE = "http://api.example"


def _mock_response(*, content: bytes, status: int, reason: str):
    response = Mock()
    response.content = content
    response.status_code = status
    response.url = BASE
    response.reason = reason
    response.elapsed.total_seconds.return_value = 0.1
    return response


@pytest.fixture
def executor():
    return RequestExecutor(HttpClient(HttpClientConfig(timeout_seconds=5.0)), BASE)


def test_404_with_data_body_is_returned(executor):
    with patch("requests.Session.get") as mock_get:
        mock_get.return_value = _mock_response(
            content=b'{"data": null}', status=404, reason="Not Found"
        )
        response = executor.execute("beers/missing", {}, api_key="k")

    assert response.status_code == 404
    assert response.parsed == {"data": None}


def test_500_with_error_body_raises_service_error(executor):
    with patch("requests.Session.get") as mock_get:
        mock_get.return_value = _mock_response(
            content=b'{"error": {"message": "Internal failure"}}',
            status=500,
            reason="Internal Server Error",
        )
        with pytest.raises(ServiceError) as excinfo:
            executor.execute("beers", {}, api_key="k")

    assert excinfo.value.response is not None
    assert excinfo.value.response.status_code == 500


def test_200_with_error_body_raises_service_error(executor):
    with patch("requests.Session.get") as mock_get:
        mock_get.return_value = _mock_response(
            content=b'{"error": {"message": "Invalid API Key"}}',
            status=200,
            reason="OK",
        )
        with pytest.raises(ServiceError, match="Invalid API Key"):
            executor.execute("beers", {}, api_key="k")
