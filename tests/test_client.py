"""
Unit tests for the HTTP transport.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import DIRECT_URL
from whitelist_sync.errors import TransportError
from whitelist_sync.remote.client import USER_AGENT, WhitelistClient
from whitelist_sync.sync.interfaces import Transport


def _response(status_code: int, content: bytes) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    return response


class TestWhitelistClient:
    """Tests for WhitelistClient.fetch()."""

    @pytest.fixture
    def client(self):
        with WhitelistClient(connect_timeout=5.0, read_timeout=10.0) as client:
            yield client

    def test_is_a_transport(self, client):
        assert isinstance(client, Transport)

    def test_sets_identifying_headers(self, client):
        assert client.headers["User-Agent"] == USER_AGENT
        assert client.headers["Accept"] == "application/json"

    def test_extra_headers(self):
        with WhitelistClient(headers={"X-Trace": "abc"}) as client:
            assert client.headers["X-Trace"] == "abc"
            assert client.headers["User-Agent"] == USER_AGENT

    def test_fetch_success(self, client):
        with patch.object(client._session, "get", return_value=_response(200, b'["a"]')) as get:
            response = client.fetch(DIRECT_URL)

        get.assert_called_once_with(DIRECT_URL, timeout=(5.0, 10.0))
        assert response.url == DIRECT_URL
        assert response.status_code == 200
        assert response.body == b'["a"]'
        assert response.is_success

    def test_non_2xx_is_returned_not_raised(self, client):
        with patch.object(client._session, "get", return_value=_response(404, b"Not Found")):
            response = client.fetch(DIRECT_URL)

        assert response.status_code == 404
        assert not response.is_success

    def test_empty_body(self, client):
        with patch.object(client._session, "get", return_value=_response(200, b"")):
            response = client.fetch(DIRECT_URL)

        assert response.is_empty

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("read timed out"),
        requests.exceptions.InvalidURL("bad url"),
    ])
    def test_request_errors_become_transport_errors(self, client, error):
        with patch.object(client._session, "get", side_effect=error) as get:
            with pytest.raises(TransportError):
                client.fetch(DIRECT_URL)

        assert get.call_count == 1

    def test_repr(self, client):
        assert repr(client) == "WhitelistClient(connect_timeout=5.0, read_timeout=10.0)"
