"""Tests for api/storytel.py -- Storytel client with mocked HTTP."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from storytel_metadata.api.storytel import StorytelClient
from storytel_metadata.errors import UpstreamError
from storytel_metadata.models import BOOK_URL, SEARCH_URL


def _response(payload) -> MagicMock:
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    return mock_response


class TestSearch:
    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_returns_payload(self, mock_get):
        mock_get.return_value = _response({"books": [{"book": {"id": 1}}]})

        data = StorytelClient().search("Night+Watch", "en")

        assert data == {"books": [{"book": {"id": 1}}]}

    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_uses_search_endpoint_and_params(self, mock_get):
        mock_get.return_value = _response({"books": []})

        StorytelClient().search("Night+Watch", "de")

        assert mock_get.call_args[0][0] == SEARCH_URL
        call_kwargs = mock_get.call_args[1]
        assert call_kwargs["params"] == {"request_locale": "de", "q": "Night+Watch"}
        assert call_kwargs["headers"] == {"User-Agent": "Storytel"}
        assert call_kwargs["timeout"] == 30.0

    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_custom_endpoint_and_agent(self, mock_get):
        mock_get.return_value = _response({})

        client = StorytelClient(
            search_url="http://localhost/search", user_agent="Test", timeout=5.0,
        )
        client.search("q", "en")

        assert mock_get.call_args[0][0] == "http://localhost/search"
        assert mock_get.call_args[1]["headers"] == {"User-Agent": "Test"}
        assert mock_get.call_args[1]["timeout"] == 5.0


class TestFetchDetail:
    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_uses_detail_endpoint_and_params(self, mock_get):
        mock_get.return_value = _response({"slb": {}})

        data = StorytelClient().fetch_detail("12345", "sv")

        assert data == {"slb": {}}
        assert mock_get.call_args[0][0] == BOOK_URL
        assert mock_get.call_args[1]["params"] == {"bookId": "12345", "request_locale": "sv"}
        assert mock_get.call_args[1]["headers"] == {"User-Agent": "Storytel"}


class TestErrors:
    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_transport_error_raises_upstream_error(self, mock_get):
        mock_get.side_effect = httpx.ConnectError("Network error")

        with pytest.raises(UpstreamError, match="Network error") as exc_info:
            StorytelClient().search("q", "en")

        assert exc_info.value.url == SEARCH_URL
        assert exc_info.value.status_code is None

    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_status_error_carries_status_code(self, mock_get):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Not Found",
            request=MagicMock(),
            response=MagicMock(status_code=404),
        )
        mock_get.return_value = mock_response

        with pytest.raises(UpstreamError, match="HTTP 404") as exc_info:
            StorytelClient().fetch_detail("1", "en")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == BOOK_URL

    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_invalid_json_raises_upstream_error(self, mock_get):
        mock_response = MagicMock()
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response

        with pytest.raises(UpstreamError, match="Invalid JSON"):
            StorytelClient().search("q", "en")

    @patch("storytel_metadata.api.storytel.httpx.get")
    def test_non_object_payload_raises_upstream_error(self, mock_get):
        mock_get.return_value = _response(None)

        with pytest.raises(UpstreamError, match="Unexpected payload"):
            StorytelClient().fetch_detail("1", "en")
