"""Tests for PyPI install hints and the HTTP helpers behind them."""

from unittest.mock import MagicMock, patch

import requests

import index_hints
from common import http_client
from constants import Constants


def test_latest_on_index_uses_canonical_name():
    with patch("index_hints.get_json", return_value=(200, {}, {"info": {"version": "2.1.0"}})) as mock_get:
        assert index_hints.latest_on_index("Json_Pure") == "2.1.0"
    url = mock_get.call_args[0][0]
    assert url == f"{Constants.REGISTRY_URL_PYPI}json-pure/json"


def test_latest_on_index_not_published():
    with patch("index_hints.get_json", return_value=(404, {}, None)):
        assert index_hints.latest_on_index("nope") is None


def test_latest_on_index_unreachable():
    with patch("index_hints.get_json", return_value=(0, {}, None)):
        assert index_hints.latest_on_index("requests") is None


def test_install_hint():
    with patch("index_hints.get_json", return_value=(200, {}, {"info": {"version": "6.0.1"}})):
        hint = index_hints.install_hint("PyYAML")
    assert hint == "'PyYAML' is available on PyPI (latest 6.0.1): install it with pip install PyYAML"


def test_install_hint_absent():
    with patch("index_hints.get_json", return_value=(200, {}, {"info": {}})):
        assert index_hints.install_hint("PyYAML") is None


class TestHttpClient:
    def setup_method(self):
        http_client.clear_cache()

    def teardown_method(self):
        http_client.clear_cache()

    def test_get_json_parses_and_caches(self):
        response = MagicMock(status_code=200, headers={"Content-Type": "application/json"},
                             text='{"info": {"version": "1.0"}}')
        with patch("common.http_client.requests.get", return_value=response) as mock_get:
            first = http_client.get_json("https://pypi.test/pypi/x/json")
            second = http_client.get_json("https://pypi.test/pypi/x/json")
        assert first[0] == 200
        assert first[2] == {"info": {"version": "1.0"}}
        assert second == first
        assert mock_get.call_count == 1

    def test_invalid_json_returns_none(self):
        response = MagicMock(status_code=200, headers={}, text="<html>")
        with patch("common.http_client.requests.get", return_value=response):
            status, _, data = http_client.get_json("https://pypi.test/pypi/y/json")
        assert status == 200
        assert data is None

    def test_failures_are_retried_and_reported(self):
        with patch("common.http_client.requests.get", side_effect=requests.ConnectionError("down")) as mock_get:
            status, headers, text = http_client.robust_get("https://pypi.test/pypi/z/json")
        assert status == 0
        assert headers == {}
        assert "down" in text
        assert mock_get.call_count == Constants.HTTP_RETRY_MAX

    def test_server_errors_are_not_cached(self):
        bad = MagicMock(status_code=503, headers={}, text="")
        good = MagicMock(status_code=200, headers={}, text="{}")
        with patch("common.http_client.requests.get", side_effect=[bad, good]) as mock_get:
            status, _, _ = http_client.robust_get("https://pypi.test/pypi/w/json")
        assert status == 200
        assert mock_get.call_count == 2
