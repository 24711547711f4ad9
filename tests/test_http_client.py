import pytest
import requests

from scrapers.base_scraper import ScrapingError
from scrapers.http_client import HttpClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def captured(monkeypatch):
    calls = []

    def install(response):
        def fake_request(method, url, **kwargs):
            calls.append((method, url, kwargs))
            if isinstance(response, Exception):
                raise response
            return response
        monkeypatch.setattr(requests, "request", fake_request)
        return calls
    return install


def test_headers_and_timeout_applied(captured):
    calls = captured(FakeResponse(payload={"ok": True}))
    client = HttpClient(headers={"User-Agent": "test"}, timeout=12)

    assert client.get_json("https://x.test/api", params={"a": 1}, headers={"Accept": "json"}) == {"ok": True}

    method, url, kwargs = calls[0]
    assert method == "GET"
    assert kwargs["timeout"] == 12
    assert kwargs["params"] == {"a": 1}
    assert kwargs["headers"] == {"User-Agent": "test", "Accept": "json"}


def test_non_2xx_raises(captured):
    captured(FakeResponse(status_code=404, text="missing"))
    with pytest.raises(ScrapingError, match="404"):
        HttpClient().get_text("https://x.test/page")


def test_status_check_can_be_skipped(captured):
    captured(FakeResponse(status_code=400, payload={"status": "FAILED"}))
    assert HttpClient().get_json("https://x.test/api", check_status=False) == {"status": "FAILED"}


def test_network_error_wrapped(captured):
    captured(requests.ConnectionError("refused"))
    with pytest.raises(ScrapingError, match="refused"):
        HttpClient().get_text("https://x.test/page")


def test_invalid_json_wrapped(captured):
    captured(FakeResponse(text="<html>"))
    with pytest.raises(ScrapingError, match="invalid JSON"):
        HttpClient().post_json("https://x.test/graphql", payload={"query": "{}"})
