"""
Shared fixtures: an in-memory HTTP client and a factory wired to it.
"""

import pytest
from urllib.parse import urlencode

from scrapers.base_scraper import ScraperFactory, ScrapingError
from utils.config import load_config


class FakeHttpClient:
    """
    Stands in for scrapers.http_client.HttpClient.

    routes maps a URL (optionally with "?query") to a payload, an exception
    to raise, or a callable taking the request params/payload.
    Unknown URLs raise ScrapingError like a 404 would.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def _respond(self, method, url, params=None, payload=None):
        self.calls.append((method, url, params, payload))
        keys = [url]
        if params:
            keys.insert(0, f"{url}?{urlencode(params)}")
        for key in keys:
            if key in self.routes:
                route = self.routes[key]
                break
        else:
            raise ScrapingError(f"{url} returned 404")

        if isinstance(route, Exception):
            raise route
        if callable(route):
            route = route(params if payload is None else payload)
            if isinstance(route, Exception):
                raise route
        return route

    def get_json(self, url, params=None, headers=None, check_status=True):
        return self._respond("GET", url, params=params)

    def get_text(self, url, params=None, headers=None):
        return self._respond("GET", url, params=params)

    def post_json(self, url, payload=None, headers=None):
        return self._respond("POST", url, payload=payload)

    def urls(self):
        return [call[1] for call in self.calls]


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("SCRAPER_CONFIG", raising=False)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def fake_http():
    return FakeHttpClient()


@pytest.fixture
def factory(config, fake_http):
    return ScraperFactory(config=config, http_client=fake_http)
