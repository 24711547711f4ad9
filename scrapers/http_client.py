"""
HTTP Client Module
==================
Thin request wrapper shared by every platform scraper.

Each scraper instance receives its own HttpClient, so tests can hand in a
fake with the same get_json/get_text/post_json surface.
"""

import logging
from typing import Any, Dict, Optional

import requests

from scrapers.base_scraper import ScrapingError

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Stateless GET/POST helper built on requests.

    Holds only configuration (default headers, timeout); every call is an
    independent request, so one instance is safe to use from several threads.
    """

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = 30,
    ):
        self.headers = dict(headers or {})
        self.timeout = timeout

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        check_status: bool = True,
        **kwargs,
    ) -> requests.Response:
        merged = dict(self.headers)
        if headers:
            merged.update(headers)

        logger.debug(f"{method} {url}")
        try:
            response = requests.request(
                method,
                url,
                headers=merged,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise ScrapingError(f"Request to {url} failed: {e}")

        if check_status and not 200 <= response.status_code < 300:
            raise ScrapingError(f"{url} returned {response.status_code}")

        return response

    def get_json(self, url: str, params: Optional[Dict] = None,
                 headers: Optional[Dict[str, str]] = None,
                 check_status: bool = True) -> Any:
        response = self.request(
            "GET", url, headers=headers, check_status=check_status, params=params
        )
        return self._decode_json(response, url)

    def get_text(self, url: str, params: Optional[Dict] = None,
                 headers: Optional[Dict[str, str]] = None) -> str:
        response = self.request("GET", url, headers=headers, params=params)
        return response.text

    def post_json(self, url: str, payload: Optional[Dict] = None,
                  headers: Optional[Dict[str, str]] = None) -> Any:
        response = self.request("POST", url, headers=headers, json=payload)
        return self._decode_json(response, url)

    @staticmethod
    def _decode_json(response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ScrapingError(f"{url} returned invalid JSON: {e}")
