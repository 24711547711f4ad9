"""
Base Scraper Module
===================
Abstract base class shared by every platform profile scraper.

Every scraper follows the same life cycle per call:
1. Clean (and optionally validate) the handle
2. Build an empty raw-stats skeleton for that handle
3. Populate the skeleton from the platform's endpoints
4. Report the outcome as a ScrapeResult (ok / skeleton / error)

Whether an upstream failure is an error or a skeleton is a per-platform
setting ("soft_fail" in utils/platforms.json), not something callers need
to know about each site.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from utils.config import get_log_level, load_config
from utils.data_normalizer import PlatformId

# Set up logging
logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ScrapingError(Exception):
    """Custom exception for scraping errors."""
    pass


class InvalidHandleError(ScrapingError):
    """Raised before any network call when a handle is empty."""
    pass


class ScrapeStatus(Enum):
    OK = "ok"
    SKELETON = "skeleton"
    ERROR = "error"


@dataclass
class ScrapeResult:
    """
    Outcome of one scraper call.

    stats is populated for OK and SKELETON results (a skeleton holds whatever
    was gathered before the failure), and is None for ERROR.
    """
    platform: PlatformId
    handle: str
    status: ScrapeStatus
    stats: Optional[Any] = None
    error: Optional[Exception] = None

    @property
    def has_stats(self) -> bool:
        return self.stats is not None and self.status != ScrapeStatus.ERROR

    def unwrap(self) -> Any:
        """Return the raw stats, re-raising the error of a failed scrape."""
        if self.status == ScrapeStatus.ERROR:
            raise self.error
        return self.stats


class BaseScraper(ABC):
    """
    Abstract base class for all platform scrapers.

    Each child class just needs to implement:
    - empty_stats(): the default-populated raw stats for a handle
    - _populate(): fill those stats from the platform

    The base class handles:
    - Handle cleaning and validation
    - Hard/soft failure policy
    - Best-effort secondary fetches
    - Parallel fan-out of independent requests
    """

    platform: PlatformId = None

    def __init__(
        self,
        platform_config: Optional[Dict] = None,
        http_client: Optional[Any] = None,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the scraper.

        Args:
            platform_config: Configuration dict for this platform
            http_client: Object with get_json/get_text/post_json (optional)
            default_headers: Headers shared by every platform (optional)
        """
        self.config = platform_config or {}
        self.name = self.config.get('name', self.platform.value if self.platform else 'Unknown')
        self.url = self.config.get('url', '').rstrip('/')
        self.api_url = self.config.get('api_url', '').rstrip('/')
        self.validate_handle = bool(self.config.get('validate_handle', False))
        self.soft_fail = bool(self.config.get('soft_fail', False))

        if http_client is None:
            from scrapers.http_client import HttpClient
            headers = dict(default_headers or {})
            headers.update(self.config.get('headers', {}))
            http_client = HttpClient(headers=headers, timeout=self.config.get('timeout', 30))
        self.http = http_client

        logger.debug(f"Initialized scraper for {self.name}")

    def scrape(self, handle: str) -> ScrapeResult:
        """
        Scrape one handle and report the outcome.

        Never raises: validation failures and hard upstream failures come
        back as ERROR results, soft failures as SKELETON results.
        """
        try:
            handle = self._clean_handle(handle)
        except InvalidHandleError as e:
            return ScrapeResult(self.platform, handle or "", ScrapeStatus.ERROR, error=e)

        stats = self.empty_stats(handle)
        try:
            self._populate(stats, handle)
        except Exception as e:
            if self.soft_fail:
                logger.error(f"[{self.name}] Scrape failed for {handle}, returning partial stats: {e}")
                return ScrapeResult(self.platform, handle, ScrapeStatus.SKELETON, stats=stats, error=e)
            logger.warning(f"[{self.name}] Scrape failed for {handle}: {e}")
            return ScrapeResult(self.platform, handle, ScrapeStatus.ERROR, error=e)

        return ScrapeResult(self.platform, handle, ScrapeStatus.OK, stats=stats)

    def fetch_stats(self, handle: str) -> Any:
        """
        Return raw stats for a handle.

        Raises for invalid handles and, on hard-failing platforms, for
        upstream failures. Soft-failing platforms always return stats.
        """
        return self.scrape(handle).unwrap()

    def _clean_handle(self, handle: Optional[str]) -> str:
        handle = (handle or "").strip()
        if self.validate_handle and not handle:
            raise InvalidHandleError(f"{self.name}: username is required")
        return handle

    def _best_effort(self, label: str, func: Callable, default: Any = None, *args, **kwargs) -> Any:
        """
        Run a secondary fetch; on any failure log it and return default.
        """
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.warning(f"[{self.name}] {label} unavailable: {e}")
            return default

    def _run_parallel(self, calls: List[Callable[[], Any]]) -> List[Any]:
        """
        Run independent calls concurrently and return results in call order.
        The first failing call (in order) re-raises once all calls finish.
        """
        if not calls:
            return []
        with ThreadPoolExecutor(max_workers=len(calls)) as executor:
            futures = [executor.submit(call) for call in calls]
        return [future.result() for future in futures]

    # ============ Abstract Methods (Child classes must implement) ============

    @abstractmethod
    def empty_stats(self, handle: str) -> Any:
        """
        Build the all-default raw stats for a handle.

        The skeleton already carries username and profile URL.
        """
        pass

    @abstractmethod
    def _populate(self, stats: Any, handle: str) -> None:
        """
        Fill stats in place from the platform.

        Raises:
            ScrapingError: If the platform's primary data is unavailable
        """
        pass


class ScraperFactory:
    """
    Factory for creating platform scraper instances.

    Usage:
        factory = ScraperFactory()
        scraper = factory.get_scraper("codeforces")
        result = scraper.scrape("tourist")
    """

    def __init__(self, config: Optional[Dict] = None, config_path: Optional[str] = None,
                 http_client: Optional[Any] = None):
        """
        Load configuration.

        Args:
            config: Already-loaded configuration dict (skips the file)
            config_path: Path to platforms.json
            http_client: Client shared by every scraper built here (optional)
        """
        self.config = config if config is not None else load_config(config_path)
        self.http_client = http_client

    def get_scraper(self, platform: Union[str, PlatformId],
                    http_client: Optional[Any] = None) -> BaseScraper:
        """
        Create a scraper for a specific platform.

        Args:
            platform: PlatformId or its value (e.g. "leetcode")
            http_client: Overrides the factory-wide client

        Returns:
            Appropriate scraper instance
        """
        platform = PlatformId.parse(platform)
        platform_config = self.config.get('platforms', {}).get(platform.value)
        if platform_config is None:
            raise ValueError(f"Unknown platform: {platform.value}")
        if not platform_config.get('enabled', True):
            raise ValueError(f"Platform disabled: {platform.value}")

        client = http_client or self.http_client
        default_headers = self.config.get('default_headers', {})

        if platform == PlatformId.LEETCODE:
            from scrapers.leetcode_scraper import LeetCodeScraper
            scraper_cls = LeetCodeScraper
        elif platform == PlatformId.CODECHEF:
            from scrapers.codechef_scraper import CodeChefScraper
            scraper_cls = CodeChefScraper
        elif platform == PlatformId.CODEFORCES:
            from scrapers.codeforces_scraper import CodeforcesScraper
            scraper_cls = CodeforcesScraper
        elif platform == PlatformId.ATCODER:
            from scrapers.atcoder_scraper import AtcoderScraper
            scraper_cls = AtcoderScraper
        elif platform == PlatformId.HACKERRANK:
            from scrapers.hackerrank_scraper import HackerRankScraper
            scraper_cls = HackerRankScraper
        else:
            from scrapers.github_scraper import GitHubScraper
            scraper_cls = GitHubScraper

        return scraper_cls(platform_config, client, default_headers)

    @property
    def available_platforms(self) -> List[str]:
        """Configured and enabled platform ids, in aggregation order."""
        configured = self.config.get('platforms', {})
        return [
            p.value for p in PlatformId
            if p.value in configured and configured[p.value].get('enabled', True)
        ]
