"""
Profile Aggregator Module
=========================
Fans a student's handles out to every platform scraper and collects the
normalized results.

A platform that fails is simply missing from the output; one failure never
affects the others, and the output always follows platform declaration order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Union

from scrapers.base_scraper import ScraperFactory
from utils.data_normalizer import PlatformId, PlatformStats, normalize_stats

logger = logging.getLogger(__name__)

PLATFORM_ORDER = [
    PlatformId.LEETCODE,
    PlatformId.CODECHEF,
    PlatformId.CODEFORCES,
    PlatformId.ATCODER,
    PlatformId.HACKERRANK,
    PlatformId.GITHUB,
]

CpHandles = Mapping[Union[str, PlatformId], Optional[str]]


def _handle_for(handles: CpHandles, platform: PlatformId) -> str:
    handle = handles.get(platform)
    if handle is None:
        handle = handles.get(platform.value)
    return (handle or "").strip()


class ProfileAggregator:
    """
    Runs scraper + mapper pairs for a set of handles.

    Holds only the factory (configuration); nothing carries over between calls.
    """

    def __init__(self, factory: Optional[ScraperFactory] = None, max_workers: int = len(PLATFORM_ORDER)):
        self.factory = factory or ScraperFactory()
        self.max_workers = max_workers

    def scrape_platform_for_user(self, platform: Union[str, PlatformId], handle: str) -> Optional[PlatformStats]:
        """
        Scrape and normalize one platform.

        Returns None instead of raising on any failure.
        """
        if not handle or not str(handle).strip():
            return None

        try:
            platform = PlatformId.parse(platform)
            result = self.factory.get_scraper(platform).scrape(handle)
            if not result.has_stats:
                logger.error(f"[SCRAPER] Failed platform={platform.value}, handle={handle}: {result.error}")
                return None
            return normalize_stats(platform, result.stats)
        except Exception as e:
            logger.error(f"[SCRAPER] Failed platform={platform}, handle={handle}: {e}")
            return None

    def scrape_all_platforms_for_user(self, handles: CpHandles) -> List[PlatformStats]:
        """
        Scrape every platform that has a handle, concurrently.

        Platforms without a handle, or disabled in config, get no job at all.
        Results keep platform declaration order, not completion order.
        """
        enabled = set(self.factory.available_platforms)
        jobs = [
            (platform, _handle_for(handles, platform))
            for platform in PLATFORM_ORDER
            if platform.value in enabled and _handle_for(handles, platform)
        ]

        if not jobs:
            logger.info("No CP handles provided, nothing to scrape.")
            return []

        with ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(jobs)))) as executor:
            futures = [
                executor.submit(self.scrape_platform_for_user, platform, handle)
                for platform, handle in jobs
            ]
        scraped = [future.result() for future in futures]

        results = [stats for stats in scraped if stats is not None]
        logger.info(f"Scraped {len(results)}/{len(jobs)} platforms")
        return results


# Convenience functions for one-off calls
def scrape_platform_for_user(platform: Union[str, PlatformId], handle: str,
                             factory: Optional[ScraperFactory] = None) -> Optional[PlatformStats]:
    """
    Usage:
        stats = scrape_platform_for_user("codeforces", "tourist")
    """
    try:
        aggregator = ProfileAggregator(factory)
    except Exception as e:
        logger.error(f"[SCRAPER] Could not initialise scrapers: {e}")
        return None
    return aggregator.scrape_platform_for_user(platform, handle)


def scrape_all_platforms_for_user(handles: CpHandles,
                                  factory: Optional[ScraperFactory] = None) -> List[PlatformStats]:
    """
    Usage:
        results = scrape_all_platforms_for_user({"leetcode": "a", "github": "b"})
    """
    try:
        aggregator = ProfileAggregator(factory)
    except Exception as e:
        logger.error(f"[SCRAPER] Could not initialise scrapers: {e}")
        return []
    return aggregator.scrape_all_platforms_for_user(handles)


def stats_to_dicts(results: List[PlatformStats]) -> List[Dict[str, Any]]:
    return [stats.to_dict() for stats in results]
