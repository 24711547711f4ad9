# Scrapers Package
"""
Profile scrapers for competitive-programming and developer platforms.

Available scrapers:
- BaseScraper: Abstract base class with the ok/skeleton/error result policy
- LeetCodeScraper, CodeChefScraper, CodeforcesScraper,
  AtcoderScraper, HackerRankScraper, GitHubScraper
- ProfileAggregator: Concurrent fan-out over all platforms
"""

from scrapers.base_scraper import (
    BaseScraper,
    InvalidHandleError,
    ScraperFactory,
    ScrapeResult,
    ScrapeStatus,
    ScrapingError,
)
from scrapers.aggregator import (
    ProfileAggregator,
    scrape_all_platforms_for_user,
    scrape_platform_for_user,
)
