"""
CodeSync - Coding Profile Aggregator
====================================
Main entry point for the profile scraping pipeline.

Usage:
    python main.py scrape --leetcode alice --codeforces tourist   # Scrape several platforms
    python main.py platform atcoder chokudai                     # Scrape a single platform
    python main.py list                                          # List configured platforms
    python main.py serve                                         # Start the HTTP API
"""

import argparse
import sys
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from utils.config import get_log_level

# Setup logging
logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


class CodeSync:
    """
    Main application class for CodeSync.
    Wires configuration into the aggregator and formats results.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.factory = None
        self.aggregator = None
        self._initialize()

    def _initialize(self):
        """Initialize components."""
        from scrapers.base_scraper import ScraperFactory
        from scrapers.aggregator import ProfileAggregator

        self.factory = ScraperFactory(config_path=self.config_path)
        self.aggregator = ProfileAggregator(self.factory)

        logger.debug("CodeSync initialized")

    def scrape_all(self, handles: Dict[str, Optional[str]]) -> List:
        """
        Scrape every platform that has a handle.

        Returns:
            List of PlatformStats in platform order
        """
        results = self.aggregator.scrape_all_platforms_for_user(handles)

        requested = sum(1 for h in handles.values() if h and h.strip())
        logger.info(f"Scraping complete: {len(results)}/{requested} platforms")
        return results

    def scrape_platform(self, platform: str, handle: str):
        """
        Scrape one platform.

        Returns:
            PlatformStats, or None when the scrape failed
        """
        stats = self.aggregator.scrape_platform_for_user(platform, handle)
        if stats is None:
            logger.error(f"✗ {platform}: no profile for {handle}")
        else:
            logger.info(f"✓ {platform}: {stats.username}")
        return stats


def print_stats(stats) -> None:
    print(f"\n  [{stats.platform}] {stats.username}")
    print(f"    🔗 {stats.profile_url}")
    if stats.rating is not None:
        print(f"    📈 Rating: {stats.rating}" + (f" (max {stats.max_rating})" if stats.max_rating else ""))
    if stats.problems_solved is not None:
        print(f"    ✅ Solved: {stats.problems_solved}")
    if stats.contests_participated:
        print(f"    🏆 Contests: {stats.contests_participated}")
    if stats.public_repos is not None:
        print(f"    📦 Repos: {stats.public_repos}, ⭐ {stats.total_stars or 0}")
    if stats.contributions_last_year:
        print(f"    🟩 Contributions: {stats.contributions_last_year} (streak {stats.current_streak})")


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    from utils.data_normalizer import PlatformId

    parser = argparse.ArgumentParser(
        description="CodeSync - Coding Profile Aggregator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py scrape --leetcode alice --github alice --json
    python main.py platform codeforces tourist
    python main.py list
    python main.py serve --port 8080
        """
    )
    parser.add_argument('--config', '-c', help='Path to an alternate platforms.json')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Scrape command
    scrape_parser = subparsers.add_parser('scrape', help='Scrape all platforms with a handle')
    for platform in PlatformId:
        scrape_parser.add_argument(f'--{platform.value}', metavar='HANDLE', help=f'{platform.value} handle')
    scrape_parser.add_argument('--json', action='store_true', help='Output as JSON')

    # Platform command
    platform_parser = subparsers.add_parser('platform', help='Scrape a single platform')
    platform_parser.add_argument('platform', choices=[p.value for p in PlatformId], help='Platform id')
    platform_parser.add_argument('handle', help='Username on that platform')
    platform_parser.add_argument('--json', action='store_true', help='Output as JSON')

    # List command
    subparsers.add_parser('list', help='List configured platforms')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start the HTTP API')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Bind address')
    serve_parser.add_argument('--port', type=int, default=8000, help='Port')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == 'serve':
        from server import run
        run(host=args.host, port=args.port)
        return 0

    # Initialize
    app = CodeSync(args.config)

    # Execute command
    if args.command == 'scrape':
        handles = {p.value: getattr(args, p.value) for p in PlatformId}
        results = app.scrape_all(handles)

        if args.json:
            print(json.dumps([s.to_dict() for s in results], indent=2))
        else:
            print(f"\nScraped {len(results)} platform(s):")
            for stats in results:
                print_stats(stats)
            print()

    elif args.command == 'platform':
        stats = app.scrape_platform(args.platform, args.handle)
        if stats is None:
            return 1
        if args.json:
            print(json.dumps(stats.to_dict(), indent=2))
        else:
            print_stats(stats)
            print()

    elif args.command == 'list':
        print("\n📋 Configured platforms:")
        for key in app.factory.available_platforms:
            config = app.factory.config['platforms'][key]
            mode = "soft" if config.get('soft_fail') else "hard"
            print(f"  • {key}: {config.get('name', key)} [{mode} failure, {config.get('timeout', 30)}s]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
