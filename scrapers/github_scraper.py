"""
GitHub Scraper Module
=====================
Combines three sources:
- REST API: profile and public repositories (token optional)
- Public contribution calendar HTML: daily counts, streaks, monthly totals
- GraphQL API: pinned repositories, only when GITHUB_TOKEN is set

Contributions and pinned repositories are best effort; neither can fail the
profile scrape.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional
from urllib.parse import quote

from bs4 import BeautifulSoup

from scrapers.base_scraper import BaseScraper, ScrapingError
from utils.config import get_github_token
from utils.data_normalizer import PlatformId, safe_int

logger = logging.getLogger(__name__)

PINNED_QUERY = """
query($username: String!, $first: Int!) {
  user(login: $username) {
    pinnedItems(first: $first, types: REPOSITORY) {
      nodes {
        ... on Repository {
          name
          description
          url
          primaryLanguage { name }
          stargazerCount
          forkCount
        }
      }
    }
  }
}
"""


@dataclass
class PinnedRepository:
    name: str
    description: Optional[str]
    url: str
    language: Optional[str]
    stars: int
    forks: int


@dataclass
class ContributionDay:
    date: str
    count: int
    weekday: int  # 0 = Sunday


@dataclass
class MonthlyContribution:
    month: str  # "2025-01"
    total: int


@dataclass
class ContributionSummary:
    contributions_last_year: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    contribution_heatmap: List[ContributionDay] = field(default_factory=list)
    monthly_contributions: List[MonthlyContribution] = field(default_factory=list)


@dataclass
class GitHubStats:
    username: str
    profile_url: str

    name: Optional[str] = None
    total_stars: int = 0
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    top_languages: Dict[str, int] = field(default_factory=dict)

    contributions_last_year: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    pinned_repositories: List[PinnedRepository] = field(default_factory=list)
    contribution_heatmap: List[ContributionDay] = field(default_factory=list)
    monthly_contributions: List[MonthlyContribution] = field(default_factory=list)


def parse_contribution_days(html: str) -> List[ContributionDay]:
    """Read data-date/data-count pairs off the rendered contribution calendar."""
    soup = BeautifulSoup(html or "", 'html.parser')
    days = []
    for cell in soup.find_all(attrs={'data-date': True, 'data-count': True}):
        try:
            day = date.fromisoformat(cell['data-date'])
        except ValueError:
            continue
        days.append(ContributionDay(
            date=day.isoformat(),
            count=safe_int(cell['data-count'], 0),
            weekday=(day.weekday() + 1) % 7,
        ))
    return days


def summarize_contributions(days: List[ContributionDay]) -> ContributionSummary:
    """
    One forward pass over date-sorted days.

    A streak is a run of non-zero days on consecutive dates; the current
    streak is the run still open at the last day.
    """
    days = sorted(days, key=lambda d: d.date)
    summary = ContributionSummary(contribution_heatmap=days)

    monthly: Dict[str, int] = {}
    running = 0
    previous: Optional[date] = None

    for day in days:
        summary.contributions_last_year += day.count
        month = day.date[:7]
        monthly[month] = monthly.get(month, 0) + day.count

        current = date.fromisoformat(day.date)
        if day.count > 0:
            if previous is not None and (current - previous).days == 1:
                running += 1
            else:
                running = 1
            summary.longest_streak = max(summary.longest_streak, running)
        else:
            running = 0
        previous = current

    summary.current_streak = running
    summary.monthly_contributions = [
        MonthlyContribution(month=month, total=total)
        for month, total in sorted(monthly.items())
    ]
    return summary


class GitHubScraper(BaseScraper):
    """Scraper for GitHub profiles."""

    platform = PlatformId.GITHUB

    def __init__(self, platform_config=None, http_client=None, default_headers=None,
                 token: Optional[str] = None):
        super().__init__(platform_config, http_client, default_headers)
        self.token = token if token is not None else get_github_token()

    def empty_stats(self, handle: str) -> GitHubStats:
        return GitHubStats(
            username=handle,
            profile_url=f"{self.url or 'https://github.com'}/{quote(handle)}",
        )

    def _api_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": "CodeSync-SDR/1.0", "Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _populate(self, stats: GitHubStats, handle: str) -> None:
        user_url = f"{self.api_url}/users/{quote(handle)}"

        profile, repos, contributions, pinned = self._run_parallel([
            lambda: self.http.get_json(user_url, headers=self._api_headers()),
            lambda: self.http.get_json(
                f"{user_url}/repos",
                params={
                    "per_page": self.config.get('repos_per_page', 100),
                    "sort": "updated",
                    "direction": "desc",
                },
                headers=self._api_headers(),
            ),
            lambda: self._best_effort(
                "contributions", self.fetch_contributions, ContributionSummary(), handle
            ),
            lambda: self._best_effort("pinned repositories", self.fetch_pinned, [], handle),
        ])

        if not isinstance(profile, dict):
            raise ScrapingError(f"GitHub profile for {handle} is not an object")
        stats.name = profile.get('name')
        stats.public_repos = safe_int(profile.get('public_repos'), 0)
        stats.followers = safe_int(profile.get('followers'), 0)
        stats.following = safe_int(profile.get('following'), 0)

        for repo in repos if isinstance(repos, list) else []:
            stats.total_stars += safe_int(repo.get('stargazers_count'), 0)
            language = repo.get('language')
            if language:
                stats.top_languages[language] = stats.top_languages.get(language, 0) + 1

        stats.contributions_last_year = contributions.contributions_last_year
        stats.current_streak = contributions.current_streak
        stats.longest_streak = contributions.longest_streak
        stats.contribution_heatmap = contributions.contribution_heatmap
        stats.monthly_contributions = contributions.monthly_contributions
        stats.pinned_repositories = pinned

        logger.info(
            f"GitHub {handle}: {stats.public_repos} repos, "
            f"{stats.contributions_last_year} contributions"
        )

    def fetch_contributions(self, handle: str) -> ContributionSummary:
        html = self.http.get_text(
            f"{self.url}/users/{quote(handle)}/contributions",
            headers={"Referer": f"{self.url}/{quote(handle)}"},
        )
        return summarize_contributions(parse_contribution_days(html))

    def fetch_pinned(self, handle: str) -> List[PinnedRepository]:
        if not self.token:
            logger.info("[GitHub] GITHUB_TOKEN not set, skipping pinned repositories")
            return []

        data = self.http.post_json(
            self.config.get('graphql_url', f"{self.api_url}/graphql"),
            payload={
                "query": PINNED_QUERY,
                "variables": {"username": handle, "first": self.config.get('pinned_limit', 6)},
            },
            headers=self._api_headers(),
        )
        nodes = (((data or {}).get('data') or {}).get('user') or {}).get('pinnedItems') or {}
        return [
            PinnedRepository(
                name=repo.get('name') or "",
                description=repo.get('description'),
                url=repo.get('url') or "",
                language=(repo.get('primaryLanguage') or {}).get('name'),
                stars=safe_int(repo.get('stargazerCount'), 0),
                forks=safe_int(repo.get('forkCount'), 0),
            )
            for repo in nodes.get('nodes') or [] if repo
        ]
