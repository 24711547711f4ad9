"""
HackerRank Scraper Module
=========================
Uses the public REST endpoints under /rest/hackers/<handle>/.

All five endpoints are requested together and every one of them is optional:
an endpoint that fails leaves its fields at their defaults.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from scrapers.base_scraper import BaseScraper
from utils.data_normalizer import PlatformId, round_half_up, safe_int, safe_number

logger = logging.getLogger(__name__)

ENDPOINTS = ('profile', 'badges', 'certificates', 'scores', 'contest_participation')


@dataclass
class HackerRankBadge:
    name: str
    level: Optional[Any] = None


@dataclass
class HackerRankCertificate:
    name: str
    status: Optional[str] = None


@dataclass
class HackerRankDomain:
    domain: str
    solved: int
    total: Optional[int]
    score: float
    solved_estimated: bool = False


@dataclass
class HackerRankContest:
    contest_name: str
    contest_slug: str
    rank: Optional[int]
    score: Optional[float]
    date: Optional[str]


@dataclass
class HackerRankStats:
    username: str
    profile_url: str

    full_name: Optional[str] = None
    country: Optional[str] = None
    problems_solved: int = 0
    contests_participated: int = 0

    badges: List[HackerRankBadge] = field(default_factory=list)
    badges_count: int = 0
    certificates: List[HackerRankCertificate] = field(default_factory=list)
    certificates_count: int = 0

    domain_wise_solved: List[HackerRankDomain] = field(default_factory=list)
    domains: Dict[str, float] = field(default_factory=dict)
    contest_history: List[HackerRankContest] = field(default_factory=list)


def domain_from_score(entry: Dict[str, Any]) -> Optional[HackerRankDomain]:
    """
    Build a domain record from one /scores model.

    When the response carries no solved count, solved is approximated as
    round(score / 10) and flagged with solved_estimated.
    """
    name = entry.get('domain') or entry.get('name')
    if not name:
        return None
    score = safe_number(entry.get('score'), 0)
    solved = safe_int(entry.get('solved') or entry.get('challenges_solved'), 0)
    estimated = not solved
    if estimated:
        solved = int(round_half_up(score / 10))
    return HackerRankDomain(
        domain=name,
        solved=solved,
        total=safe_int(entry.get('total_challenges')) or None,
        score=score,
        solved_estimated=estimated,
    )


def _models(payload: Any, key: str = 'models') -> Any:
    if isinstance(payload, dict):
        return payload.get(key)
    return None


class HackerRankScraper(BaseScraper):
    """Scraper for HackerRank profiles via REST."""

    platform = PlatformId.HACKERRANK

    def empty_stats(self, handle: str) -> HackerRankStats:
        return HackerRankStats(
            username=handle,
            profile_url=f"{self.url or 'https://www.hackerrank.com'}/profile/{handle}",
        )

    def _endpoint(self, handle: str, name: str):
        url = f"{self.api_url}/{quote(handle)}/{name}"
        return lambda: self._best_effort(name, self.http.get_json, None, url)

    def _populate(self, stats: HackerRankStats, handle: str) -> None:
        profile, badges, certificates, scores, contests = self._run_parallel(
            [self._endpoint(handle, name) for name in ENDPOINTS]
        )

        model = _models(profile, 'model')
        if isinstance(model, dict):
            stats.full_name = model.get('name')
            stats.country = model.get('country')
            stats.problems_solved = safe_int(model.get('solved_challenges'), 0)
            stats.contests_participated = safe_int(model.get('contests'), 0)

        raw_badges = _models(badges)
        if isinstance(raw_badges, list):
            stats.badges = [
                HackerRankBadge(
                    name=b.get('badge_name') or b.get('name') or "Unknown",
                    level=b.get('star_level') if b.get('star_level') is not None else b.get('level'),
                )
                for b in raw_badges if isinstance(b, dict)
            ]
            stats.badges_count = len(stats.badges)

        raw_certificates = _models(certificates)
        if isinstance(raw_certificates, list):
            stats.certificates = [
                HackerRankCertificate(
                    name=(c.get('certificate') or {}).get('label') or c.get('name') or "Unknown",
                    status=c.get('status'),
                )
                for c in raw_certificates if isinstance(c, dict)
            ]
            stats.certificates_count = len(raw_certificates)

        raw_scores = _models(scores)
        if isinstance(raw_scores, list):
            for entry in raw_scores:
                domain = domain_from_score(entry) if isinstance(entry, dict) else None
                if domain:
                    stats.domains[domain.domain] = domain.score
                    stats.domain_wise_solved.append(domain)

        raw_contests = _models(contests)
        if isinstance(raw_contests, list):
            stats.contest_history = [
                HackerRankContest(
                    contest_name=c.get('contest_name') or c.get('name') or "Unknown Contest",
                    contest_slug=c.get('contest_slug') or c.get('slug') or "",
                    rank=safe_int(c.get('rank')) or None,
                    score=safe_number(c.get('score')) or None,
                    date=c.get('ended_at') or c.get('date'),
                )
                for c in raw_contests if isinstance(c, dict)
            ]
            stats.contests_participated = max(stats.contests_participated, len(stats.contest_history))

        logger.info(
            f"HackerRank {handle}: {stats.problems_solved} solved, {stats.badges_count} badges"
        )
