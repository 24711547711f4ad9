"""
Codeforces Scraper Module
=========================
Uses the public Codeforces REST API (user.info, user.rating, user.status).

Any non-"OK" API status is a hard failure: no partial stats are returned.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from scrapers.base_scraper import BaseScraper, ScrapingError
from utils.data_normalizer import PlatformId

logger = logging.getLogger(__name__)


@dataclass
class CodeforcesContest:
    contest_id: Optional[int]
    contest_name: str
    rank: Optional[int]
    old_rating: Optional[int]
    new_rating: Optional[int]
    rating_change: int
    date: Optional[str]


@dataclass
class CodeforcesSubmission:
    id: Optional[int]
    problem_name: str
    problem_index: str
    contest_id: Optional[int]
    verdict: str
    language: str
    timestamp: int
    rating: Optional[int]


@dataclass
class CodeforcesStats:
    username: str
    profile_url: str

    rating: Optional[int] = None
    max_rating: Optional[int] = None
    rank: Optional[str] = None
    max_rank: Optional[str] = None
    contribution: Optional[int] = None
    friend_of_count: Optional[int] = None

    contests_attended: int = 0
    problems_solved: int = 0

    contest_history: List[CodeforcesContest] = field(default_factory=list)
    difficulty_wise_solved: Dict[str, int] = field(default_factory=dict)
    tag_wise_solved: Dict[str, int] = field(default_factory=dict)
    verdict_stats: Dict[str, int] = field(default_factory=dict)
    recent_submissions: List[CodeforcesSubmission] = field(default_factory=list)
    languages: Dict[str, int] = field(default_factory=dict)


def solved_problem_key(problem: Dict[str, Any]) -> Optional[str]:
    """
    Dedup key for a solved problem: "<contestId>-<index>", else "name-<title>".
    Returns None when the problem cannot be identified.
    """
    if not isinstance(problem, dict):
        return None
    contest_id = problem.get('contestId')
    index = problem.get('index')
    if contest_id and index:
        return f"{contest_id}-{index}"
    if problem.get('name'):
        return f"name-{problem['name']}"
    return None


def summarize_submissions(submissions: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Single pass over user.status results.

    Verdict and language counts cover every submission; difficulty and tag
    counts come only from the first accepted submission of each problem.
    """
    solved = set()
    verdicts: Dict[str, int] = {}
    languages: Dict[str, int] = {}
    difficulties: Dict[str, int] = {}
    tags: Dict[str, int] = {}

    for sub in submissions:
        verdict = sub.get('verdict') or "UNKNOWN"
        verdicts[verdict] = verdicts.get(verdict, 0) + 1

        language = sub.get('programmingLanguage') or "Unknown"
        languages[language] = languages.get(language, 0) + 1

        if sub.get('verdict') != "OK":
            continue

        problem = sub.get('problem') or {}
        key = solved_problem_key(problem)
        if key is None or key in solved:
            continue
        solved.add(key)

        bucket = str(problem['rating']) if problem.get('rating') else "unrated"
        difficulties[bucket] = difficulties.get(bucket, 0) + 1

        for tag in problem.get('tags') or []:
            tags[tag] = tags.get(tag, 0) + 1

    return {
        'problems_solved': len(solved),
        'verdict_stats': verdicts,
        'languages': languages,
        'difficulty_wise_solved': difficulties,
        'tag_wise_solved': tags,
    }


def _epoch_to_date(seconds: Any) -> Optional[str]:
    if not seconds:
        return None
    try:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc).strftime('%Y-%m-%d')
    except (TypeError, ValueError, OverflowError, OSError):
        return None


class CodeforcesScraper(BaseScraper):
    """Scraper for Codeforces profiles via the official API."""

    platform = PlatformId.CODEFORCES

    def empty_stats(self, handle: str) -> CodeforcesStats:
        return CodeforcesStats(
            username=handle,
            profile_url=f"{self.url or 'https://codeforces.com'}/profile/{quote(handle)}",
        )

    def _api(self, method: str, params: Dict[str, Any]) -> Any:
        data = self.http.get_json(
            f"{self.api_url}/{method}", params=params, check_status=False
        )
        if not isinstance(data, dict) or data.get('status') != "OK":
            comment = data.get('comment') if isinstance(data, dict) else None
            raise ScrapingError(
                f"Codeforces API error [{method}]: {comment or 'Unknown Codeforces API error'}"
            )
        return data.get('result')

    def _populate(self, stats: CodeforcesStats, handle: str) -> None:
        users = self._api("user.info", {"handles": handle})
        rating_changes = self._api("user.rating", {"handle": handle}) or []
        submissions = self._api("user.status", {
            "handle": handle,
            "from": 1,
            "count": self.config.get('submission_count', 10000),
        }) or []

        user = users[0] if users else {}
        stats.rating = user.get('rating')
        stats.max_rating = user.get('maxRating')
        stats.rank = user.get('rank')
        stats.max_rank = user.get('maxRank')
        stats.contribution = user.get('contribution')
        stats.friend_of_count = user.get('friendOfCount')

        stats.contests_attended = len(rating_changes)
        stats.contest_history = [
            CodeforcesContest(
                contest_id=rc.get('contestId'),
                contest_name=rc.get('contestName') or "",
                rank=rc.get('rank'),
                old_rating=rc.get('oldRating'),
                new_rating=rc.get('newRating'),
                rating_change=(rc.get('newRating') or 0) - (rc.get('oldRating') or 0),
                date=_epoch_to_date(rc.get('ratingUpdateTimeSeconds')),
            )
            for rc in rating_changes
        ]

        summary = summarize_submissions(submissions)
        stats.problems_solved = summary['problems_solved']
        stats.verdict_stats = summary['verdict_stats']
        stats.languages = summary['languages']
        stats.difficulty_wise_solved = summary['difficulty_wise_solved']
        stats.tag_wise_solved = summary['tag_wise_solved']

        limit = self.config.get('recent_submissions', 20)
        stats.recent_submissions = [
            CodeforcesSubmission(
                id=sub.get('id'),
                problem_name=(sub.get('problem') or {}).get('name') or "Unknown",
                problem_index=(sub.get('problem') or {}).get('index') or "",
                contest_id=(sub.get('problem') or {}).get('contestId'),
                verdict=sub.get('verdict') or "UNKNOWN",
                language=sub.get('programmingLanguage') or "Unknown",
                timestamp=sub.get('creationTimeSeconds') or 0,
                rating=(sub.get('problem') or {}).get('rating'),
            )
            for sub in submissions[:limit]
        ]

        logger.info(
            f"Codeforces {handle}: {stats.problems_solved} solved, "
            f"{stats.contests_attended} contests"
        )
