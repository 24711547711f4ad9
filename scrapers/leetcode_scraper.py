"""
LeetCode Scraper Module
=======================
Queries the public LeetCode GraphQL endpoint.

The solved-count query is mandatory; profile, languages, contest, topics,
recent submissions and acceptance are optional and run alongside it. An
optional query that fails simply contributes nothing.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from scrapers.base_scraper import BaseScraper, ScrapingError
from utils.data_normalizer import PlatformId, round_half_up, safe_int, safe_number

logger = logging.getLogger(__name__)


PROFILE_QUERY = """
query profile($username: String!) {
  matchedUser(username: $username) {
    badges { id }
    userCalendar { streak activeYears }
  }
}
"""

STATS_QUERY = """
query stats($username: String!) {
  matchedUser(username: $username) {
    submitStatsGlobal {
      acSubmissionNum { difficulty count }
    }
  }
}
"""

LANGUAGES_QUERY = """
query langs($username: String!) {
  matchedUser(username: $username) {
    languageProblemCount { languageName problemsSolved }
  }
}
"""

CONTEST_QUERY = """
query contest($username: String!) {
  userContestRanking(username: $username) {
    rating
    globalRanking
    attendedContestsCount
    topPercentage
  }
  userContestRankingHistory(username: $username) {
    attended
    contest { title startTime }
    ranking
    rating
    problemsSolved
    totalProblems
  }
}
"""

TOPICS_QUERY = """
query topicStats($username: String!) {
  matchedUser(username: $username) {
    tagProblemCounts {
      advanced { tagName tagSlug problemsSolved }
      intermediate { tagName tagSlug problemsSolved }
      fundamental { tagName tagSlug problemsSolved }
    }
  }
}
"""

SUBMISSIONS_QUERY = """
query recentSubmissions($username: String!, $limit: Int!) {
  recentAcSubmissionList(username: $username, limit: $limit) {
    title
    titleSlug
    timestamp
    statusDisplay
    lang
  }
}
"""

ACCEPTANCE_QUERY = """
query acceptance($username: String!) {
  matchedUser(username: $username) {
    submitStats {
      acSubmissionNum { difficulty count submissions }
      totalSubmissionNum { difficulty count submissions }
    }
  }
}
"""

TOPIC_CATEGORIES = ('advanced', 'intermediate', 'fundamental')


@dataclass
class LeetCodeContest:
    contest_name: str
    contest_date: str
    rank: int
    rating: int
    rating_change: int
    problems_solved: int
    total_problems: int


@dataclass
class LeetCodeSubmission:
    title: str
    title_slug: str
    timestamp: int
    status_display: str
    lang: str


@dataclass
class TopicProblemCount:
    tag_name: str
    tag_slug: str
    problems_solved: int


@dataclass
class LeetCodeStats:
    username: str
    profile_url: str

    total_solved: int = 0
    solved_easy: int = 0
    solved_medium: int = 0
    solved_hard: int = 0

    streak: int = 0
    acceptance_rate: float = 0
    topic_wise_problem_counts: List[TopicProblemCount] = field(default_factory=list)

    contest_rating: Optional[float] = None
    global_ranking: Optional[int] = None
    attended_contests: Optional[int] = None
    top_percentage: Optional[float] = None
    contest_history: List[LeetCodeContest] = field(default_factory=list)

    recent_submissions: List[LeetCodeSubmission] = field(default_factory=list)
    languages: Dict[str, int] = field(default_factory=dict)
    badges: int = 0


def rating_changes(ratings: List[int]) -> List[int]:
    """Running difference of ratings; the first contest has no baseline, so 0."""
    return [0 if i == 0 else rating - ratings[i - 1] for i, rating in enumerate(ratings)]


def acceptance_rate(accepted: Any, submitted: Any) -> float:
    """Accepted/submitted as a percentage with two decimals, 0 when nothing was submitted."""
    accepted = safe_number(accepted, 0)
    submitted = safe_number(submitted, 0)
    if submitted <= 0:
        return 0
    return round_half_up(accepted / submitted * 100, 2)


def _dicts(items: Any) -> List[Dict]:
    """Dict entries of a list response; null entries and other shapes are dropped."""
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _count_for(entries: Any, difficulty: str, key: str = 'count') -> int:
    for entry in _dicts(entries):
        if entry.get('difficulty') == difficulty:
            return safe_int(entry.get(key), 0)
    return 0


class LeetCodeScraper(BaseScraper):
    """Scraper for LeetCode profiles via GraphQL."""

    platform = PlatformId.LEETCODE

    def empty_stats(self, handle: str) -> LeetCodeStats:
        return LeetCodeStats(
            username=handle,
            profile_url=f"{self.url or 'https://leetcode.com'}/u/{handle}/",
        )

    def _query(self, operation: str, variables: Dict[str, Any], query: str) -> Dict:
        data = self.http.post_json(
            self.api_url,
            payload={"operationName": operation, "variables": variables, "query": query},
            headers={"Referer": f"{self.url}/u/{variables.get('username')}/"},
        )
        if not isinstance(data, dict):
            raise ScrapingError(f"LeetCode {operation}: unexpected response")
        if data.get('errors'):
            raise ScrapingError(
                "; ".join(str(e.get('message', e)) for e in data['errors'] if e)
            )
        return data.get('data') or {}

    def _optional(self, label: str, operation: str, variables: Dict, query: str):
        return lambda: self._best_effort(
            label, self._query, None, operation, variables, query
        )

    def _populate(self, stats: LeetCodeStats, handle: str) -> None:
        variables = {"username": handle}
        limit = self.config.get('recent_submissions', 20)

        stats_data, profile, langs, contest, topics, submissions, acceptance = self._run_parallel([
            lambda: self._query("stats", variables, STATS_QUERY),
            self._optional("profile", "profile", variables, PROFILE_QUERY),
            self._optional("languages", "langs", variables, LANGUAGES_QUERY),
            self._optional("contest history", "contest", variables, CONTEST_QUERY),
            self._optional("topic counts", "topicStats", variables, TOPICS_QUERY),
            self._optional(
                "recent submissions", "recentSubmissions",
                {"username": handle, "limit": limit}, SUBMISSIONS_QUERY,
            ),
            self._optional("acceptance", "acceptance", variables, ACCEPTANCE_QUERY),
        ])

        # Solved counts (mandatory)
        matched = stats_data.get('matchedUser')
        if not isinstance(matched, dict):
            raise ScrapingError(f"LeetCode user {handle} not found")
        solved = (matched.get('submitStatsGlobal') or {}).get('acSubmissionNum') or []
        stats.solved_easy = _count_for(solved, "Easy")
        stats.solved_medium = _count_for(solved, "Medium")
        stats.solved_hard = _count_for(solved, "Hard")
        stats.total_solved = stats.solved_easy + stats.solved_medium + stats.solved_hard

        # Optional sections: a malformed response only loses its own fields
        for label, apply, data in (
            ("profile", self._apply_profile, profile),
            ("languages", self._apply_languages, langs),
            ("contest history", self._apply_contest, contest),
            ("topic counts", self._apply_topics, topics),
            ("recent submissions", self._apply_submissions, submissions),
            ("acceptance", self._apply_acceptance, acceptance),
        ):
            if data:
                self._best_effort(f"{label} parsing", apply, None, stats, data)

        logger.info(f"LeetCode {handle}: {stats.total_solved} solved")

    @staticmethod
    def _apply_profile(stats: LeetCodeStats, data: Dict) -> None:
        user = data.get('matchedUser') or {}
        calendar = user.get('userCalendar') or {}
        streak = safe_int(calendar.get('streak'), 0) if isinstance(calendar, dict) else 0
        badges = user.get('badges')
        stats.streak = streak
        stats.badges = len(badges) if isinstance(badges, list) else 0

    @staticmethod
    def _apply_languages(stats: LeetCodeStats, data: Dict) -> None:
        languages = {}
        for lang in _dicts((data.get('matchedUser') or {}).get('languageProblemCount')):
            if lang.get('languageName'):
                languages[str(lang['languageName'])] = safe_int(lang.get('problemsSolved'), 0)
        stats.languages = languages

    @staticmethod
    def _apply_topics(stats: LeetCodeStats, data: Dict) -> None:
        tag_counts = (data.get('matchedUser') or {}).get('tagProblemCounts') or {}
        if not isinstance(tag_counts, dict):
            return
        stats.topic_wise_problem_counts = [
            TopicProblemCount(
                tag_name=tag.get('tagName') or "",
                tag_slug=tag.get('tagSlug') or "",
                problems_solved=safe_int(tag.get('problemsSolved'), 0),
            )
            for category in TOPIC_CATEGORIES
            for tag in _dicts(tag_counts.get(category))
        ]

    @staticmethod
    def _apply_submissions(stats: LeetCodeStats, data: Dict) -> None:
        stats.recent_submissions = [
            LeetCodeSubmission(
                title=s.get('title') or "",
                title_slug=s.get('titleSlug') or "",
                timestamp=safe_int(s.get('timestamp'), 0),
                status_display=s.get('statusDisplay') or "",
                lang=s.get('lang') or "",
            )
            for s in _dicts(data.get('recentAcSubmissionList'))
        ]

    @staticmethod
    def _apply_acceptance(stats: LeetCodeStats, data: Dict) -> None:
        submit_stats = (data.get('matchedUser') or {}).get('submitStats') or {}
        stats.acceptance_rate = acceptance_rate(
            _count_for(submit_stats.get('acSubmissionNum'), "All", 'submissions'),
            _count_for(submit_stats.get('totalSubmissionNum'), "All", 'submissions'),
        )

    @staticmethod
    def _apply_contest(stats: LeetCodeStats, data: Dict) -> None:
        ranking = data.get('userContestRanking') or {}
        if not isinstance(ranking, dict):
            ranking = {}

        attended = [h for h in _dicts(data.get('userContestRankingHistory')) if h.get('attended')]
        attended.sort(key=lambda h: safe_int((h.get('contest') or {}).get('startTime'), 0))
        ratings = [int(round_half_up(safe_number(h.get('rating'), 0))) for h in attended]

        history = []
        for entry, rating, change in zip(attended, ratings, rating_changes(ratings)):
            info = entry.get('contest') or {}
            start = safe_int(info.get('startTime'))
            history.append(LeetCodeContest(
                contest_name=info.get('title') or "Unknown",
                contest_date=(
                    datetime.fromtimestamp(start, tz=timezone.utc).strftime('%Y-%m-%d')
                    if start else ""
                ),
                rank=safe_int(entry.get('ranking'), 0),
                rating=rating,
                rating_change=change,
                problems_solved=safe_int(entry.get('problemsSolved'), 0),
                total_problems=safe_int(entry.get('totalProblems'), 0),
            ))

        stats.contest_rating = safe_number(ranking.get('rating'))
        stats.global_ranking = safe_int(ranking.get('globalRanking'))
        stats.attended_contests = safe_int(ranking.get('attendedContestsCount'))
        stats.top_percentage = safe_number(ranking.get('topPercentage'))
        stats.contest_history = history
