"""
AtCoder Scraper Module
======================
Three sources per user:
1. Profile HTML - rating, rank, rated matches, title
2. CSV export of contest history
3. Submissions HTML table (best effort)

AtCoder is configured as soft-failing: whatever was gathered before a
failure is still returned, down to an all-default skeleton.
"""

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from bs4 import BeautifulSoup

from scrapers.base_scraper import BaseScraper
from utils.data_normalizer import PlatformId, safe_int
from utils.extraction import extract_first, strategy

logger = logging.getLogger(__name__)

TITLE = [
    strategy("master-style title", r'user-(?:[^"]+)">([\w\s]+?master)</span>'),
    strategy("dan/kyu title", r'([0-9]+\s+(?:Dan|Kyu))'),
]
RATING = [strategy("rating span", r'Rating[\s\S]*?<span[^>]*>([0-9,]+)', safe_int)]
HIGHEST_RATING = [strategy("highest rating span", r'Highest Rating[\s\S]*?<span[^>]*>([0-9,]+)', safe_int)]
RANK = [strategy("rank cell", r'Rank[\s\S]*?<td[^>]*>([0-9,]+)', safe_int)]
RATED_MATCHES = [strategy("rated matches cell", r'Rated Matches[\s\S]*?<td[^>]*>([0-9,]+)', safe_int)]
LAST_COMPETED = [strategy("last competed cell", r'Last Competed[\s\S]*?<td[^>]*>([0-9/]+)')]

VERDICT_PATTERN = re.compile(r'\b(AC|WA|TLE|MLE|RE|CE|OLE|IE)\b')
LANGUAGE_PATTERN = re.compile(
    r'C\+\+|Python|Java|Ruby|Rust|Go|Kotlin|C#|JavaScript|Haskell|OCaml', re.IGNORECASE
)
TIMESTAMP_PATTERN = re.compile(r'(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2})')
EXEC_TIME_PATTERN = re.compile(r'(\d+)\s*ms')
TASK_HREF = re.compile(r'/contests/([^/]+)/tasks/([^/"?]+)')
SUBMISSION_HREF = re.compile(r'/submissions/(\d+)')


@dataclass
class AtcoderContest:
    contest_name: str
    date: str
    rank: Optional[int]
    performance: Optional[int]
    old_rating: Optional[int]
    new_rating: Optional[int]


@dataclass
class AtcoderRatingPoint:
    contest_name: str
    rating: int
    date: str


@dataclass
class AtcoderSubmission:
    id: int
    problem_id: str
    problem_name: str
    contest_id: str
    result: str
    language: str
    timestamp: int
    execution_time: Optional[int]


@dataclass
class AtcoderStats:
    username: str
    profile_url: str

    rating: Optional[int] = None
    highest_rating: Optional[int] = None
    rank: Optional[int] = None
    rated_matches: Optional[int] = None
    last_contest: Optional[str] = None
    title: Optional[str] = None

    contests: List[AtcoderContest] = field(default_factory=list)
    total_contests: int = 0
    best_performance: Optional[int] = None
    peak_rating: Optional[int] = None
    rating_graph: List[AtcoderRatingPoint] = field(default_factory=list)
    recent_submissions: List[AtcoderSubmission] = field(default_factory=list)


def _column(row: List[str], index: int) -> str:
    return row[index].strip() if index < len(row) else ""


def parse_history_csv(text: str):
    """
    Parse the contest-history CSV export positionally.

    Columns: 1 contest name, 2 date, 3 rank, 4 performance, 5 old rating,
    6 new rating. Every row becomes a contest; only rows with a new rating
    become rating-graph points.
    """
    contests: List[AtcoderContest] = []
    graph: List[AtcoderRatingPoint] = []

    rows = list(csv.reader(io.StringIO((text or "").strip())))
    for row in rows[1:]:
        if not any(cell.strip() for cell in row):
            continue
        contest = AtcoderContest(
            contest_name=_column(row, 1),
            date=_column(row, 2),
            rank=safe_int(_column(row, 3)),
            performance=safe_int(_column(row, 4)),
            old_rating=safe_int(_column(row, 5)),
            new_rating=safe_int(_column(row, 6)),
        )
        contests.append(contest)
        if contest.new_rating is not None:
            graph.append(AtcoderRatingPoint(
                contest_name=contest.contest_name,
                rating=contest.new_rating,
                date=contest.date,
            ))
    return contests, graph


def _epoch(text: str) -> int:
    try:
        parsed = datetime.strptime(text, '%Y-%m-%d %H:%M:%S')
    except ValueError:
        return 0
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def parse_submissions(html: str, limit: int = 20) -> List[AtcoderSubmission]:
    """Rows of the submissions table: time, task, user, language, score, size, status, runtime."""
    soup = BeautifulSoup(html or "", 'html.parser')
    body = soup.find('tbody')
    if body is None:
        return []

    submissions: List[AtcoderSubmission] = []
    for row in body.find_all('tr'):
        if len(submissions) >= limit:
            break

        submission_link = row.find('a', href=SUBMISSION_HREF)
        submission_id = (
            safe_int(SUBMISSION_HREF.search(submission_link['href']).group(1), 0)
            if submission_link else 0
        )

        task_link = row.find('a', href=TASK_HREF)
        contest_id = problem_id = problem_name = ""
        if task_link:
            task = TASK_HREF.search(task_link['href'])
            contest_id, problem_id = task.group(1), task.group(2)
            problem_name = task_link.get_text(strip=True)

        if not submission_id and not problem_id:
            continue

        label = row.find('span', class_=re.compile('label'))
        text = row.get_text(" ", strip=True)
        if label:
            result = label.get_text(strip=True)
        else:
            verdict = VERDICT_PATTERN.search(text)
            result = verdict.group(1) if verdict else "Unknown"

        language = "Unknown"
        for cell in row.find_all('td'):
            cell_text = cell.get_text(strip=True)
            if LANGUAGE_PATTERN.search(cell_text):
                language = cell_text
                break

        timestamp = TIMESTAMP_PATTERN.search(text)
        exec_time = EXEC_TIME_PATTERN.search(text)

        submissions.append(AtcoderSubmission(
            id=submission_id,
            problem_id=problem_id,
            problem_name=problem_name,
            contest_id=contest_id,
            result=result or "Unknown",
            language=language,
            timestamp=_epoch(timestamp.group(1)) if timestamp else 0,
            execution_time=safe_int(exec_time.group(1)) if exec_time else None,
        ))
    return submissions


class AtcoderScraper(BaseScraper):
    """Scraper for AtCoder profiles."""

    platform = PlatformId.ATCODER

    def empty_stats(self, handle: str) -> AtcoderStats:
        return AtcoderStats(
            username=handle,
            profile_url=f"{self.url or 'https://atcoder.jp'}/users/{handle}",
        )

    def _populate(self, stats: AtcoderStats, handle: str) -> None:
        # 1) Profile
        html = self.http.get_text(stats.profile_url)
        stats.title = extract_first(html, TITLE)
        stats.rating = extract_first(html, RATING)
        stats.highest_rating = extract_first(html, HIGHEST_RATING)
        stats.rank = extract_first(html, RANK)
        stats.rated_matches = extract_first(html, RATED_MATCHES)
        stats.last_contest = extract_first(html, LAST_COMPETED)

        # 2) Contest history CSV
        csv_text = self.http.get_text(f"{stats.profile_url}/history/csv")
        stats.contests, stats.rating_graph = parse_history_csv(csv_text)
        stats.total_contests = len(stats.contests)

        performances = [c.performance for c in stats.contests if c.performance and c.performance > 0]
        stats.best_performance = max(performances) if performances else None

        ratings = [stats.highest_rating or 0] + [c.new_rating or 0 for c in stats.contests]
        ratings = [r for r in ratings if r > 0]
        stats.peak_rating = max(ratings) if ratings else None

        # 3) Recent submissions
        limit = self.config.get('recent_submissions', 20)
        stats.recent_submissions = self._best_effort(
            "submissions", self._fetch_submissions, [], stats.profile_url, limit
        )

        logger.info(f"AtCoder {handle}: rating {stats.rating}, {stats.total_contests} contests")

    def _fetch_submissions(self, profile_url: str, limit: int) -> List[AtcoderSubmission]:
        return parse_submissions(self.http.get_text(f"{profile_url}/submissions"), limit)
