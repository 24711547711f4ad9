"""
CodeChef Scraper Module
=======================
Scrapes the public CodeChef profile page (no JSON API is available).

Fields are pulled with ordered regex strategies so both the old and the new
profile layouts are understood. Rating history lives in an embedded
`var all_rating = [...]` script literal and is validated entry by entry.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from scrapers.base_scraper import BaseScraper
from utils.data_normalizer import PlatformId, safe_int
from utils.extraction import extract_first, extract_number, strategy

logger = logging.getLogger(__name__)


def _positive(value: str) -> Optional[int]:
    number = extract_number(value)
    return number if number else None


CURRENT_RATING = [
    strategy("rating-number div", r'class="rating-number"[^>]*>([^<]+)<', extract_number),
]
HIGHEST_RATING = [
    strategy("highest rating label", r'Highest\s*Rating[^0-9]*([0-9,]+)', extract_number),
]
GLOBAL_RANK = [
    strategy("global rank label", r'Global\s*Rank[^0-9]*([0-9,]+)', extract_number),
]
COUNTRY_RANK = [
    strategy("country rank label", r'Country\s*Rank[^0-9]*([0-9,]+)', extract_number),
]
STARS = [
    strategy("username star prefix", r'Username:\s*([0-9]+)\s*★', extract_number),
    strategy("star glyph run", r'(★+)', lambda run: len(run) or None),
]
DIVISION = [
    strategy("division full name", r'(Division\s*[1-4])'),
    strategy("div short form", r'\(Div\s*([1-4])\)', lambda digit: f"Div {digit}"),
]
FULLY_SOLVED = [
    strategy("total problems solved", r'Total\s*Problems\s*Solved:\s*([0-9]+)', _positive),
    strategy("fully solved count", r'Fully\s*Solved\s*\((\d+)\)', extract_number),
]
PARTIALLY_SOLVED = [
    strategy("partially solved count", r'Partially\s*Solved\s*\((\d+)\)', extract_number),
]

DIFFICULTY_PATTERN = re.compile(r'(School|Easy|Medium|Hard|Challenge|Peer)\s*\((\d+)\)', re.IGNORECASE)
ALL_RATING_PATTERN = re.compile(r'var\s+all_rating\s*=\s*(\[[\s\S]*?\]);')
LANGUAGE_STATS_PATTERN = re.compile(r'var\s+language_stats\s*=\s*(\{[\s\S]*?\});')
LANGUAGE_SPAN_PATTERN = re.compile(r'<span[^>]*>([A-Za-z+#]+)</span>\s*:\s*(\d+)', re.IGNORECASE)
RESULT_PATTERN = re.compile(r'(accepted|wrong|partially|time limit|runtime|compilation)', re.IGNORECASE)
LANGUAGE_NAME_PATTERN = re.compile(r'C\+\+|Python|Java(?:Script)?|C#|Ruby|Go|Rust|Kotlin', re.IGNORECASE)
DATE_PATTERN = re.compile(r'(\d{1,2}\s+\w+\s+\d{4}|\d{4}-\d{2}-\d{2})')


class RatingEntry(BaseModel):
    """One element of the embedded all_rating array."""
    model_config = ConfigDict(extra='ignore')

    code: Optional[str] = None
    name: Optional[str] = None
    rating: int
    rank: int = 0
    end_date: Optional[str] = None

    @model_validator(mode='after')
    def _needs_identifier(self) -> 'RatingEntry':
        if not (self.code or self.name):
            raise ValueError("rating entry has neither code nor name")
        return self


@dataclass
class CodeChefContest:
    contest_code: str
    contest_name: str
    rank: Optional[int]
    rating: Optional[int]
    rating_change: Optional[int]
    date: Optional[str]


@dataclass
class CodeChefRatingPoint:
    contest_code: str
    rating: int
    rank: int
    date: str


@dataclass
class CodeChefSubmission:
    problem_code: str
    problem_name: str
    result: str
    language: str
    date: Optional[str]


@dataclass
class SolvedBreakdown:
    total: int = 0
    school: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0
    challenge: int = 0
    peer: int = 0


@dataclass
class CodeChefStats:
    username: str
    profile_url: str

    current_rating: Optional[int] = None
    highest_rating: Optional[int] = None
    stars: Optional[int] = None
    division: Optional[str] = None
    global_rank: Optional[int] = None
    country_rank: Optional[int] = None

    fully_solved: SolvedBreakdown = field(default_factory=SolvedBreakdown)
    partially_solved: int = 0

    contest_history: List[CodeChefContest] = field(default_factory=list)
    rating_graph: List[CodeChefRatingPoint] = field(default_factory=list)
    recent_submissions: List[CodeChefSubmission] = field(default_factory=list)
    language_stats: Dict[str, int] = field(default_factory=dict)


def parse_rating_history(html: str) -> List[RatingEntry]:
    """
    Pull and validate the embedded all_rating array.

    Malformed entries are dropped one by one; a missing or unparsable array
    gives an empty history.
    """
    match = ALL_RATING_PATTERN.search(html or "")
    if not match:
        return []
    try:
        raw_entries = json.loads(match.group(1))
    except ValueError as e:
        logger.warning(f"[CodeChef] Failed to parse rating data: {e}")
        return []
    if not isinstance(raw_entries, list):
        return []

    entries = []
    for raw in raw_entries:
        try:
            entries.append(RatingEntry.model_validate(raw))
        except ValidationError as e:
            logger.debug(f"[CodeChef] Skipping malformed rating entry {raw!r}: {e}")
    return entries


def parse_language_stats(html: str) -> Dict[str, int]:
    """Language usage from the embedded language_stats object, else from label spans."""
    match = LANGUAGE_STATS_PATTERN.search(html or "")
    if match:
        try:
            data = json.loads(match.group(1))
            if isinstance(data, dict):
                return {str(lang): safe_int(count, 0) for lang, count in data.items()}
        except ValueError as e:
            logger.debug(f"[CodeChef] language_stats is not JSON: {e}")

    return {lang: safe_int(count, 0) for lang, count in LANGUAGE_SPAN_PATTERN.findall(html or "")}


def parse_submissions(html: str, limit: int = 20) -> List[CodeChefSubmission]:
    soup = BeautifulSoup(html or "", 'html.parser')
    rows = [
        row for row in soup.find_all('tr')
        if any('kol' in cls for cls in row.get('class', []))
    ]

    submissions = []
    for row in rows[:limit]:
        link = row.find('a', href=re.compile(r'^/problems/'))
        if not link:
            continue
        text = row.get_text(" ", strip=True)

        result = RESULT_PATTERN.search(text)
        language_span = row.find('span', class_=re.compile('language'))
        if language_span:
            language = language_span.get_text(strip=True)
        else:
            language_match = LANGUAGE_NAME_PATTERN.search(text)
            language = language_match.group(0) if language_match else "Unknown"
        date = DATE_PATTERN.search(text)

        submissions.append(CodeChefSubmission(
            problem_code=link['href'].split('/problems/', 1)[1].strip('/'),
            problem_name=link.get_text(strip=True),
            result=result.group(1) if result else "Unknown",
            language=language or "Unknown",
            date=date.group(1) if date else None,
        ))
    return submissions


class CodeChefScraper(BaseScraper):
    """Scraper for CodeChef profile pages."""

    platform = PlatformId.CODECHEF

    def empty_stats(self, handle: str) -> CodeChefStats:
        return CodeChefStats(
            username=handle,
            profile_url=f"{self.url or 'https://www.codechef.com'}/users/{quote(handle)}",
        )

    def _populate(self, stats: CodeChefStats, handle: str) -> None:
        html = self.http.get_text(stats.profile_url, headers={"Referer": self.url})

        stats.current_rating = extract_first(html, CURRENT_RATING)
        stats.highest_rating = extract_first(html, HIGHEST_RATING)
        stats.global_rank = extract_first(html, GLOBAL_RANK)
        stats.country_rank = extract_first(html, COUNTRY_RANK)
        stats.stars = extract_first(html, STARS)
        stats.division = extract_first(html, DIVISION)

        stats.fully_solved.total = extract_first(html, FULLY_SOLVED, default=0)
        stats.partially_solved = extract_first(html, PARTIALLY_SOLVED, default=0)
        for category, count in DIFFICULTY_PATTERN.findall(html):
            setattr(stats.fully_solved, category.lower(), safe_int(count, 0))

        self._apply_rating_history(stats, parse_rating_history(html))
        stats.language_stats = parse_language_stats(html)

        limit = self.config.get('recent_submissions', 20)
        stats.recent_submissions = self._best_effort(
            "submissions", self._fetch_submissions, [], stats.profile_url, limit
        )

        logger.info(
            f"CodeChef {handle}: rating {stats.current_rating}, "
            f"{stats.fully_solved.total} fully solved"
        )

    def _fetch_submissions(self, profile_url: str, limit: int) -> List[CodeChefSubmission]:
        html = self.http.get_text(profile_url, params={"tab": "submissions"})
        return parse_submissions(html, limit)

    @staticmethod
    def _apply_rating_history(stats: CodeChefStats, entries: List[RatingEntry]) -> None:
        previous = 0
        for entry in entries:
            code = entry.code or entry.name or ""
            stats.contest_history.append(CodeChefContest(
                contest_code=code,
                contest_name=entry.name or entry.code or "",
                rank=entry.rank,
                rating=entry.rating,
                rating_change=entry.rating - previous if previous > 0 else 0,
                date=entry.end_date,
            ))
            stats.rating_graph.append(CodeChefRatingPoint(
                contest_code=code,
                rating=entry.rating,
                rank=entry.rank,
                date=entry.end_date or "",
            ))
            previous = entry.rating
