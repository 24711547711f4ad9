"""
Data Normalizer Module
======================
Transforms platform-specific raw stats into the canonical PlatformStats format.

The scoring engine reads one vocabulary regardless of which platform produced
the data, so several values are written under more than one key (for example
rating / contest_rating, problems_solved / problems_solved_total).

Every mapper here is pure and total: missing numbers become 0 or None, missing
collections become empty, and nothing raises.
"""

import math
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


class PlatformId(Enum):
    """Supported profile sources, in aggregation order."""
    LEETCODE = "leetcode"
    CODECHEF = "codechef"
    CODEFORCES = "codeforces"
    ATCODER = "atcoder"
    HACKERRANK = "hackerrank"
    GITHUB = "github"

    @classmethod
    def parse(cls, value: Union[str, 'PlatformId']) -> 'PlatformId':
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class BadgeLevel(Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    LEGENDARY = "legendary"
    UNKNOWN = "unknown"


@dataclass
class Badge:
    name: str
    level: str = BadgeLevel.UNKNOWN.value


@dataclass
class PlatformStats:
    """
    Canonical per-platform stats record.

    This is the only shape handed to the scoring engine. Fields that do not
    apply to a platform stay None (numbers) or empty (collections).
    """
    # Required fields
    platform: str
    username: str
    profile_url: str

    # Identity
    display_name: Optional[str] = None
    country: Optional[str] = None

    # Problems (aliases of one another per platform)
    total_solved: Optional[int] = None
    problems_solved: Optional[int] = None
    problems_solved_total: Optional[int] = None
    problems_solved_by_difficulty: Dict[str, int] = field(default_factory=dict)

    # Ratings (aliases of one another per platform)
    rating: Optional[float] = None
    contest_rating: Optional[float] = None
    current_rating: Optional[float] = None
    max_rating: Optional[float] = None
    peak_rating: Optional[float] = None

    # Contest counts (aliases of one another per platform)
    contests_participated: Optional[int] = None
    contests_attended: Optional[int] = None
    attended_contests: Optional[int] = None
    total_contests: Optional[int] = None
    rated_matches: Optional[int] = None

    # Rank / title
    rank: Optional[Union[str, int]] = None
    max_rank: Optional[str] = None
    global_ranking: Optional[int] = None
    country_rank: Optional[int] = None
    top_percentage: Optional[float] = None
    title: Optional[str] = None
    division: Optional[str] = None
    stars: Optional[int] = None
    contribution: Optional[int] = None

    # CodeChef
    fully_solved: Optional[int] = None
    partially_solved: Optional[int] = None
    fully_solved_by_difficulty: Dict[str, int] = field(default_factory=dict)
    rating_graph: List[Dict] = field(default_factory=list)
    language_stats: Dict[str, int] = field(default_factory=dict)

    # HackerRank
    badges: List[Dict] = field(default_factory=list)
    badges_count: Optional[int] = None
    certificates: List[Dict] = field(default_factory=list)
    certificates_count: Optional[int] = None
    domain_scores: Dict[str, float] = field(default_factory=dict)
    domain_wise_solved: List[Dict] = field(default_factory=list)

    # GitHub
    contributions_last_year: Optional[int] = None
    public_repos: Optional[int] = None
    followers: Optional[int] = None
    following: Optional[int] = None
    total_stars: Optional[int] = None
    stars_received: Optional[int] = None
    top_languages: Dict[str, int] = field(default_factory=dict)
    current_streak: Optional[int] = None
    longest_streak: Optional[int] = None
    pinned_repositories: List[Dict] = field(default_factory=list)
    contribution_heatmap: List[Dict] = field(default_factory=list)
    monthly_contributions: List[Dict] = field(default_factory=list)

    # LeetCode
    streak: Optional[int] = None
    acceptance_rate: Optional[float] = None
    topic_wise_problem_counts: List[Dict] = field(default_factory=list)
    languages: Dict[str, int] = field(default_factory=dict)

    # Codeforces
    difficulty_wise_solved: Dict[str, int] = field(default_factory=dict)
    tag_wise_solved: Dict[str, int] = field(default_factory=dict)
    verdict_stats: Dict[str, int] = field(default_factory=dict)

    # AtCoder
    last_contest: Optional[str] = None
    contests: List[Dict] = field(default_factory=list)
    best_performance: Optional[int] = None

    # Common
    contest_history: List[Dict] = field(default_factory=list)
    recent_submissions: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'PlatformStats':
        """Rebuild from a to_dict() payload, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})



# ============ Value helpers ============

def safe_number(value: Any, default: Optional[float] = None) -> Optional[Union[int, float]]:
    """
    Coerce to int/float, mapping None, NaN, infinities and junk to default.
    Integral floats come back as int.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.replace(',', '').strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if number.is_integer():
        return int(number)
    return number


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    number = safe_number(value)
    if number is None:
        return default
    return int(number)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like Math.round: halves always go up, unlike Python's round()."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _records(items: Any) -> List[Dict]:
    """Turn a list of dataclasses/dicts into plain dicts, dropping anything else."""
    if not isinstance(items, (list, tuple)):
        return []
    records = []
    for item in items:
        if is_dataclass(item) and not isinstance(item, type):
            records.append(asdict(item))
        elif isinstance(item, dict):
            records.append(dict(item))
    return records


def _counts(mapping: Any) -> Dict[str, int]:
    """Copy a name -> count mapping, keeping only usable counts."""
    if not isinstance(mapping, dict):
        return {}
    result = {}
    for key, value in mapping.items():
        number = safe_number(value)
        if key is not None and number is not None:
            result[str(key)] = number
    return result


def _get(stats: Any, name: str, default: Any = None) -> Any:
    value = getattr(stats, name, None)
    return default if value is None else value


def _identity(stats: Any, platform: PlatformId) -> Dict[str, str]:
    """username/profile_url are never empty in a mapped record."""
    username = _text(_get(stats, 'username')) or "unknown"
    profile_url = _text(_get(stats, 'profile_url')) or f"{platform.value}:{username}"
    return {
        'platform': platform.value,
        'username': username,
        'profile_url': profile_url,
    }


# ============ Platform mappers ============

def map_leetcode(stats: Any) -> PlatformStats:
    badge_count = safe_int(_get(stats, 'badges'), 0)
    badges = [
        asdict(Badge(name=f"LC badge #{i + 1}", level=BadgeLevel.UNKNOWN.value))
        for i in range(max(badge_count, 0))
    ]
    total_solved = safe_int(_get(stats, 'total_solved'), 0)
    contest_rating = safe_number(_get(stats, 'contest_rating'))
    attended = safe_int(_get(stats, 'attended_contests'), 0)

    return PlatformStats(
        **_identity(stats, PlatformId.LEETCODE),
        total_solved=total_solved,
        problems_solved=total_solved,
        problems_solved_total=total_solved,
        problems_solved_by_difficulty={
            'easy': safe_int(_get(stats, 'solved_easy'), 0),
            'medium': safe_int(_get(stats, 'solved_medium'), 0),
            'hard': safe_int(_get(stats, 'solved_hard'), 0),
        },
        streak=safe_int(_get(stats, 'streak'), 0),
        acceptance_rate=safe_number(_get(stats, 'acceptance_rate'), 0),
        topic_wise_problem_counts=_records(_get(stats, 'topic_wise_problem_counts')),
        contest_rating=contest_rating,
        rating=contest_rating,
        attended_contests=attended,
        contests_attended=attended,
        contests_participated=attended,
        global_ranking=safe_int(_get(stats, 'global_ranking')),
        top_percentage=safe_number(_get(stats, 'top_percentage')),
        contest_history=_records(_get(stats, 'contest_history')),
        recent_submissions=_records(_get(stats, 'recent_submissions')),
        languages=_counts(_get(stats, 'languages')),
        badges=badges,
        badges_count=len(badges),
    )


def map_codeforces(stats: Any) -> PlatformStats:
    solved = safe_int(_get(stats, 'problems_solved'), 0)
    attended = safe_int(_get(stats, 'contests_attended'), 0)
    rating = safe_number(_get(stats, 'rating'))

    return PlatformStats(
        **_identity(stats, PlatformId.CODEFORCES),
        rating=rating,
        contest_rating=rating,
        current_rating=rating,
        max_rating=safe_number(_get(stats, 'max_rating')),
        contests_attended=attended,
        contests_participated=attended,
        problems_solved=solved,
        problems_solved_total=solved,
        total_solved=solved,
        rank=_text(_get(stats, 'rank')),
        max_rank=_text(_get(stats, 'max_rank')),
        contribution=safe_int(_get(stats, 'contribution')),
        contest_history=_records(_get(stats, 'contest_history')),
        difficulty_wise_solved=_counts(_get(stats, 'difficulty_wise_solved')),
        tag_wise_solved=_counts(_get(stats, 'tag_wise_solved')),
        verdict_stats=_counts(_get(stats, 'verdict_stats')),
        recent_submissions=_records(_get(stats, 'recent_submissions')),
        languages=_counts(_get(stats, 'languages')),
    )


def map_codechef(stats: Any) -> PlatformStats:
    fully = _get(stats, 'fully_solved')
    fully_by_difficulty = _counts(asdict(fully) if is_dataclass(fully) else fully)
    fully_total = safe_int(fully_by_difficulty.get('total'), 0)
    partial_total = safe_int(_get(stats, 'partially_solved'), 0)
    rating = safe_number(_get(stats, 'current_rating'))
    contest_history = _records(_get(stats, 'contest_history'))

    return PlatformStats(
        **_identity(stats, PlatformId.CODECHEF),
        current_rating=rating,
        rating=rating,
        contest_rating=rating,
        max_rating=safe_number(_get(stats, 'highest_rating')),
        fully_solved=fully_total,
        partially_solved=partial_total,
        problems_solved=fully_total,
        problems_solved_total=fully_total,
        stars=safe_int(_get(stats, 'stars')),
        division=_text(_get(stats, 'division')),
        global_ranking=safe_int(_get(stats, 'global_rank')),
        country_rank=safe_int(_get(stats, 'country_rank')),
        fully_solved_by_difficulty=fully_by_difficulty,
        contest_history=contest_history,
        rating_graph=_records(_get(stats, 'rating_graph')),
        recent_submissions=_records(_get(stats, 'recent_submissions')),
        language_stats=_counts(_get(stats, 'language_stats')),
        contests_participated=len(contest_history),
    )


def map_atcoder(stats: Any) -> PlatformStats:
    rating = safe_number(_get(stats, 'rating'))
    rated_matches = safe_int(_get(stats, 'rated_matches'), 0)
    total_contests = safe_int(_get(stats, 'total_contests')) or rated_matches

    return PlatformStats(
        **_identity(stats, PlatformId.ATCODER),
        rating=rating,
        contest_rating=rating,
        current_rating=rating,
        rated_matches=rated_matches,
        total_contests=total_contests,
        contests_participated=total_contests,
        max_rating=safe_number(_get(stats, 'highest_rating')),
        title=_text(_get(stats, 'title')),
        rank=safe_int(_get(stats, 'rank')),
        last_contest=_text(_get(stats, 'last_contest')),
        contests=_records(_get(stats, 'contests')),
        best_performance=safe_int(_get(stats, 'best_performance')),
        peak_rating=safe_number(_get(stats, 'peak_rating')),
        rating_graph=_records(_get(stats, 'rating_graph')),
        recent_submissions=_records(_get(stats, 'recent_submissions')),
    )


def badge_level_from(level: Any) -> str:
    """Map a HackerRank star number or level name onto BadgeLevel."""
    if isinstance(level, str):
        lower = level.lower()
        for keyword, badge_level in (
            ("gold", BadgeLevel.GOLD),
            ("silver", BadgeLevel.SILVER),
            ("bronze", BadgeLevel.BRONZE),
            ("legend", BadgeLevel.LEGENDARY),
            ("platinum", BadgeLevel.PLATINUM),
            ("diamond", BadgeLevel.DIAMOND),
        ):
            if keyword in lower:
                return badge_level.value
        return BadgeLevel.UNKNOWN.value

    number = safe_number(level)
    if number is None:
        return BadgeLevel.UNKNOWN.value
    if number >= 3:
        return BadgeLevel.GOLD.value
    if number == 2:
        return BadgeLevel.SILVER.value
    if number == 1:
        return BadgeLevel.BRONZE.value
    return BadgeLevel.UNKNOWN.value


def map_hackerrank(stats: Any) -> PlatformStats:
    badges = [
        asdict(Badge(
            name=_text(b.get('name')) or "Unknown",
            level=badge_level_from(b.get('level')),
        ))
        for b in _records(_get(stats, 'badges'))
    ]
    certificates = _records(_get(stats, 'certificates'))
    solved = safe_int(_get(stats, 'problems_solved'), 0)

    return PlatformStats(
        **_identity(stats, PlatformId.HACKERRANK),
        display_name=_text(_get(stats, 'full_name')),
        country=_text(_get(stats, 'country')),
        problems_solved=solved,
        problems_solved_total=solved,
        total_solved=solved,
        contests_participated=safe_int(_get(stats, 'contests_participated'), 0),
        badges=badges,
        badges_count=len(badges),
        domain_wise_solved=_records(_get(stats, 'domain_wise_solved')),
        domain_scores=_counts(_get(stats, 'domains')),
        contest_history=_records(_get(stats, 'contest_history')),
        certificates=certificates,
        certificates_count=len(certificates) or safe_int(_get(stats, 'certificates_count'), 0),
    )


def map_github(stats: Any) -> PlatformStats:
    total_stars = safe_int(_get(stats, 'total_stars'), 0)

    return PlatformStats(
        **_identity(stats, PlatformId.GITHUB),
        display_name=_text(_get(stats, 'name')),
        contributions_last_year=safe_int(_get(stats, 'contributions_last_year'), 0),
        public_repos=safe_int(_get(stats, 'public_repos'), 0),
        followers=safe_int(_get(stats, 'followers'), 0),
        following=safe_int(_get(stats, 'following'), 0),
        total_stars=total_stars,
        stars_received=total_stars,
        top_languages=_counts(_get(stats, 'top_languages')),
        current_streak=safe_int(_get(stats, 'current_streak'), 0),
        longest_streak=safe_int(_get(stats, 'longest_streak'), 0),
        pinned_repositories=_records(_get(stats, 'pinned_repositories')),
        contribution_heatmap=_records(_get(stats, 'contribution_heatmap')),
        monthly_contributions=_records(_get(stats, 'monthly_contributions')),
    )


MAPPERS: Dict[PlatformId, Callable[[Any], PlatformStats]] = {
    PlatformId.LEETCODE: map_leetcode,
    PlatformId.CODECHEF: map_codechef,
    PlatformId.CODEFORCES: map_codeforces,
    PlatformId.ATCODER: map_atcoder,
    PlatformId.HACKERRANK: map_hackerrank,
    PlatformId.GITHUB: map_github,
}


def normalize_stats(platform: Union[str, PlatformId], raw_stats: Any) -> PlatformStats:
    """
    Map raw scraper output for one platform onto PlatformStats.

    Usage:
        stats = normalize_stats("codeforces", raw)
    """
    return MAPPERS[PlatformId.parse(platform)](raw_stats)
