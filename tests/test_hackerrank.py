from scrapers.base_scraper import ScrapeStatus
from scrapers.hackerrank_scraper import domain_from_score
from utils.data_normalizer import normalize_stats

API = "https://www.hackerrank.com/rest/hackers/ada"

PROFILE = {"model": {"name": "Ada L", "country": "India", "solved_challenges": 85, "contests": 1}}
BADGES = {"models": [
    {"badge_name": "Problem Solving", "stars": 5, "star_level": 3},
    {"badge_name": "Python", "star_level": 1},
]}
CERTIFICATES = {"models": [
    {"certificate": {"label": "Python (Basic)"}, "status": "test_passed"},
]}
SCORES = {"models": [
    {"name": "algorithms", "score": 425.0, "total_challenges": 500},
    {"name": "sql", "score": 100.0, "solved": 12},
]}
CONTESTS = {"models": [
    {"contest_name": "Week of Code", "contest_slug": "woc", "rank": 120, "score": 80},
    {"contest_name": "Hack the Interview", "contest_slug": "hti", "rank": 40, "score": 95},
]}


def test_domain_solved_estimated_from_score():
    domain = domain_from_score({"name": "algorithms", "score": 425.0})
    assert domain.solved == 43
    assert domain.solved_estimated is True

    exact = domain_from_score({"name": "sql", "score": 100.0, "solved": 12})
    assert exact.solved == 12
    assert exact.solved_estimated is False

    assert domain_from_score({"score": 10}) is None


def test_all_endpoints(factory, fake_http):
    fake_http.routes.update({
        f"{API}/profile": PROFILE,
        f"{API}/badges": BADGES,
        f"{API}/certificates": CERTIFICATES,
        f"{API}/scores": SCORES,
        f"{API}/contest_participation": CONTESTS,
    })
    stats = factory.get_scraper("hackerrank").fetch_stats("ada")

    assert stats.full_name == "Ada L"
    assert stats.problems_solved == 85
    assert stats.badges_count == 2
    assert stats.certificates[0].name == "Python (Basic)"
    assert stats.domains == {"algorithms": 425, "sql": 100}
    assert stats.contests_participated == 2

    mapped = normalize_stats("hackerrank", stats)
    assert [b["level"] for b in mapped.badges] == ["gold", "bronze"]
    assert mapped.certificates_count == 1
    assert mapped.total_solved == 85


def test_partial_endpoint_failure(factory, fake_http):
    fake_http.routes.update({
        f"{API}/profile": PROFILE,
        f"{API}/scores": SCORES,
    })
    result = factory.get_scraper("hackerrank").scrape("ada")

    assert result.status == ScrapeStatus.OK
    assert result.stats.problems_solved == 85
    assert result.stats.badges == []
    assert result.stats.certificates_count == 0
    assert result.stats.contests_participated == 1
    assert len(result.stats.domain_wise_solved) == 2


def test_everything_down_still_returns_stats(factory):
    result = factory.get_scraper("hackerrank").scrape("ada")

    assert result.has_stats
    assert result.stats.username == "ada"
    assert result.stats.problems_solved == 0


def test_null_star_level_falls_back_to_level(factory, fake_http):
    fake_http.routes[f"{API}/badges"] = {"models": [
        {"badge_name": "Java", "star_level": None, "level": "Silver"},
        {"badge_name": "C++", "star_level": 0, "level": "Gold"},
    ]}
    stats = factory.get_scraper("hackerrank").fetch_stats("ada")

    assert [b.level for b in stats.badges] == ["Silver", 0]
    assert [b["level"] for b in normalize_stats("hackerrank", stats).badges] == ["silver", "unknown"]
