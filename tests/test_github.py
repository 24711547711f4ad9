from scrapers.base_scraper import ScrapeStatus
from scrapers.github_scraper import (
    ContributionDay,
    GitHubScraper,
    parse_contribution_days,
    summarize_contributions,
)

API = "https://api.github.com/users/octo"
CONTRIBUTIONS = "https://github.com/users/octo/contributions"
GRAPHQL = "https://api.github.com/graphql"


def calendar(counts, start_day=1, month="2024-01"):
    cells = "".join(
        f'<td class="ContributionCalendar-day" data-date="{month}-{start_day + i:02d}" '
        f'data-count="{count}"></td>'
        for i, count in enumerate(counts)
    )
    return f"<table><tbody><tr>{cells}</tr></tbody></table>"


def days(counts):
    return [
        ContributionDay(date=f"2024-01-{i + 1:02d}", count=c, weekday=0)
        for i, c in enumerate(counts)
    ]


def route_profile(fake_http):
    fake_http.routes[API] = {"login": "octo", "name": "Octo Cat", "public_repos": 3,
                             "followers": 10, "following": 2}
    fake_http.routes[f"{API}/repos"] = [
        {"name": "a", "stargazers_count": 5, "language": "Python"},
        {"name": "b", "stargazers_count": 2, "language": "Python"},
        {"name": "c", "stargazers_count": 0, "language": None},
    ]


def test_streaks():
    summary = summarize_contributions(days([1, 2, 0, 3, 3]))
    assert summary.longest_streak == 2
    assert summary.current_streak == 2
    assert summary.contributions_last_year == 9


def test_streak_broken_by_trailing_zero():
    summary = summarize_contributions(days([4, 4, 4, 0]))
    assert summary.longest_streak == 3
    assert summary.current_streak == 0


def test_streak_needs_consecutive_dates():
    gap = [
        ContributionDay(date="2024-01-01", count=1, weekday=1),
        ContributionDay(date="2024-01-03", count=1, weekday=3),
    ]
    assert summarize_contributions(gap).longest_streak == 1


def test_monthly_buckets():
    summary = summarize_contributions([
        ContributionDay(date="2024-02-01", count=3, weekday=4),
        ContributionDay(date="2024-01-31", count=2, weekday=3),
        ContributionDay(date="2024-01-30", count=1, weekday=2),
    ])
    assert [(m.month, m.total) for m in summary.monthly_contributions] == [
        ("2024-01", 3), ("2024-02", 3),
    ]
    assert summary.current_streak == 3


def test_parse_contribution_days():
    parsed = parse_contribution_days(calendar([0, 5]))
    assert [(d.date, d.count) for d in parsed] == [("2024-01-01", 0), ("2024-01-02", 5)]
    # 2024-01-01 was a Monday
    assert parsed[0].weekday == 1


def test_profile_without_token_skips_pinned(factory, fake_http):
    route_profile(fake_http)
    fake_http.routes[CONTRIBUTIONS] = calendar([1, 2, 0, 3, 3])

    stats = factory.get_scraper("github").fetch_stats("octo")

    assert stats.name == "Octo Cat"
    assert stats.total_stars == 7
    assert stats.top_languages == {"Python": 2}
    assert stats.longest_streak == 2
    assert stats.pinned_repositories == []
    assert GRAPHQL not in fake_http.urls()


def test_pinned_with_token(config, fake_http):
    route_profile(fake_http)
    fake_http.routes[GRAPHQL] = {"data": {"user": {"pinnedItems": {"nodes": [
        {"name": "a", "description": "demo", "url": "https://github.com/octo/a",
         "primaryLanguage": {"name": "Python"}, "stargazerCount": 5, "forkCount": 1},
    ]}}}}

    scraper = GitHubScraper(config["platforms"]["github"], fake_http, token="t0ken")
    stats = scraper.fetch_stats("octo")

    assert [p.name for p in stats.pinned_repositories] == ["a"]
    assert stats.pinned_repositories[0].language == "Python"
    assert scraper._api_headers()["Authorization"] == "Bearer t0ken"
    # contributions page missing: best effort
    assert stats.contributions_last_year == 0


def test_profile_failure_is_soft(factory):
    result = factory.get_scraper("github").scrape("octo")

    assert result.status == ScrapeStatus.SKELETON
    assert result.stats.profile_url == "https://github.com/octo"
