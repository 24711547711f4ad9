from scrapers.aggregator import (
    PLATFORM_ORDER,
    ProfileAggregator,
    scrape_all_platforms_for_user,
    scrape_platform_for_user,
    stats_to_dicts,
)
from scrapers.base_scraper import ScraperFactory
from utils.data_normalizer import PlatformId

GRAPHQL = "https://leetcode.com/graphql"
CF_API = "https://codeforces.com/api"
GITHUB_API = "https://api.github.com/users/octo"


def leetcode_ok(payload):
    if payload["operationName"] == "stats":
        return {"data": {"matchedUser": {"submitStatsGlobal": {"acSubmissionNum": [
            {"difficulty": "Easy", "count": 3},
        ]}}}}
    return {"data": {}}


def test_failure_isolated_and_order_kept(factory, fake_http):
    fake_http.routes[GRAPHQL] = leetcode_ok
    fake_http.routes[f"{CF_API}/user.info"] = {"status": "FAILED", "comment": "not found"}

    results = ProfileAggregator(factory).scrape_all_platforms_for_user({
        PlatformId.CODEFORCES: "x",
        PlatformId.LEETCODE: "y",
    })

    assert [r.platform for r in results] == ["leetcode"]
    assert results[0].username == "y"
    assert results[0].total_solved == 3


def test_soft_platforms_return_skeletons(factory, fake_http):
    fake_http.routes[GRAPHQL] = leetcode_ok

    results = ProfileAggregator(factory).scrape_all_platforms_for_user({
        "github": "octo",
        "atcoder": "chokudai",
        "leetcode": "y",
    })

    assert [r.platform for r in results] == ["leetcode", "atcoder", "github"]
    assert results[1].profile_url == "https://atcoder.jp/users/chokudai"
    assert results[2].username == "octo"


def test_empty_handles_create_no_jobs(factory, fake_http):
    results = ProfileAggregator(factory).scrape_all_platforms_for_user({
        "leetcode": "",
        "codeforces": "   ",
        "github": None,
    })

    assert results == []
    assert fake_http.calls == []


def test_disabled_platform_is_skipped(config, fake_http):
    config["platforms"]["github"]["enabled"] = False
    factory = ScraperFactory(config=config, http_client=fake_http)

    assert "github" not in factory.available_platforms
    assert ProfileAggregator(factory).scrape_all_platforms_for_user({"github": "octo"}) == []
    assert fake_http.calls == []


def test_single_platform_never_raises(factory):
    aggregator = ProfileAggregator(factory)

    assert aggregator.scrape_platform_for_user("codeforces", "nobody") is None
    assert aggregator.scrape_platform_for_user("leetcode", "") is None
    assert aggregator.scrape_platform_for_user("topcoder", "someone") is None


def test_repeated_runs_are_identical(factory, fake_http):
    fake_http.routes[GRAPHQL] = leetcode_ok
    fake_http.routes[GITHUB_API] = {"login": "octo", "public_repos": 1}
    fake_http.routes[f"{GITHUB_API}/repos"] = []
    handles = {"leetcode": "y", "github": "octo", "hackerrank": "ada"}
    aggregator = ProfileAggregator(factory)

    first = stats_to_dicts(aggregator.scrape_all_platforms_for_user(handles))
    second = stats_to_dicts(aggregator.scrape_all_platforms_for_user(handles))

    assert first == second
    assert [d["platform"] for d in first] == ["leetcode", "hackerrank", "github"]


def test_platform_order_covers_every_platform():
    assert set(PLATFORM_ORDER) == set(PlatformId)


def test_module_wrappers_use_given_factory(factory, fake_http):
    fake_http.routes[GRAPHQL] = leetcode_ok

    [stats] = scrape_all_platforms_for_user({"leetcode": "y"}, factory=factory)
    assert stats.total_solved == 3
    assert scrape_platform_for_user("leetcode", "y", factory=factory).username == "y"


def test_module_wrappers_survive_missing_config(monkeypatch, tmp_path):
    monkeypatch.setenv("SCRAPER_CONFIG", str(tmp_path / "missing.json"))

    assert scrape_all_platforms_for_user({"leetcode": "y"}) == []
    assert scrape_platform_for_user("leetcode", "y") is None
