import pytest

from scrapers.base_scraper import InvalidHandleError, ScrapeStatus, ScrapingError
from scrapers.codeforces_scraper import solved_problem_key, summarize_submissions

API = "https://codeforces.com/api"


def ok(result):
    return {"status": "OK", "result": result}


def submission(verdict, contest_id=4, index="A", rating=800, tags=("math",), lang="GNU C++17"):
    return {
        "id": 1,
        "verdict": verdict,
        "programmingLanguage": lang,
        "creationTimeSeconds": 1700000000,
        "problem": {
            "contestId": contest_id,
            "index": index,
            "name": f"Problem {contest_id}{index}",
            "rating": rating,
            "tags": list(tags),
        },
    }


def route_user(fake_http, submissions, rating_changes=None):
    fake_http.routes[f"{API}/user.info"] = ok([{
        "handle": "tourist", "rating": 3800, "maxRating": 4000,
        "rank": "legendary grandmaster", "maxRank": "legendary grandmaster",
        "contribution": 100,
    }])
    fake_http.routes[f"{API}/user.rating"] = ok(rating_changes or [])
    fake_http.routes[f"{API}/user.status"] = ok(submissions)


def test_solved_problem_key():
    assert solved_problem_key({"contestId": 4, "index": "A"}) == "4-A"
    assert solved_problem_key({"name": "Watermelon"}) == "name-Watermelon"
    assert solved_problem_key({}) is None


def test_repeated_accepts_count_once():
    summary = summarize_submissions([
        submission("OK"),
        submission("OK"),
        submission("WRONG_ANSWER"),
    ])
    assert summary["problems_solved"] == 1
    assert summary["difficulty_wise_solved"] == {"800": 1}
    assert summary["tag_wise_solved"] == {"math": 1}
    assert summary["verdict_stats"] == {"OK": 2, "WRONG_ANSWER": 1}
    assert summary["languages"] == {"GNU C++17": 3}


def test_unrated_problems_bucketed():
    summary = summarize_submissions([submission("OK", rating=None)])
    assert summary["difficulty_wise_solved"] == {"unrated": 1}


def test_scrape_builds_contest_history(factory, fake_http):
    route_user(fake_http, [submission("OK"), submission("OK", index="B")], [
        {"contestId": 1, "contestName": "Round 1", "rank": 5, "oldRating": 0,
         "newRating": 1500, "ratingUpdateTimeSeconds": 1700000000},
        {"contestId": 2, "contestName": "Round 2", "rank": 3, "oldRating": 1500,
         "newRating": 1620, "ratingUpdateTimeSeconds": 1700600000},
    ])
    stats = factory.get_scraper("codeforces").fetch_stats("tourist")

    assert stats.rating == 3800
    assert stats.problems_solved == 2
    assert stats.contests_attended == 2
    assert [c.rating_change for c in stats.contest_history] == [1500, 120]
    assert stats.contest_history[0].date == "2023-11-14"
    assert stats.profile_url == "https://codeforces.com/profile/tourist"


def test_non_ok_status_is_hard_failure(factory, fake_http):
    fake_http.routes[f"{API}/user.info"] = {"status": "FAILED", "comment": "handles: User not found"}
    result = factory.get_scraper("codeforces").scrape("nobody")

    assert result.status == ScrapeStatus.ERROR
    assert result.stats is None
    assert "User not found" in str(result.error)
    with pytest.raises(ScrapingError):
        result.unwrap()


def test_blank_handle_rejected_before_network(factory, fake_http):
    with pytest.raises(InvalidHandleError):
        factory.get_scraper("codeforces").fetch_stats("   ")
    assert fake_http.calls == []
