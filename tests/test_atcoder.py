from scrapers.atcoder_scraper import parse_history_csv, parse_submissions
from scrapers.base_scraper import ScrapeStatus
from utils.data_normalizer import normalize_stats

PROFILE_URL = "https://atcoder.jp/users/chokudai"

PROFILE_HTML = """
<a class="username" href="/users/chokudai"><span class="user-red">chokudai</span></a>
<table class="dl-table">
  <tr><th>Rank</th><td>15th</td></tr>
  <tr><th>Rating</th><td><span class="user-red">2,791</span> <span class="bold">4 Dan</span></td></tr>
  <tr><th>Highest Rating</th><td><span class="user-red">3,210</span></td></tr>
  <tr><th>Rated Matches </th><td>21</td></tr>
  <tr><th>Last Competed</th><td>2024/01/14</td></tr>
</table>
"""

HISTORY_CSV = """Is Rated,Contest,Date,Rank,Performance,OldRating,NewRating
true,ABC 300,2023-04-29,10,2800,2700,2750
false,ABC 301,2023-05-06,300,1900,2750,
true,ARC 160,2023-05-13,5,3100,2750,2791
"""

SUBMISSIONS_HTML = """
<table><thead><tr><th>Time</th></tr></thead><tbody>
<tr>
  <td><time>2024-01-14 21:05:11</time></td>
  <td><a href="/contests/abc335/tasks/abc335_a">A - Sample</a></td>
  <td>chokudai</td>
  <td>C++ 20 (gcc 12.2)</td>
  <td>100</td>
  <td>300 Byte</td>
  <td><span class="label label-success">AC</span></td>
  <td>1 ms</td>
  <td><a href="/contests/abc335/submissions/49000000">Detail</a></td>
</tr>
</tbody></table>
"""


def test_empty_new_rating_kept_in_contests_only():
    contests, graph = parse_history_csv(HISTORY_CSV)

    assert [c.contest_name for c in contests] == ["ABC 300", "ABC 301", "ARC 160"]
    assert contests[1].new_rating is None
    assert [p.contest_name for p in graph] == ["ABC 300", "ARC 160"]
    assert [p.rating for p in graph] == [2750, 2791]


def test_parse_history_csv_empty():
    assert parse_history_csv("") == ([], [])


def test_parse_submissions():
    [submission] = parse_submissions(SUBMISSIONS_HTML)

    assert submission.id == 49000000
    assert submission.contest_id == "abc335"
    assert submission.problem_id == "abc335_a"
    assert submission.result == "AC"
    assert submission.language == "C++ 20 (gcc 12.2)"
    assert submission.execution_time == 1
    assert submission.timestamp > 0


def test_profile_and_history(factory, fake_http):
    fake_http.routes[PROFILE_URL] = PROFILE_HTML
    fake_http.routes[f"{PROFILE_URL}/history/csv"] = HISTORY_CSV
    fake_http.routes[f"{PROFILE_URL}/submissions"] = SUBMISSIONS_HTML

    result = factory.get_scraper("atcoder").scrape("chokudai")
    stats = result.stats

    assert result.status == ScrapeStatus.OK
    assert stats.rating == 2791
    assert stats.highest_rating == 3210
    assert stats.rank == 15
    assert stats.rated_matches == 21
    assert stats.last_contest == "2024/01/14"
    assert stats.title == "4 Dan"
    assert stats.total_contests == 3
    assert stats.best_performance == 3100
    assert stats.peak_rating == 3210
    assert len(stats.recent_submissions) == 1


def test_total_failure_returns_skeleton(factory):
    result = factory.get_scraper("atcoder").scrape("chokudai")

    assert result.status == ScrapeStatus.SKELETON
    assert result.stats.rating is None
    assert result.stats.contests == []

    mapped = normalize_stats("atcoder", result.stats)
    assert mapped.username == "chokudai"
    assert mapped.profile_url == PROFILE_URL
    assert mapped.contests_participated == 0


def test_history_failure_keeps_profile_fields(factory, fake_http):
    fake_http.routes[PROFILE_URL] = PROFILE_HTML

    result = factory.get_scraper("atcoder").scrape("chokudai")

    assert result.status == ScrapeStatus.SKELETON
    assert result.stats.rating == 2791
    assert result.stats.contests == []
