import json

import main


def test_list(capsys):
    assert main.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "leetcode: LeetCode [hard failure, 30s]" in out
    assert "hackerrank: HackerRank [soft failure, 12s]" in out


def test_scrape_without_handles(capsys):
    assert main.main(["scrape", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == []


def test_platform_failure_exit_code(monkeypatch):
    monkeypatch.setattr(main.CodeSync, "scrape_platform", lambda self, platform, handle: None)
    assert main.main(["platform", "codeforces", "nobody"]) == 1
