"""Tests for src.restart.runner covering filtering, fault isolation, and exit codes.

Run with:
    pytest tests/test_runner.py --maxfail=1 -v --cov=src.restart.runner --cov-report=term-missing
"""

import re
from unittest.mock import MagicMock, patch

import pytest

from src.restart import runner
from src.restart.client import Endpoint
from src.restart.config import RestartSettings
from src.restart.errors import (
    AuthenticationError,
    DecodeError,
    MalformedBuildError,
    NoBuildsError,
    NoMatchingBuildError,
    TransportError,
)
from src.restart.models import Repository
from src.restart.service import RestartService


def _settings(**overrides):
    values = dict(
        github_token="gh",
        github_user="me",
        include=None,
        dry_run=False,
        skip_pro=False,
        skip_org=False,
        timeout=5.0,
    )
    values.update(overrides)
    return RestartSettings(**values)


def _repos(*slugs):
    return [Repository(slug=slug, endpoint=Endpoint.PUBLIC) for slug in slugs]


def test_restart_repos_skips_non_matching_slugs(capsys):
    service = MagicMock(dry_run=False)
    summary = runner.restart_repos(service, _repos("o/plugin-a", "o/core"), re.compile("plugin-"))
    service.restart_latest_build.assert_called_once_with("o/plugin-a", Endpoint.PUBLIC)
    assert summary.restarted == ["o/plugin-a"]
    assert summary.skipped == ["o/core"]
    assert "Skipping repo o/core" in capsys.readouterr().out


def test_restart_repos_continues_after_failures(capsys):
    service = MagicMock(dry_run=False)
    service.restart_latest_build.side_effect = [NoBuildsError("none"), NoMatchingBuildError("dev only"), 5]
    summary = runner.restart_repos(service, _repos("a/a", "b/b", "c/c"))
    assert service.restart_latest_build.call_count == 3
    assert summary.failed == ["a/a", "b/b"]
    assert summary.restarted == ["c/c"]
    out = capsys.readouterr().out
    assert "Failed to restart latest build for a/a: none" in out
    assert "Restarted latest build for repo c/c." in out


@pytest.mark.parametrize(
    "error",
    [
        MalformedBuildError("Build ID cannot be found"),
        TransportError("GET failed", "https://api.travis-ci.org/repos/a/a/builds", status_code=500),
        DecodeError("https://api.travis-ci.org/repos/a/a/builds", "<html>"),
        KeyError("id"),
    ],
)
def test_restart_repos_isolates_any_failure(error, capsys):
    service = MagicMock(dry_run=False)
    service.restart_latest_build.side_effect = [error, 9]
    summary = runner.restart_repos(service, _repos("a/a", "b/b"))
    assert [call.args[0] for call in service.restart_latest_build.call_args_list] == ["a/a", "b/b"]
    assert summary.failed == ["a/a"]
    assert summary.restarted == ["b/b"]
    assert "Failed to restart latest build for a/a" in capsys.readouterr().out


def test_malformed_payload_does_not_stop_next_repo(capsys):
    client = MagicMock()
    payloads = {
        "/repos/a/a/builds": {"builds": [{"id": 1, "commit_id": 1}], "commits": [None]},
        "/repos/b/b/builds": {"builds": [{"id": 2, "commit_id": 7}], "commits": [{"id": 7, "branch": "master"}]},
    }
    client.get.side_effect = lambda path, endpoint: payloads[path]
    service = RestartService(client)

    summary = runner.restart_repos(service, _repos("a/a", "b/b"))

    assert summary.failed == ["a/a"]
    assert summary.restarted == ["b/b"]
    client.post.assert_called_once_with("/builds/2/restart", Endpoint.PUBLIC)


def test_dry_run_reports_decision_once(capsys):
    client = MagicMock()
    client.get.return_value = {"builds": [{"id": 2, "commit_id": 7}], "commits": [{"id": 7, "branch": "master"}]}
    service = RestartService(client, dry_run=True)

    runner.restart_repos(service, _repos("b/b"))

    out = capsys.readouterr().out
    assert out == "[dry-run] Restarting build 2 for b/b.\n"
    client.post.assert_not_called()


def test_run_authenticates_lists_and_restarts(capsys):
    service = MagicMock(dry_run=True)
    service.list_repositories.return_value = _repos("o/r")
    service.restart_latest_build.return_value = 42

    summary = runner.run(_settings(dry_run=True, skip_pro=True), service=service)

    service.authenticate.assert_called_once_with("gh", True, False)
    service.list_repositories.assert_called_once_with("me", True, False)
    assert summary.restarted == ["o/r"]
    out = capsys.readouterr().out
    assert "Skipping Travis PRO repos" in out
    assert "Would restart" not in out
    assert "Repos that would be restarted (1):" in out
    assert out.rstrip().endswith("Done.")


def test_main_exits_on_missing_token(capsys):
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--github-token", "", "--github-user", "me"])
    assert excinfo.value.code == 1
    assert "--github-token required" in capsys.readouterr().out


@patch("src.restart.runner.run")
def test_main_exits_on_authentication_failure(mock_run, capsys):
    mock_run.side_effect = AuthenticationError("https://api.travis-ci.org", {})
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--github-token", "gh", "--github-user", "me"])
    assert excinfo.value.code == 1
    assert "w/o access_token" in capsys.readouterr().out


@patch("src.restart.runner.run")
def test_main_returns_zero_on_success(mock_run):
    assert runner.main(["--github-token", "gh", "--github-user", "me", "--include", "x"]) == 0
    settings = mock_run.call_args.args[0]
    assert settings.include.pattern == "x"
