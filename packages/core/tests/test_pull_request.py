"""Tests for GitHub pull request helper functions."""

import json
from unittest.mock import MagicMock

import pytest
from github import GithubException

from themepreview_core.exceptions import MissingContextError, PlatformAPIError
from themepreview_core.gh.pull_request import (
    PullRequestContext,
    context_from_event,
    get_changed_filenames,
    load_pull_request_context,
)

EVENT = {
    "action": "synchronize",
    "pull_request": {"number": 12, "head": {"ref": "update-theme1"}},
    "repository": {"full_name": "Automattic/themes"},
}


class TestContextFromEvent:
    def test_builds_context(self):
        context = context_from_event(EVENT)
        assert context == PullRequestContext(number=12, head_ref="update-theme1", owner="Automattic", repo="themes")
        assert context.full_name == "Automattic/themes"

    def test_explicit_repository_wins(self):
        context = context_from_event(EVENT, repository="fork/themes")
        assert context.owner == "fork"

    def test_missing_pull_request_raises(self):
        with pytest.raises(MissingContextError, match="No pull request"):
            context_from_event({"action": "push", "repository": {"full_name": "o/r"}})

    def test_missing_repository_raises(self):
        with pytest.raises(MissingContextError):
            context_from_event({"pull_request": EVENT["pull_request"]})

    def test_incomplete_pull_request_raises(self):
        with pytest.raises(MissingContextError):
            context_from_event({"pull_request": {"number": 3}, "repository": {"full_name": "o/r"}})


class TestLoadPullRequestContext:
    def test_reads_event_file(self, tmp_path):
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(EVENT))
        context = load_pull_request_context(str(event_path))
        assert context.number == 12

    def test_falls_back_to_environment(self, tmp_path, monkeypatch):
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(EVENT))
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_path))
        monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
        context = load_pull_request_context()
        assert context.full_name == "env/repo"

    def test_missing_event_path_raises(self, monkeypatch):
        monkeypatch.delenv("GITHUB_EVENT_PATH", raising=False)
        with pytest.raises(MissingContextError):
            load_pull_request_context()

    def test_nonexistent_event_file_raises(self, tmp_path):
        with pytest.raises(MissingContextError):
            load_pull_request_context(str(tmp_path / "missing.json"))

    def test_malformed_event_file_raises(self, tmp_path):
        event_path = tmp_path / "event.json"
        event_path.write_text("{not json")
        with pytest.raises(MissingContextError, match="Could not read event payload"):
            load_pull_request_context(str(event_path))

    def test_unreadable_event_file_raises(self, tmp_path):
        with pytest.raises(MissingContextError, match="Could not read event payload"):
            load_pull_request_context(str(tmp_path))

    def test_non_object_payload_raises(self, tmp_path):
        event_path = tmp_path / "event.json"
        event_path.write_text("[1, 2]")
        with pytest.raises(MissingContextError):
            load_pull_request_context(str(event_path))


class TestGetChangedFilenames:
    def test_returns_filenames(self):
        pr = MagicMock()
        pr.get_files.return_value = [MagicMock(filename="theme1/style.css"), MagicMock(filename="README.md")]
        assert get_changed_filenames(pr) == ["theme1/style.css", "README.md"]

    def test_api_failure_raises_platform_error(self):
        pr = MagicMock()
        pr.number = 4
        pr.get_files.side_effect = GithubException(500, "boom", None)
        with pytest.raises(PlatformAPIError):
            get_changed_filenames(pr)
