"""Tests for git changed-file listing."""

import subprocess
from unittest.mock import MagicMock

import pytest

from themepreview_core.exceptions import ChangedFilesError
from themepreview_core.utils.git import get_changed_files_from_git, parse_changed_files


def test_parse_changed_files_drops_blank_lines():
    assert parse_changed_files("theme1/style.css\n\n  \ntheme2/a.php\n") == ["theme1/style.css", "theme2/a.php"]


def test_parse_changed_files_empty():
    assert parse_changed_files("") == []


class TestGetChangedFilesFromGit:
    def test_fetches_then_diffs(self, mocker):
        run = mocker.patch("subprocess.run")
        run.side_effect = [
            MagicMock(returncode=0, stdout=""),
            MagicMock(returncode=0, stdout="theme1/style.css\ntheme2/style.css\n"),
        ]

        files = get_changed_files_from_git("origin/trunk", cwd="/repo")

        assert files == ["theme1/style.css", "theme2/style.css"]
        assert run.call_args_list[0].args[0] == ["git", "fetch", "origin"]
        assert run.call_args_list[1].args[0] == ["git", "diff", "--name-only", "origin/trunk", "HEAD"]

    def test_no_fetch(self, mocker):
        run = mocker.patch("subprocess.run", return_value=MagicMock(returncode=0, stdout="a.css\n"))
        assert get_changed_files_from_git("origin/trunk", fetch=False) == ["a.css"]
        run.assert_called_once()

    def test_local_ref_is_not_fetched(self, mocker):
        run = mocker.patch("subprocess.run", return_value=MagicMock(returncode=0, stdout=""))
        get_changed_files_from_git("trunk")
        run.assert_called_once()

    def test_git_error_raises(self, mocker):
        mocker.patch("subprocess.run", return_value=MagicMock(returncode=128, stdout="", stderr="bad revision"))
        with pytest.raises(ChangedFilesError, match="bad revision"):
            get_changed_files_from_git("origin/trunk", fetch=False)

    def test_git_missing_raises(self, mocker):
        mocker.patch("subprocess.run", side_effect=FileNotFoundError("git"))
        with pytest.raises(ChangedFilesError):
            get_changed_files_from_git("origin/trunk")

    def test_timeout_raises(self, mocker):
        mocker.patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="git", timeout=60))
        with pytest.raises(ChangedFilesError):
            get_changed_files_from_git("origin/trunk")
