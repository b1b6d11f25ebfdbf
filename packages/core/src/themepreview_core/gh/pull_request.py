from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from github import Auth, Github, GithubException

from themepreview_core.exceptions import MissingContextError, PlatformAPIError


@dataclass(frozen=True)
class PullRequestContext:
    """The pull request a run is about."""

    number: int
    head_ref: str
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def get_repo(repo_name: str, token: str):
    return Github(auth=Auth.Token(token)).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_changed_filenames(pr) -> list[str]:
    """Return the paths of every file changed by the pull request."""
    try:
        return [f.filename for f in pr.get_files()]
    except GithubException as e:
        raise PlatformAPIError(f"Could not list files of PR #{pr.number}: {e}") from e


def context_from_event(event: dict, repository: str | None = None) -> PullRequestContext:
    """Build a PullRequestContext from a GitHub webhook event payload."""
    pull_request = event.get("pull_request")
    if not pull_request:
        raise MissingContextError("No pull request found in the event payload.")

    full_name = repository or (event.get("repository") or {}).get("full_name") or ""
    owner, _, repo = full_name.partition("/")
    if not owner or not repo:
        raise MissingContextError("Could not determine the repository (owner/name) for this event.")

    try:
        return PullRequestContext(
            number=int(pull_request["number"]),
            head_ref=pull_request["head"]["ref"],
            owner=owner,
            repo=repo,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MissingContextError(f"Incomplete pull request data in the event payload: {e}") from e


def load_pull_request_context(event_path: str | None = None, repository: str | None = None) -> PullRequestContext:
    """Read the pull request context of the current GitHub Actions run.

    Defaults to GITHUB_EVENT_PATH and GITHUB_REPOSITORY.
    """
    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    repository = repository or os.environ.get("GITHUB_REPOSITORY")
    if not event_path or not Path(event_path).exists():
        raise MissingContextError("No event payload found. Is GITHUB_EVENT_PATH set?")

    try:
        with open(event_path, encoding="utf-8") as f:
            event = json.load(f)
    except (OSError, ValueError) as e:
        raise MissingContextError(f"Could not read event payload {event_path}: {e}") from e
    if not isinstance(event, dict):
        raise MissingContextError(f"Event payload {event_path} is not a JSON object.")
    return context_from_event(event, repository)
