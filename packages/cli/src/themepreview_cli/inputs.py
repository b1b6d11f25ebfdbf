"""Resolve the pull request and changed files a command works on.

Explicit CLI options win; otherwise the GitHub Actions environment (event
payload, repository) is used.
"""

from __future__ import annotations

import logging

import click
from github import GithubException

from themepreview_core.exceptions import PlatformAPIError
from themepreview_core.gh.pull_request import (
    PullRequestContext,
    get_changed_filenames,
    get_pull,
    get_repo,
    load_pull_request_context,
)
from themepreview_core.utils.git import get_changed_files_from_git, parse_changed_files

logger = logging.getLogger(__name__)


def resolve_context(
    config: dict,
    repo: str | None,
    pr_number: int | None,
    head_ref: str | None = None,
    need_head_ref: bool = True,
) -> PullRequestContext:
    """Return the pull request context from options, the API, or the event payload."""
    if pr_number is None:
        return load_pull_request_context(config.get("github_event_path"), repo or config.get("github_repository"))

    repo = repo or config.get("github_repository")
    if not repo or "/" not in repo:
        raise click.UsageError("--repo owner/name is required when --pr is given outside GitHub Actions.")

    if head_ref is None and need_head_ref:
        token = config.get("github_token")
        if not token:
            raise click.UsageError("--head-ref is required when no GitHub token is available.")
        try:
            head_ref = get_pull(get_repo(repo, token), pr_number).head.ref
        except GithubException as e:
            raise PlatformAPIError(f"PR #{pr_number} not found in {repo}: {e}") from e
        logger.debug("Resolved head ref of #%d: %s", pr_number, head_ref)

    owner, _, name = repo.partition("/")
    return PullRequestContext(number=pr_number, head_ref=head_ref or "", owner=owner, repo=name)


def collect_changed_files(
    config: dict,
    files_path: str | None = None,
    root: str = ".",
    context: PullRequestContext | None = None,
) -> list[str]:
    """Return the changed files from --files, the pull request API, or git diff."""
    if files_path:
        with click.open_file(files_path, encoding="utf-8") as f:
            return parse_changed_files(f.read())

    if config.get("diff_source") == "api":
        token = config.get("github_token")
        if context is None or not token:
            raise click.UsageError("diff_source: api needs a pull request and a GitHub token.")
        try:
            pr = get_pull(get_repo(context.full_name, token), context.number)
        except GithubException as e:
            raise PlatformAPIError(f"PR #{context.number} not found in {context.full_name}: {e}") from e
        return get_changed_filenames(pr)

    return get_changed_files_from_git(config.get("base_ref", "origin/trunk"), root, config.get("fetch_base", True))
