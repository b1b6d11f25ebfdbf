"""GithubCommentClient: pull request comments through the GitHub REST API.

Pull request conversation comments are issue comments in the GitHub API, so
they go through the issue endpoints. PyGithub's PaginatedList walks every
page of the listing. The description is the pull request body.
"""

from __future__ import annotations

import logging

from github import Auth, Github, GithubException

from themepreview_comments.base import CommentClient
from themepreview_comments.models import Comment
from themepreview_core.exceptions import PlatformAPIError

logger = logging.getLogger(__name__)


class GithubCommentClient(CommentClient):
    """Reads and writes comments on one repository's pull requests."""

    def __init__(self, repo_full_name: str, token: str):
        self._repo_full_name = repo_full_name
        self._gh = Github(auth=Auth.Token(token))
        self._repo = None

    def _get_repo(self):
        if self._repo is None:
            try:
                self._repo = self._gh.get_repo(self._repo_full_name)
            except GithubException as e:
                raise PlatformAPIError(f"Could not access repository {self._repo_full_name}: {e}") from e
        return self._repo

    def list_comments(self, issue_number: int) -> list[Comment]:
        try:
            issue = self._get_repo().get_issue(issue_number)
            comments = [self._to_comment(c) for c in issue.get_comments()]
        except GithubException as e:
            raise PlatformAPIError(f"Could not list comments on #{issue_number}: {e}") from e
        logger.debug("Listed %d comment(s) on %s#%d", len(comments), self._repo_full_name, issue_number)
        return comments

    def create_comment(self, issue_number: int, body: str) -> Comment:
        try:
            created = self._get_repo().get_issue(issue_number).create_comment(body)
        except GithubException as e:
            raise PlatformAPIError(f"Could not create comment on #{issue_number}: {e}") from e
        return self._to_comment(created)

    def update_comment(self, comment_id: int, body: str) -> None:
        try:
            self._get_repo().get_issue_comment(comment_id).edit(body)
        except GithubException as e:
            raise PlatformAPIError(f"Could not update comment {comment_id}: {e}") from e

    def delete_comment(self, comment_id: int) -> None:
        try:
            self._get_repo().get_issue_comment(comment_id).delete()
        except GithubException as e:
            raise PlatformAPIError(f"Could not delete comment {comment_id}: {e}") from e

    def get_description(self, pr_number: int) -> str:
        try:
            pull = self._get_repo().get_pull(pr_number)
        except GithubException as e:
            raise PlatformAPIError(f"Could not read the description of #{pr_number}: {e}") from e
        return pull.body or ""

    def update_description(self, pr_number: int, body: str) -> None:
        try:
            self._get_repo().get_pull(pr_number).edit(body=body)
        except GithubException as e:
            raise PlatformAPIError(f"Could not update the description of #{pr_number}: {e}") from e
        logger.debug("Updated description of %s#%d", self._repo_full_name, pr_number)

    def close(self) -> None:
        self._gh.close()

    @staticmethod
    def _to_comment(issue_comment) -> Comment:
        user = issue_comment.user
        return Comment(
            id=issue_comment.id,
            author=user.login if user is not None else None,
            body=issue_comment.body or "",
        )
