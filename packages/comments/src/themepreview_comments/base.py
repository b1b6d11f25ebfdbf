"""Abstract comment client interface.

The lifecycle manager depends on CommentClient, not on a concrete backend,
so it can run against GitHub, a dry-run client, or a test double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from themepreview_comments.models import Comment


class CommentClient(ABC):
    """Capability to read and write comments and descriptions of one repository's pull requests.

    Implementations surface failures as PlatformAPIError and never retry;
    retry policy, if any, belongs to the HTTP layer underneath.
    """

    @abstractmethod
    def list_comments(self, issue_number: int) -> list[Comment]:
        """Return every comment on the pull request, following pagination."""

    @abstractmethod
    def create_comment(self, issue_number: int, body: str) -> Comment:
        """Post a new comment and return it."""

    @abstractmethod
    def update_comment(self, comment_id: int, body: str) -> None:
        """Replace the body of an existing comment."""

    @abstractmethod
    def delete_comment(self, comment_id: int) -> None:
        """Delete a comment."""

    @abstractmethod
    def get_description(self, pr_number: int) -> str:
        """Return the pull request description, "" when it has none."""

    @abstractmethod
    def update_description(self, pr_number: int, body: str) -> None:
        """Replace the pull request description."""

    def close(self) -> None:
        """Release any resources held by the client.

        Default is a no-op so callers can always call close() safely.
        """
