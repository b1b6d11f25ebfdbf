"""Create, update or delete the single preview comment on a pull request.

Per pull request there are two states, no comment and comment present:

    no comment      --changes-->     comment present   (create)
    comment present --changes-->     comment present   (update in place)
    comment present --no changes-->  no comment        (delete)
    no comment      --no changes-->  no comment        (nothing to do)

The state is discovered afresh on every run by listing the comments. The
listing always completes before any write is issued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from themepreview_core.renderer import COMMENT_MARKER

if TYPE_CHECKING:
    from themepreview_comments.base import CommentClient
    from themepreview_comments.models import Comment

logger = logging.getLogger(__name__)

DEFAULT_BOT_LOGIN = "github-actions[bot]"

CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"
DELETED = "deleted"
NOOP = "noop"
SKIPPED = "skipped"


@dataclass(frozen=True)
class ReconcileResult:
    """What reconcile() did, and the id of the managed comment it touched."""

    action: str  # "created" | "updated" | "unchanged" | "deleted" | "noop" | "skipped"
    comment_id: int | None = None


class CommentLifecycleManager:
    """Keeps at most one managed preview comment on each pull request.

    A comment is managed when it was written by ``bot_login`` and its body
    contains ``marker``.
    """

    def __init__(self, client: CommentClient, bot_login: str = DEFAULT_BOT_LOGIN, marker: str = COMMENT_MARKER):
        self._client = client
        self._bot_login = bot_login
        self._marker = marker

    def is_managed(self, comment: Comment) -> bool:
        return comment.author == self._bot_login and self._marker in (comment.body or "")

    def find_managed_comment(self, pr_number: int) -> Comment | None:
        """Return the first managed comment in list order, or None."""
        managed = [c for c in self._client.list_comments(pr_number) if self.is_managed(c)]
        if not managed:
            return None
        if len(managed) > 1:
            # Left as is: only the first one is kept up to date.
            logger.warning(
                "Found %d managed comments on #%d; using %s",
                len(managed),
                pr_number,
                managed[0].id,
            )
        return managed[0]

    def reconcile(self, pr_number: int, desired_body: str | None) -> ReconcileResult:
        """Bring the managed comment on ``pr_number`` in line with ``desired_body``.

        ``None`` means there is nothing to preview and the comment should go.
        API failures propagate; no compensating action is attempted.
        """
        existing = self.find_managed_comment(pr_number)

        if desired_body is None:
            if existing is None:
                logger.debug("No managed comment on #%d and nothing to preview", pr_number)
                return ReconcileResult(NOOP)
            logger.info("Deleting preview comment %s on #%d", existing.id, pr_number)
            self._client.delete_comment(existing.id)
            return ReconcileResult(DELETED, existing.id)

        if existing is not None:
            if existing.body == desired_body:
                logger.info("Preview comment %s on #%d is up to date", existing.id, pr_number)
                return ReconcileResult(UNCHANGED, existing.id)
            logger.info("Updating preview comment %s on #%d", existing.id, pr_number)
            self._client.update_comment(existing.id, desired_body)
            return ReconcileResult(UPDATED, existing.id)

        logger.info("Creating preview comment on #%d", pr_number)
        created = self._client.create_comment(pr_number, desired_body)
        return ReconcileResult(CREATED, created.id)

    def delete(self, pr_number: int) -> ReconcileResult:
        return self.reconcile(pr_number, None)
