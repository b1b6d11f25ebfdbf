"""Keep a managed preview block inside the pull request description.

The block is delimited by two HTML comments so it is invisible when
rendered and can be found again on the next push::

    <!-- theme-preview:start -->
    ### Preview changes
    ...
    <!-- theme-preview:end -->

Content between the markers that lacks the comment marker is a placeholder
the author put there on purpose; it is never overwritten or removed. When the
author deleted the whole block, it is only put back if ``restore_if_removed``
is set.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from themepreview_core.lifecycle import CREATED, DELETED, NOOP, SKIPPED, UNCHANGED, UPDATED, ReconcileResult
from themepreview_core.renderer import COMMENT_MARKER

if TYPE_CHECKING:
    from themepreview_comments.base import CommentClient

logger = logging.getLogger(__name__)

DESCRIPTION_MARKER_START = "<!-- theme-preview:start -->"
DESCRIPTION_MARKER_END = "<!-- theme-preview:end -->"

_BLOCK_RE = re.compile(re.escape(DESCRIPTION_MARKER_START) + r"(.*?)" + re.escape(DESCRIPTION_MARKER_END), re.S)


def managed_block(content: str) -> str:
    return f"{DESCRIPTION_MARKER_START}\n{content.strip()}\n{DESCRIPTION_MARKER_END}"


class DescriptionBlockManager:
    """Creates, updates or removes the preview block in a pull request description."""

    def __init__(self, client: CommentClient, restore_if_removed: bool = True, marker: str = COMMENT_MARKER):
        self._client = client
        self._restore_if_removed = restore_if_removed
        self._marker = marker

    def _is_placeholder(self, match: re.Match) -> bool:
        existing = match.group(1).strip()
        return bool(existing) and self._marker not in existing

    def reconcile(self, pr_number: int, content: str | None) -> ReconcileResult:
        """Bring the block on ``pr_number`` in line with ``content``; None removes it."""
        if content is None:
            return self.remove(pr_number)

        body = self._client.get_description(pr_number) or ""
        block = managed_block(content)
        match = _BLOCK_RE.search(body)

        if match:
            if self._is_placeholder(match):
                logger.info("Placeholder between the preview markers on #%d; leaving it", pr_number)
                return ReconcileResult(SKIPPED)
            new_body = body[: match.start()] + block + body[match.end() :]
            action = UPDATED
        else:
            if not self._restore_if_removed:
                logger.info("No preview block on #%d and restoring is disabled", pr_number)
                return ReconcileResult(SKIPPED)
            trimmed = body.rstrip()
            new_body = f"{trimmed}\n\n{block}" if trimmed else block
            action = CREATED

        if new_body == body:
            logger.info("Preview block on #%d is up to date", pr_number)
            return ReconcileResult(UNCHANGED)

        logger.info("Writing preview block to the description of #%d", pr_number)
        self._client.update_description(pr_number, new_body)
        return ReconcileResult(action)

    def remove(self, pr_number: int) -> ReconcileResult:
        """Strip the managed block from the description, if there is one."""
        body = self._client.get_description(pr_number) or ""
        match = _BLOCK_RE.search(body)
        if match is None:
            return ReconcileResult(NOOP)
        if self._is_placeholder(match):
            logger.debug("Keeping the placeholder between the preview markers on #%d", pr_number)
            return ReconcileResult(NOOP)

        new_body = (body[: match.start()] + body[match.end() :].lstrip()).rstrip()
        logger.info("Removing preview block from the description of #%d", pr_number)
        self._client.update_description(pr_number, new_body)
        return ReconcileResult(DELETED)
