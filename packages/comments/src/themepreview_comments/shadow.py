"""Shadow comment client: dry-run mode.

Reads go to the wrapped client so the lifecycle manager takes the same
decision it would take for real; writes are printed to the terminal and
never sent. Without a wrapped client the pull request looks comment-free.
"""

from __future__ import annotations

from rich.console import Console

from themepreview_comments.base import CommentClient
from themepreview_comments.models import Comment

console = Console()

SHADOW_COMMENT_ID = 0


class ShadowCommentClient(CommentClient):
    """Records intended writes instead of performing them."""

    def __init__(self, inner: CommentClient | None = None):
        self._inner = inner
        self.writes: list[tuple] = []

    def list_comments(self, issue_number: int) -> list[Comment]:
        if self._inner is None:
            return []
        return self._inner.list_comments(issue_number)

    def create_comment(self, issue_number: int, body: str) -> Comment:
        self.writes.append(("create", issue_number, body))
        console.print(f"[bold]Shadow: would create a comment on #{issue_number}[/bold]\n")
        console.print(body, markup=False, highlight=False)
        return Comment(id=SHADOW_COMMENT_ID, author=None, body=body)

    def update_comment(self, comment_id: int, body: str) -> None:
        self.writes.append(("update", comment_id, body))
        console.print(f"[bold]Shadow: would update comment {comment_id}[/bold]\n")
        console.print(body, markup=False, highlight=False)

    def delete_comment(self, comment_id: int) -> None:
        self.writes.append(("delete", comment_id))
        console.print(f"[bold]Shadow: would delete comment {comment_id}[/bold]")

    def get_description(self, pr_number: int) -> str:
        if self._inner is None:
            return ""
        return self._inner.get_description(pr_number)

    def update_description(self, pr_number: int, body: str) -> None:
        self.writes.append(("describe", pr_number, body))
        console.print(f"[bold]Shadow: would update the description of #{pr_number}[/bold]\n")
        console.print(body, markup=False, highlight=False)

    def close(self) -> None:
        if self._inner is not None:
            self._inner.close()
