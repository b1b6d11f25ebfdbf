"""Comment data models.

Decoupled from themepreview_core so comment clients can be used on their own
and the core never touches PyGithub objects directly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Comment:
    """A pull request comment as seen by a comment client."""

    id: int
    author: str | None
    body: str
