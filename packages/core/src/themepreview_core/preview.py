"""Core preview pipeline: detect changed themes, render, reconcile the comment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Iterable

from rich.console import Console

from themepreview_core.config import COMMENT_MODE, DESCRIPTION_MODE
from themepreview_core.description import DescriptionBlockManager
from themepreview_core.detector import ThemeChangeSet, detect_theme_changes
from themepreview_core.lifecycle import DEFAULT_BOT_LOGIN, CommentLifecycleManager, ReconcileResult
from themepreview_core.manifest import MANIFEST_FILE, read_manifest
from themepreview_core.renderer import PreviewLink, build_links, build_single_theme_link, compose_body
from themepreview_core.templates import context_variables

if TYPE_CHECKING:
    from themepreview_comments.base import CommentClient
    from themepreview_core.gh.pull_request import PullRequestContext

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class PreviewSummary:
    """Result returned by run_preview: what was detected and what happened to the comment."""

    pr_number: int
    change_set: ThemeChangeSet = field(default_factory=ThemeChangeSet)
    body: str | None = None
    result: ReconcileResult | None = None
    links: list[PreviewLink] = field(default_factory=list)
    mode: str = COMMENT_MODE

    @property
    def comment_id(self) -> int | None:
        return self.result.comment_id if self.result else None

    @property
    def preview_url(self) -> str | None:
        return self.links[0].url if self.links else None

    @property
    def blueprint(self) -> str | None:
        return self.links[0].blueprint if self.links else None


def _touches(changed_file: str, theme_dir: str) -> bool:
    directory = PurePosixPath(theme_dir)
    if str(directory) == ".":
        return True
    return PurePosixPath(changed_file) == directory or directory in PurePosixPath(changed_file).parents


def detect_single_theme(changed_files: Iterable[str], config: dict, root: str | Path = ".") -> ThemeChangeSet:
    """Change set for a repository configured as one theme living in ``theme_dir``."""
    theme_dir = str(PurePosixPath(config.get("theme_dir") or "."))
    change_set = ThemeChangeSet()
    if any(_touches(f.strip(), theme_dir) for f in changed_files if f.strip()):
        manifest = read_manifest(Path(root) / theme_dir, config.get("manifest_file", MANIFEST_FILE))
        if manifest.name:
            change_set.add(manifest, theme_dir)
    return change_set


def detect_changes(changed_files: Iterable[str], config: dict, root: str | Path = ".") -> ThemeChangeSet:
    """Run single-theme or multi-theme detection, whichever ``config`` asks for."""
    if config.get("single_theme"):
        return detect_single_theme(changed_files, config, root)
    return detect_theme_changes(changed_files, root, config.get("manifest_file", MANIFEST_FILE))


def links_for(
    change_set: ThemeChangeSet, context: PullRequestContext, config: dict, root: str | Path = "."
) -> list[PreviewLink]:
    if not change_set.has_changes:
        return []
    if config.get("single_theme"):
        theme_dir = next(iter(change_set.themes.values()))
        return [build_single_theme_link(Path(root) / theme_dir, context.head_ref, context.full_name, config)]
    return build_links(change_set, context.head_ref, context.full_name, config, root)


def render_for(
    change_set: ThemeChangeSet,
    context: PullRequestContext,
    config: dict,
    root: str | Path = ".",
    links: list[PreviewLink] | None = None,
) -> str | None:
    """Render the comment or description body for ``change_set``, or None when nothing changed."""
    if not change_set.has_changes:
        return None
    if links is None:
        links = links_for(change_set, context, config, root)
    template_key = "description_template" if config.get("preview_mode") == DESCRIPTION_MODE else "comment_template"
    return compose_body(
        links,
        config,
        context_variables(context),
        single_theme=bool(config.get("single_theme")),
        template_key=template_key,
    )


def run_preview(
    context: PullRequestContext,
    changed_files: Iterable[str],
    client: CommentClient,
    config: dict,
    root: str | Path = ".",
) -> PreviewSummary:
    """Run the full preview pipeline for one pull request and return a PreviewSummary.

    In comment mode the managed comment is reconciled and any preview block
    left in the description is removed; in description mode it is the other
    way round. Any error aborts the run; what was already written stays.
    """
    changed_files = list(changed_files)
    change_set = detect_changes(changed_files, config, root)

    if change_set.has_changes:
        console.print(f"[cyan]Changed themes: {', '.join(change_set.themes)}[/cyan]")
    else:
        console.print("[yellow]No theme changes detected.[/yellow]")

    links = links_for(change_set, context, config, root)
    body = render_for(change_set, context, config, root, links)

    mode = config.get("preview_mode") or COMMENT_MODE
    comments = CommentLifecycleManager(client, bot_login=config.get("bot_login", DEFAULT_BOT_LOGIN))
    description = DescriptionBlockManager(client, restore_if_removed=config.get("restore_button_if_removed", True))

    if mode == DESCRIPTION_MODE:
        result = description.reconcile(context.number, body)
        comments.delete(context.number)
    else:
        result = comments.reconcile(context.number, body)
        description.remove(context.number)
    logger.debug("Reconciled #%d (%s): %s", context.number, mode, result)

    return PreviewSummary(
        pr_number=context.number,
        change_set=change_set,
        body=body,
        result=result,
        links=links,
        mode=mode,
    )
