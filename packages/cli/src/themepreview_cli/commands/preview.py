"""preview command: keep the preview links comment on a pull request up to date."""

from __future__ import annotations

import json

import click
from rich.console import Console

from themepreview_cli.inputs import collect_changed_files, resolve_context
from themepreview_cli.outputs import set_output
from themepreview_core.config import DESCRIPTION_MODE, PREVIEW_MODES, validate_config
from themepreview_core.lifecycle import CREATED, DELETED, NOOP, SKIPPED, UNCHANGED, UPDATED
from themepreview_core.preview import PreviewSummary, run_preview

console = Console()

_ACTION_MESSAGES = {
    CREATED: "[green]Preview comment created ({id}).[/green]",
    UPDATED: "[green]Preview comment updated ({id}).[/green]",
    UNCHANGED: "[green]Preview comment already up to date ({id}).[/green]",
    DELETED: "[yellow]No theme changes; preview comment {id} removed.[/yellow]",
    NOOP: "[yellow]No theme changes; nothing to post.[/yellow]",
}

_DESCRIPTION_MESSAGES = {
    CREATED: "[green]Preview block added to the description.[/green]",
    UPDATED: "[green]Preview block in the description updated.[/green]",
    UNCHANGED: "[green]Preview block in the description already up to date.[/green]",
    DELETED: "[yellow]No theme changes; preview block removed from the description.[/yellow]",
    NOOP: "[yellow]No theme changes; nothing to add to the description.[/yellow]",
    SKIPPED: "[yellow]Description left as the author arranged it.[/yellow]",
}


def _write_outputs(summary: PreviewSummary) -> None:
    set_output("mode", summary.mode)
    set_output("has-theme-changes", "true" if summary.change_set.has_changes else "false")
    set_output("changed-themes", json.dumps(summary.change_set.themes))
    set_output("comment-action", summary.result.action if summary.result else "")
    set_output("comment-id", str(summary.comment_id) if summary.comment_id is not None else "")
    set_output("preview-url", summary.preview_url or "")
    set_output("blueprint-json", summary.blueprint or "")
    set_output("rendered-comment", summary.body or "")


@click.command("preview")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to GITHUB_REPOSITORY.")
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Pull request number. Defaults to the pull request of the triggering event.",
)
@click.option("--head-ref", default=None, help="Branch holding the changes. Looked up from the PR when omitted.")
@click.option(
    "--files",
    "files_path",
    default=None,
    type=click.Path(allow_dash=True),
    help="Newline-separated list of changed files ('-' for stdin). Defaults to the configured diff source.",
)
@click.option("--base-ref", default=None, help="Ref to diff HEAD against. Overrides config file.")
@click.option("--root", default=".", show_default=True, type=click.Path(file_okay=False), help="Repository root.")
@click.option(
    "--single-theme/--multi-theme",
    "single_theme",
    default=None,
    help="Treat the repository as one theme. Overrides config file.",
)
@click.option("--theme-dir", default=None, help="Theme directory in single-theme mode. Overrides config file.")
@click.option(
    "--mode",
    "preview_mode",
    type=click.Choice(PREVIEW_MODES),
    default=None,
    help="Post the links as a comment or in the PR description. Overrides config file.",
)
@click.option("--blueprint", default=None, help="Blueprint JSON used instead of the generated one. Overrides config file.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the comment instead of posting it to GitHub.",
)
@click.pass_context
def preview_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    head_ref: str | None,
    files_path: str | None,
    base_ref: str | None,
    root: str,
    single_theme: bool | None,
    theme_dir: str | None,
    preview_mode: str | None,
    blueprint: str | None,
    shadow: bool,
):
    """Post WordPress Playground preview links for changed themes.

    Creates the preview comment when themes changed, updates it on later
    pushes, and removes it once the pull request no longer touches a theme.
    With --mode append-to-description the links live in a block of the PR
    description instead.

    \b
    Environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI)
      GITHUB_EVENT_PATH    Event payload, used when --pr is omitted
      GITHUB_REPOSITORY    owner/name, used when --repo is omitted
    """
    from themepreview_cli.cli import _build_client

    config = dict(ctx.obj["config"])
    overrides = {
        "base_ref": base_ref,
        "single_theme": single_theme,
        "theme_dir": theme_dir,
        "preview_mode": preview_mode,
        "blueprint": blueprint,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    validate_config(config)

    event_name = config.get("github_event_name")
    if pr_number is None and event_name and event_name not in config.get("events", []):
        console.print(f"[yellow]Skipping: event '{event_name}' does not trigger previews.[/yellow]")
        return

    context = resolve_context(config, repo, pr_number, head_ref)
    console.print(f"Pull request [bold]#{context.number}[/bold] on {context.full_name} ({context.head_ref})")

    changed_files = collect_changed_files(config, files_path, root, context)

    client = _build_client(config, context.full_name, shadow=shadow)
    try:
        summary = run_preview(context, changed_files, client, config, root)
    finally:
        client.close()

    _write_outputs(summary)
    messages = _DESCRIPTION_MESSAGES if summary.mode == DESCRIPTION_MODE else _ACTION_MESSAGES
    message = messages.get(summary.result.action, "{id}")
    console.print(message.format(id=summary.comment_id))
