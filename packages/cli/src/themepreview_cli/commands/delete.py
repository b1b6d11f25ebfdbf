"""delete command: remove the preview links comment from a pull request."""

from __future__ import annotations

import click
from rich.console import Console

from themepreview_cli.inputs import resolve_context
from themepreview_cli.outputs import set_output
from themepreview_core.description import DescriptionBlockManager
from themepreview_core.lifecycle import DEFAULT_BOT_LOGIN, DELETED, CommentLifecycleManager

console = Console()


@click.command("delete")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to GITHUB_REPOSITORY.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. Defaults to the event's PR.")
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: report the deletion without performing it.")
@click.pass_context
def delete_cmd(ctx, repo: str | None, pr_number: int | None, shadow: bool):
    """Delete the preview links comment and description block, e.g. when a pull request is closed."""
    from themepreview_cli.cli import _build_client

    config = ctx.obj["config"]
    context = resolve_context(config, repo, pr_number, need_head_ref=False)

    client = _build_client(config, context.full_name, shadow=shadow)
    try:
        manager = CommentLifecycleManager(client, bot_login=config.get("bot_login", DEFAULT_BOT_LOGIN))
        result = manager.delete(context.number)
        block_result = DescriptionBlockManager(client).remove(context.number)
    finally:
        client.close()

    set_output("comment-action", result.action)
    if result.action == DELETED:
        console.print(f"[green]Deleted preview comment {result.comment_id} on #{context.number}.[/green]")
    else:
        console.print(f"[yellow]No preview comment found on #{context.number}.[/yellow]")
    if block_result.action == DELETED:
        console.print(f"[green]Removed the preview block from the description of #{context.number}.[/green]")
