"""CLI entry point for themepreview.

Commands:
  detect   list the themes touched by the current changes
  preview  post, update or remove the preview links comment on a pull request
  delete   remove the preview links comment
  init     write .themepreview.yml and a GitHub Actions workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from themepreview_cli.commands.delete import delete_cmd
from themepreview_cli.commands.detect import detect_cmd
from themepreview_cli.commands.init import init_cmd
from themepreview_cli.commands.preview import preview_cmd
from themepreview_core.exceptions import ThemePreviewError

console = Console()


def _build_client(config: dict, repo_full_name: str, shadow: bool = False):
    """Instantiate the comment client for ``repo_full_name``.

    Client selection:
      shadow, no token → ShadowCommentClient over nothing (PR looks comment-free)
      shadow, token    → ShadowCommentClient over GithubCommentClient (real reads)
      otherwise        → GithubCommentClient (requires github_token)
    """
    from themepreview_comments.shadow import ShadowCommentClient

    token = config.get("github_token")

    if shadow:
        if not token:
            return ShadowCommentClient()
        from themepreview_comments.github import GithubCommentClient

        return ShadowCommentClient(GithubCommentClient(repo_full_name, token))

    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first, "
            "or use --shadow for a dry run."
        )
    from themepreview_comments.github import GithubCommentClient

    return GithubCommentClient(repo_full_name, token)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


class ThemePreviewGroup(click.Group):
    """Command group that turns pipeline errors into a failed run with a message."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except ThemePreviewError as e:
            logging.getLogger(__name__).debug("Run failed", exc_info=True)
            raise click.ClickException(str(e)) from e


@click.group(cls=ThemePreviewGroup)
@click.version_option(
    version=importlib.metadata.version("theme-preview"),
    prog_name="themepreview",
)
@click.option(
    "--config",
    "config_path",
    default=".themepreview.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="THEMEPREVIEW_CONFIG",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, debug: bool):
    """Preview links for changed WordPress themes in pull requests."""
    from themepreview_core.config import load_config
    from themepreview_cli.auth import resolve_github_token

    _configure_logging(debug)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(detect_cmd)
main.add_command(preview_cmd)
main.add_command(delete_cmd)
main.add_command(init_cmd)
