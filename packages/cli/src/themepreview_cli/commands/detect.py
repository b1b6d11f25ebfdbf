"""detect command: show which themes the current changes touch."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from themepreview_cli.inputs import collect_changed_files
from themepreview_cli.outputs import set_output
from themepreview_core.detector import split_theme_key
from themepreview_core.preview import detect_changes

console = Console()


@click.command("detect")
@click.option(
    "--files",
    "files_path",
    default=None,
    type=click.Path(allow_dash=True),
    help="Newline-separated list of changed files ('-' for stdin). Defaults to git diff.",
)
@click.option("--base-ref", default=None, help="Ref to diff HEAD against. Overrides config file.")
@click.option("--root", default=".", show_default=True, type=click.Path(file_okay=False), help="Repository root.")
@click.option(
    "--single-theme/--multi-theme",
    "single_theme",
    default=None,
    help="Treat the repository as one theme. Overrides config file.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the theme mapping as JSON.")
@click.pass_context
def detect_cmd(
    ctx,
    files_path: str | None,
    base_ref: str | None,
    root: str,
    single_theme: bool | None,
    as_json: bool,
):
    """List the themes touched by the changed files.

    A file belongs to the closest directory above it holding a style.css with
    a Theme Name header. In single-theme mode any change under theme_dir
    counts as a change to that one theme.
    """
    config = dict(ctx.obj["config"])
    if base_ref:
        config["base_ref"] = base_ref
    if single_theme is not None:
        config["single_theme"] = single_theme
    if config.get("diff_source") == "api" and not files_path:
        # detect has no pull request to ask the API about
        config["diff_source"] = "git"

    changed_files = collect_changed_files(config, files_path, root)
    change_set = detect_changes(changed_files, config, root)

    set_output("has-theme-changes", "true" if change_set.has_changes else "false")
    set_output("changed-themes", json.dumps(change_set.themes))

    if as_json:
        click.echo(json.dumps(change_set.themes, indent=2))
        return

    if not change_set.has_changes:
        console.print("[yellow]No theme changes detected.[/yellow]")
        return

    table = Table(title="Changed themes", show_header=True, header_style="bold cyan")
    table.add_column("Theme", style="bold")
    table.add_column("Parent")
    table.add_column("Directory")
    for key, directory in change_set.themes.items():
        name, parent = split_theme_key(key)
        table.add_row(name, parent or "-", directory)

    console.print(table)
