"""init command: set up theme previews for a repository.

Writes .themepreview.yml and, optionally, a GitHub Actions workflow that
runs `themepreview preview` on every pull request push and
`themepreview delete` when the pull request is closed.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)

_WORKFLOW_TEMPLATE = """\
name: Theme Preview

on:
  pull_request_target:
    types: [opened, synchronize, reopened, closed]

jobs:
  preview:
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: write

    steps:
      - uses: actions/checkout@v4
        with:
          ref: ${{{{ github.event.pull_request.head.sha }}}}
          fetch-depth: 0

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install theme-preview
        run: pip install "theme-preview=={version}"

      - name: Update preview links
        if: github.event.action != 'closed'
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
        run: themepreview preview --base-ref origin/{base_branch}

      - name: Remove preview links
        if: github.event.action == 'closed'
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
        run: themepreview delete
"""


@click.command("init")
@click.option("--single-theme", is_flag=True, help="The repository root is a single theme.")
@click.option("--base-branch", default=None, help="Branch pull requests target (e.g. trunk).")
def init_cmd(single_theme: bool, base_branch: str | None):
    """Set up theme previews for this repository.

    Creates .themepreview.yml and optionally a GitHub Actions workflow.
    """
    console.print("\n[bold cyan]themepreview init[/bold cyan]: repository setup\n")

    if base_branch is None:
        base_branch = click.prompt("Base branch pull requests target", default="trunk")

    config: dict = {"base_ref": f"origin/{base_branch}"}
    if single_theme:
        config["single_theme"] = True
        config["theme_dir"] = click.prompt("Theme directory", default=".")
        slug = click.prompt("Theme slug (used when style.css has no Text Domain)", default="", show_default=False)
        if slug:
            config["theme_slug"] = slug

    config["install_theme_check"] = click.confirm("Install the Theme Check plugin in previews?", default=True)

    _write_config(config)
    console.print("[green]Created .themepreview.yml[/green]")

    if click.confirm("\nGenerate .github/workflows/theme-preview.yml for GitHub Actions?", default=True):
        _write_workflow(base_branch)
        console.print("[green]Created .github/workflows/theme-preview.yml[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Try it locally with: [bold]themepreview detect[/bold]")


def _write_config(config: dict) -> None:
    """Write or update .themepreview.yml, preserving any existing keys."""
    path = Path(".themepreview.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _get_version() -> str:
    """Read the installed theme-preview version from package metadata."""
    try:
        from importlib.metadata import version

        return version("theme-preview")
    except Exception:
        logger.debug("theme-preview metadata not found", exc_info=True)
        return "0.1.0"


def _write_workflow(base_branch: str) -> None:
    workflow_dir = Path(".github/workflows")
    workflow_dir.mkdir(parents=True, exist_ok=True)
    (workflow_dir / "theme-preview.yml").write_text(
        _WORKFLOW_TEMPLATE.format(version=_get_version(), base_branch=base_branch)
    )
