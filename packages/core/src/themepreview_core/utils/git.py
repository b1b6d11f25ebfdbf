"""Changed-file listing from the local git checkout."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from themepreview_core.exceptions import ChangedFilesError

logger = logging.getLogger(__name__)

_GIT_TIMEOUT = 60


def parse_changed_files(text: str) -> list[str]:
    """Split a newline-separated file list, dropping blank lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _run_git(args: list[str], cwd: Path) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise ChangedFilesError(f"git {' '.join(args)} failed: {e}") from e
    if result.returncode != 0:
        raise ChangedFilesError(f"git {' '.join(args)} failed: {result.stderr.strip()}")
    return result.stdout


def get_changed_files_from_git(base_ref: str = "origin/trunk", cwd: str | Path = ".", fetch: bool = True) -> list[str]:
    """Return files that differ between ``base_ref`` and HEAD.

    With ``fetch``, the base ref's remote is fetched first so the comparison
    is against its latest state.
    """
    cwd = Path(cwd)
    if fetch and "/" in base_ref:
        remote = base_ref.split("/", 1)[0]
        logger.debug("Fetching %s", remote)
        _run_git(["fetch", remote], cwd)

    files = parse_changed_files(_run_git(["diff", "--name-only", base_ref, "HEAD"], cwd))
    logger.info("%d file(s) changed against %s", len(files), base_ref)
    return files
