"""GitHub Actions step outputs."""

from __future__ import annotations

import logging
import os
import uuid

logger = logging.getLogger(__name__)


def set_output(name: str, value: str) -> bool:
    """Append ``name=value`` to $GITHUB_OUTPUT.

    Multi-line values use the heredoc form. Returns False when not running
    under GitHub Actions.
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("GITHUB_OUTPUT not set; skipping output %s", name)
        return False

    with open(output_file, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")
    return True
