"""User-configurable templates for the preview comment and description block.

Placeholders are written ``{{NAME}}`` (case-insensitive, optional inner
spaces). Values are HTML-escaped so pull request titles or branch names
cannot inject markup, except for the variables in RAW_VARIABLES, which are
pre-rendered markup themselves. Unknown placeholders render as "".
"""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from themepreview_core.gh.pull_request import PullRequestContext
    from themepreview_core.renderer import PreviewLink

_PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")

RAW_VARIABLES = frozenset({"PLAYGROUND_BUTTON", "PREVIEW_LINKS"})

BUTTON_IMAGE_URL = (
    "https://raw.githubusercontent.com/adamziel/playground-preview/refs/heads/trunk/assets/playground-preview-button.svg"
)

_BUTTON_TEMPLATE = "\n".join(
    [
        '<a href="{{PLAYGROUND_URL}}" target="_blank" rel="noopener noreferrer">',
        '  <img src="{{PLAYGROUND_BUTTON_IMAGE_URL}}" alt="Open WordPress Playground Preview" width="220" height="57" />',
        "</a>",
    ]
)


def substitute(template: str, values: Mapping[str, str], raw: frozenset = RAW_VARIABLES) -> str:
    """Replace every ``{{NAME}}`` in ``template`` with ``values[NAME]``."""
    if not template:
        return ""

    def replace(match: re.Match) -> str:
        key = match.group(1).upper()
        value = values.get(key, "")
        return value if key in raw else html.escape(value, quote=True)

    return _PLACEHOLDER_RE.sub(replace, template)


def context_variables(context: PullRequestContext) -> dict[str, str]:
    """Template variables describing the pull request."""
    return {
        "PR_NUMBER": str(context.number),
        "PR_HEAD_REF": context.head_ref,
        "REPO_OWNER": context.owner,
        "REPO_NAME": context.repo,
        "REPO_FULL_NAME": context.full_name,
    }


def link_variables(links: list[PreviewLink], playground_url: str) -> dict[str, str]:
    """Template variables describing the preview links.

    The single-link variables (PLAYGROUND_URL and friends) refer to the first
    link; PREVIEW_LINKS holds the markdown list of all of them.
    """
    first = links[0] if links else None
    values = {
        "PLAYGROUND_HOST": playground_url.rstrip("/"),
        "PLAYGROUND_URL": first.url if first else "",
        "PLAYGROUND_BLUEPRINT_JSON": first.blueprint if first else "",
        "PLAYGROUND_BUTTON_IMAGE_URL": BUTTON_IMAGE_URL,
        "THEME_SLUG": first.slug if first else "",
        "CHANGED_THEMES": ", ".join(link.name for link in links),
        "PREVIEW_LINKS": "\n".join(link.markdown() for link in links),
    }
    values["PLAYGROUND_BUTTON"] = substitute(_BUTTON_TEMPLATE, values) if first else ""
    return values
