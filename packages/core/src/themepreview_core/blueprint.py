"""WordPress Playground blueprint construction.

A blueprint is the JSON document Playground reads from the URL fragment to
provision a disposable site: log in, optionally install the Theme Check
plugin, install the theme from a zip served by the GitHub content proxy, and
activate it.

Everything here is a pure function of its arguments. Identical inputs produce
byte-identical JSON.
"""

from __future__ import annotations

import json
import logging
import re
from urllib.parse import urlencode

from themepreview_core.exceptions import InvalidBlueprintError

logger = logging.getLogger(__name__)

DEFAULT_PLAYGROUND_URL = "https://playground.wordpress.net"
DEFAULT_PROXY_URL = "https://github-proxy.com/proxy.php"
DEFAULT_VALIDATION_PLUGIN = "theme-check"

_UNSAFE_FOLDER_CHARS = re.compile(r"[^0-9A-Za-z]")


def build_proxy_url(
    repo: str,
    branch: str,
    theme_dir: str | None = None,
    proxy_url: str = DEFAULT_PROXY_URL,
) -> str:
    """Return the proxy URL serving a zip of the theme at ``branch``.

    With ``theme_dir`` only that directory is zipped (``action=partial``);
    without it the whole repository is the theme (``action=archive``).
    """
    params = {
        "action": "partial" if theme_dir else "archive",
        "repo": repo,
        "branch": branch,
    }
    if theme_dir:
        params["directory"] = theme_dir
    return f"{proxy_url}?{urlencode(params)}"


def branch_folder_segment(branch: str) -> str:
    """Return ``branch`` with every character outside [0-9A-Za-z] replaced by "-"."""
    return _UNSAFE_FOLDER_CHARS.sub("-", branch)


def theme_folder_name(theme_slug: str, branch: str, single_theme: bool) -> str:
    # Single-theme repositories are zipped whole, and the archive unpacks
    # into "<slug>-<branch>" with the branch made folder-safe.
    if single_theme:
        return f"{theme_slug}-{branch_folder_segment(branch)}"
    return theme_slug


def build_blueprint(
    theme_slug: str,
    branch_ref: str,
    repo_full_name: str,
    theme_dir: str | None = None,
    *,
    proxy_url: str = DEFAULT_PROXY_URL,
    install_validation_plugin: bool = True,
    validation_plugin: str = DEFAULT_VALIDATION_PLUGIN,
    username: str = "admin",
    password: str = "password",
) -> str:
    """Serialize the Playground steps previewing one theme as compact JSON.

    ``theme_dir`` is the theme's directory inside a multi-theme repository;
    leave it out when the repository itself is the theme.
    """
    folder = theme_folder_name(theme_slug, branch_ref, single_theme=theme_dir is None)

    steps: list[dict] = [{"step": "login", "username": username, "password": password}]
    if install_validation_plugin:
        steps.append(
            {
                "step": "installPlugin",
                "pluginData": {"resource": "wordpress.org/plugins", "slug": validation_plugin},
                "options": {"activate": True},
            }
        )
    steps.append(
        {
            "step": "installTheme",
            "themeData": {
                "resource": "url",
                "url": build_proxy_url(repo_full_name, branch_ref, theme_dir, proxy_url),
            },
            "options": {"activate": False, "targetFolderName": folder},
        }
    )
    steps.append({"step": "activateTheme", "themeFolderName": folder})

    blueprint = json.dumps({"steps": steps}, separators=(",", ":"), ensure_ascii=False)
    logger.debug("Blueprint for %s on %s@%s: %s", theme_slug, repo_full_name, branch_ref, blueprint)
    return blueprint


def preview_url(blueprint: str, playground_url: str = DEFAULT_PLAYGROUND_URL) -> str:
    return f"{playground_url.rstrip('/')}/#{blueprint}"


def normalize_blueprint(value) -> str | None:
    """Return a user-supplied blueprint as compact JSON, or None when unset.

    ``value`` is either JSON text or an already parsed mapping (a YAML config
    may hold either). Anything that does not decode to a JSON object raises
    InvalidBlueprintError.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except ValueError as e:
            raise InvalidBlueprintError(f"Blueprint is not valid JSON: {e}") from e
    if not isinstance(value, dict):
        raise InvalidBlueprintError(f"Blueprint must be a JSON object, got {type(value).__name__}.")
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
