"""Theme manifest parsing.

A theme is a directory holding a ``style.css`` whose header comment declares
the theme's metadata::

    /*
    Theme Name: Twenty Twenty-Four
    Template: twentytwentyfour
    Text Domain: twentytwentyfour-child
    */

The header is scanned line by line so repeated headers resolve predictably:
the first ``Theme Name`` wins, the last ``Template`` wins (a blank value
clears the parent) and the first ``Text Domain`` wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from themepreview_core.exceptions import ManifestReadError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "style.css"

_THEME_NAME_RE = re.compile(r"Theme Name:\s*(.*)")
_TEMPLATE_RE = re.compile(r"Template:\s*(.*)")
_TEXT_DOMAIN_RE = re.compile(r"Text Domain:\s*(.*)")


@dataclass(frozen=True)
class ThemeManifest:
    """Metadata declared in a theme's manifest header.

    An empty ``name`` means the directory has a manifest file but is not a
    theme root.
    """

    name: str
    parent_name: str | None = None
    text_domain: str | None = None


def parse_manifest(text: str) -> ThemeManifest:
    """Parse manifest header lines out of ``text``."""
    name: str | None = None
    parent: str | None = None
    text_domain: str | None = None

    for line in text.splitlines():
        if name is None:
            match = _THEME_NAME_RE.search(line)
            if match:
                name = match.group(1).strip()
                continue
        match = _TEMPLATE_RE.search(line)
        if match:
            parent = match.group(1).strip() or None
            continue
        if text_domain is None:
            match = _TEXT_DOMAIN_RE.search(line)
            if match:
                text_domain = match.group(1).strip() or None

    return ThemeManifest(name=name or "", parent_name=parent, text_domain=text_domain)


def read_manifest(directory: str | Path, manifest_name: str = MANIFEST_FILE) -> ThemeManifest:
    """Read and parse the manifest file inside ``directory``.

    The caller is expected to have checked that the file exists. Any failure
    to read it afterwards (permissions, deleted mid-run, bad encoding) raises
    ManifestReadError.
    """
    path = Path(directory) / manifest_name
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(str(path), str(e)) from e

    manifest = parse_manifest(text)
    logger.debug("Parsed %s: name=%r parent=%r", path, manifest.name, manifest.parent_name)
    return manifest


def theme_slug(manifest: ThemeManifest, directory: str | Path, fallback: str | None = None) -> str:
    """Return the slug used to name the theme folder in Playground.

    Text Domain first, then the configured fallback, then the directory name.
    """
    if manifest.text_domain:
        return manifest.text_domain
    logger.debug("No Text Domain in %s, falling back", directory)
    if fallback:
        return fallback
    return Path(directory).resolve().name
