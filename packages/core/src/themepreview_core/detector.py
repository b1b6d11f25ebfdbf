"""Map changed files to the themes they belong to.

Each changed path is walked upwards, one directory at a time, until a
directory holding a theme manifest is found. The closest ancestor wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable

from themepreview_core.manifest import MANIFEST_FILE, ThemeManifest, read_manifest

logger = logging.getLogger(__name__)

CHILD_THEME_DELIMITER = "_childof_"


@dataclass
class ThemeChangeSet:
    """Themes touched by a pull request.

    ``themes`` maps a theme key to the theme's repository-relative directory.
    It is insertion ordered and that order is the order themes are rendered
    in. ``manifests`` keeps the manifest read for each key during detection
    so rendering sees the same metadata.
    """

    themes: dict[str, str] = field(default_factory=dict)
    manifests: dict[str, ThemeManifest] = field(default_factory=dict, compare=False, repr=False)

    @property
    def has_changes(self) -> bool:
        return bool(self.themes)

    def add(self, manifest: ThemeManifest, directory: str) -> str:
        key = theme_key(manifest)
        self.themes[key] = directory
        self.manifests[key] = manifest
        return key


def theme_key(manifest: ThemeManifest) -> str:
    """Build the identity of a theme: its name, qualified by its parent if any."""
    if manifest.parent_name:
        return f"{manifest.name}{CHILD_THEME_DELIMITER}{manifest.parent_name}"
    return manifest.name


def split_theme_key(key: str) -> tuple[str, str | None]:
    """Inverse of theme_key: return (name, parent_name or None)."""
    name, _, parent = key.partition(CHILD_THEME_DELIMITER)
    return name, parent or None


def find_theme_root(
    changed_file: str,
    root: Path,
    manifest_name: str = MANIFEST_FILE,
) -> tuple[ThemeManifest, str] | None:
    """Return the manifest and directory of the closest theme above ``changed_file``.

    Returns None when no ancestor (the repository root excluded) holds a
    manifest, or when the nearest manifest declares no theme name.
    """
    directory = PurePosixPath(changed_file).parent
    while directory != directory.parent:
        if (root / directory / manifest_name).is_file():
            manifest = read_manifest(root / directory, manifest_name)
            if not manifest.name:
                logger.debug("%s/%s has no Theme Name header; ignoring %s", directory, manifest_name, changed_file)
                return None
            return manifest, str(directory)
        directory = directory.parent
    return None


def detect_theme_changes(
    changed_files: Iterable[str],
    root: str | Path = ".",
    manifest_name: str = MANIFEST_FILE,
) -> ThemeChangeSet:
    """Resolve a list of changed paths into the set of changed themes.

    Several files under one theme collapse into a single entry. Two themes
    with the same name but different parents stay distinct.
    """
    root = Path(root)
    change_set = ThemeChangeSet()

    for changed_file in changed_files:
        changed_file = changed_file.strip()
        if not changed_file:
            continue
        found = find_theme_root(changed_file, root, manifest_name)
        if found is None:
            logger.debug("No theme found for %s", changed_file)
            continue
        manifest, directory = found
        key = change_set.add(manifest, directory)
        logger.debug("%s belongs to theme %s (%s)", changed_file, key, directory)

    logger.info("Detected %d changed theme(s)", len(change_set.themes))
    return change_set
