"""Markdown rendering of the preview comment.

The body always starts with COMMENT_MARKER. The lifecycle manager finds the
comment it owns by that same literal, so both modules import it from here.
A configured template replaces the built-in wording, but the marker is still
put in front of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from themepreview_core.blueprint import DEFAULT_PLAYGROUND_URL, build_blueprint, normalize_blueprint, preview_url
from themepreview_core.config import blueprint_options
from themepreview_core.detector import ThemeChangeSet, split_theme_key
from themepreview_core.manifest import MANIFEST_FILE, read_manifest, theme_slug
from themepreview_core.templates import link_variables, substitute

logger = logging.getLogger(__name__)

COMMENT_MARKER = "### Preview changes"

_PLAYGROUND_NOTICE = (
    "I will update this comment with the latest preview links as you push more changes to this PR.\n"
    "**⚠️ Note:** The preview sites are created using [WordPress Playground](https://wordpress.org/playground/). "
    "You can add content, edit settings, and test the themes as you would on a real site, "
    "but please note that changes are not saved between sessions."
)

_CHILD_THEME_WARNING = (
    "**⚠️ Note:** Child themes are dependent on their parent themes. "
    "You will have to install the parent theme as well for the preview to work correctly."
)


@dataclass(frozen=True)
class PreviewLink:
    """One Playground preview: display name, slug, blueprint and the URL carrying it."""

    name: str
    slug: str
    blueprint: str
    url: str
    parent: str | None = None

    def markdown(self) -> str:
        line = f"- [Preview changes for **{self.name}**]({self.url})"
        if self.parent:
            line += f" (child of **{self.parent}**)"
        return line


def _link(name: str, slug: str, blueprint: str, config: dict, parent: str | None = None) -> PreviewLink:
    url = preview_url(blueprint, config.get("playground_url", DEFAULT_PLAYGROUND_URL))
    return PreviewLink(name=name, slug=slug, blueprint=blueprint, url=url, parent=parent)


def build_links(
    change_set: ThemeChangeSet,
    branch_ref: str,
    repo_full_name: str,
    config: dict | None = None,
    root: str | Path = ".",
) -> list[PreviewLink]:
    """Return one PreviewLink per changed theme, in the change set's order."""
    config = config or {}
    manifest_name = config.get("manifest_file", MANIFEST_FILE)
    override = normalize_blueprint(config.get("blueprint"))
    options = blueprint_options(config)

    links: list[PreviewLink] = []
    for key, theme_dir in change_set.themes.items():
        name, parent = split_theme_key(key)
        manifest = change_set.manifests.get(key)
        if manifest is None:
            manifest = read_manifest(Path(root) / theme_dir, manifest_name)
        slug = theme_slug(manifest, Path(root) / theme_dir, config.get("theme_slug"))

        blueprint = override or build_blueprint(slug, branch_ref, repo_full_name, theme_dir, **options)
        links.append(_link(name, slug, blueprint, config, parent))
    return links


def build_single_theme_link(
    theme_dir: str | Path,
    branch_ref: str,
    repo_full_name: str,
    config: dict | None = None,
) -> PreviewLink:
    """Return the PreviewLink for a repository that is itself a single theme."""
    config = config or {}
    manifest = read_manifest(theme_dir, config.get("manifest_file", MANIFEST_FILE))
    slug = theme_slug(manifest, theme_dir, config.get("theme_slug"))

    blueprint = normalize_blueprint(config.get("blueprint"))
    if blueprint is None:
        blueprint = build_blueprint(slug, branch_ref, repo_full_name, **blueprint_options(config))
    return _link(slug, slug, blueprint, config)


def _assemble(intro: str, links: list[PreviewLink], plural: bool) -> str:
    sections = [COMMENT_MARKER, ""]
    if intro:
        sections.extend([intro, ""])
    sections.append(f"You can preview these changes by following the {'links' if plural else 'link'} below:")
    sections.append("")
    sections.extend(link.markdown() for link in links)
    sections.append("")
    sections.append(_PLAYGROUND_NOTICE)
    if any(link.parent for link in links):
        sections.append("")
        sections.append(_CHILD_THEME_WARNING)
    return "\n".join(sections) + "\n"


def compose_body(
    links: list[PreviewLink],
    config: dict | None = None,
    variables: dict | None = None,
    single_theme: bool = False,
    template_key: str = "comment_template",
) -> str:
    """Render ``links`` with the template under ``template_key``, or the built-in wording."""
    config = config or {}
    template = config.get(template_key)
    if template and template.strip():
        values = {**(variables or {}), **link_variables(links, config.get("playground_url", DEFAULT_PLAYGROUND_URL))}
        rendered = substitute(template, values).strip()
        if COMMENT_MARKER not in rendered:
            rendered = f"{COMMENT_MARKER}\n\n{rendered}"
        return rendered + "\n"

    if single_theme:
        return _assemble("", links, plural=False)
    intro = f"I've detected changes to the following themes in this PR: {', '.join(link.name for link in links)}."
    return _assemble(intro, links, plural=True)


def render_comment(
    change_set: ThemeChangeSet,
    branch_ref: str,
    repo_full_name: str,
    config: dict | None = None,
    root: str | Path = ".",
    variables: dict | None = None,
) -> str:
    """Render the comment body listing one preview link per changed theme.

    Themes appear in the change set's insertion order, so the same change set
    always renders to the same body.
    """
    links = build_links(change_set, branch_ref, repo_full_name, config, root)
    body = compose_body(links, config, variables)
    logger.debug("Rendered comment for %d theme(s)", len(links))
    return body


def render_single_theme_comment(
    theme_dir: str | Path,
    branch_ref: str,
    repo_full_name: str,
    config: dict | None = None,
    variables: dict | None = None,
) -> str:
    """Render the comment for a repository that is itself a single theme."""
    link = build_single_theme_link(theme_dir, branch_ref, repo_full_name, config)
    return compose_body([link], config, variables, single_theme=True)
