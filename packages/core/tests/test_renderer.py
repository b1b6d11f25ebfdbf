"""Tests for preview comment rendering."""

import json

from themepreview_core.blueprint import build_blueprint
from themepreview_core.detector import ThemeChangeSet, detect_theme_changes
from themepreview_core.manifest import ThemeManifest
from themepreview_core.renderer import COMMENT_MARKER, PreviewLink, render_comment, render_single_theme_comment

CHILD_WARNING = "Child themes are dependent on their parent themes"


def _change_set(*entries):
    """Build a change set from (manifest, directory) pairs."""
    change_set = ThemeChangeSet()
    for manifest, directory in entries:
        change_set.add(manifest, directory)
    return change_set


def _blueprint_from_line(line: str) -> dict:
    fragment = line.split("#", 1)[1]
    return json.loads(fragment[: fragment.rindex("})") + 1])


class TestRenderComment:
    def test_starts_with_marker(self):
        body = render_comment(_change_set((ThemeManifest("Theme1"), "theme1")), "branch", "owner/repo")
        assert body.startswith(COMMENT_MARKER + "\n")

    def test_plain_theme_body(self):
        body = render_comment(
            _change_set((ThemeManifest("Theme1", text_domain="theme1"), "theme1")),
            "branch-name",
            "Automattic/themes",
        )
        blueprint = build_blueprint("theme1", "branch-name", "Automattic/themes", "theme1")
        expected = (
            "### Preview changes\n"
            "\n"
            "I've detected changes to the following themes in this PR: Theme1.\n"
            "\n"
            "You can preview these changes by following the links below:\n"
            "\n"
            f"- [Preview changes for **Theme1**](https://playground.wordpress.net/#{blueprint})\n"
            "\n"
            "I will update this comment with the latest preview links as you push more changes to this PR.\n"
            "**⚠️ Note:** The preview sites are created using [WordPress Playground](https://wordpress.org/playground/). "
            "You can add content, edit settings, and test the themes as you would on a real site, "
            "but please note that changes are not saved between sessions.\n"
        )
        assert body == expected

    def test_child_theme_line_and_warning(self):
        body = render_comment(
            _change_set((ThemeManifest("Theme2", parent_name="ParentTheme"), "theme2")),
            "branch",
            "owner/repo",
        )
        assert "- [Preview changes for **Theme2**](" in body
        assert "(child of **ParentTheme**)" in body
        assert CHILD_WARNING in body
        assert "Theme2_childof_" not in body

    def test_no_warning_without_child_themes(self):
        body = render_comment(_change_set((ThemeManifest("Theme1"), "theme1")), "branch", "owner/repo")
        assert CHILD_WARNING not in body
        assert "child of" not in body

    def test_intro_lists_display_names_in_order(self):
        body = render_comment(
            _change_set(
                (ThemeManifest("Zeta"), "zeta"),
                (ThemeManifest("Alpha", parent_name="Zeta"), "alpha"),
            ),
            "branch",
            "owner/repo",
        )
        assert "following themes in this PR: Zeta, Alpha." in body
        assert body.index("**Zeta**") < body.index("**Alpha**")

    def test_slug_from_text_domain_used_in_blueprint(self):
        body = render_comment(
            _change_set((ThemeManifest("Theme One", text_domain="theme-one"), "themes/one")),
            "branch",
            "owner/repo",
        )
        line = next(l for l in body.splitlines() if l.startswith("- [Preview"))
        steps = _blueprint_from_line(line)["steps"]
        assert steps[-1] == {"step": "activateTheme", "themeFolderName": "theme-one"}
        assert "directory=themes%2Fone" in steps[2]["themeData"]["url"]

    def test_manifest_reread_when_not_cached(self, tmp_path):
        (tmp_path / "theme1").mkdir()
        (tmp_path / "theme1" / "style.css").write_text("Theme Name: Theme1\nText Domain: from-disk", encoding="utf-8")
        change_set = ThemeChangeSet(themes={"Theme1": "theme1"})
        body = render_comment(change_set, "branch", "owner/repo", root=tmp_path)
        assert '"themeFolderName":"from-disk"' in body

    def test_config_overrides_hosts(self):
        config = {"playground_url": "https://playground.test", "install_theme_check": False}
        body = render_comment(_change_set((ThemeManifest("Theme1"), "theme1")), "branch", "owner/repo", config)
        assert "](https://playground.test/#" in body
        assert "installPlugin" not in body

    def test_rendering_is_idempotent(self, tmp_path):
        for name, header in (("theme1", "Theme Name: Theme1"), ("theme2", "Theme Name: Theme2\nTemplate: ParentTheme")):
            (tmp_path / name).mkdir()
            (tmp_path / name / "style.css").write_text(header, encoding="utf-8")
        change_set = detect_theme_changes(["theme1/style.css", "theme2/index.php"], tmp_path)

        first = render_comment(change_set, "branch", "owner/repo", root=tmp_path)
        second = render_comment(change_set, "branch", "owner/repo", root=tmp_path)
        assert first == second


class TestRenderSingleThemeComment:
    def test_single_theme_body(self, tmp_path):
        (tmp_path / "style.css").write_text("Theme Name: My Theme\nText Domain: mytheme", encoding="utf-8")
        body = render_single_theme_comment(tmp_path, "fix-header", "owner/mytheme")

        assert body.startswith(COMMENT_MARKER + "\n")
        assert "I've detected changes" not in body
        assert "following the link below:" in body
        assert "- [Preview changes for **mytheme**](" in body
        assert "action=archive" in body
        assert '"themeFolderName":"mytheme-fix-header"' in body

    def test_slug_falls_back_to_config(self, tmp_path):
        (tmp_path / "style.css").write_text("Theme Name: My Theme", encoding="utf-8")
        body = render_single_theme_comment(tmp_path, "main", "owner/repo", {"theme_slug": "configured"})
        assert "**configured**" in body


class TestComposeBody:
    def test_template_replaces_builtin_wording(self):
        change_set = _change_set((ThemeManifest("Theme1", text_domain="theme1"), "theme1"))
        config = {"comment_template": "Try {{THEME_SLUG}} from #{{PR_NUMBER}}"}

        body = render_comment(change_set, "branch", "owner/repo", config, variables={"PR_NUMBER": "8"})

        assert body == f"{COMMENT_MARKER}\n\nTry theme1 from #8\n"

    def test_marker_not_repeated_when_template_has_it(self):
        change_set = _change_set((ThemeManifest("Theme1"), "theme1"))
        config = {"comment_template": f"{COMMENT_MARKER}\n{{{{PREVIEW_LINKS}}}}"}

        body = render_comment(change_set, "branch", "owner/repo", config)

        assert body.count(COMMENT_MARKER) == 1
        assert "- [Preview changes for **Theme1**](https://playground.wordpress.net/#" in body

    def test_blank_template_uses_builtin_wording(self):
        change_set = _change_set((ThemeManifest("Theme1"), "theme1"))
        body = render_comment(change_set, "branch", "owner/repo", {"comment_template": "  "})
        assert "I've detected changes to the following themes in this PR: Theme1." in body

    def test_blueprint_override_used_for_every_theme(self):
        change_set = _change_set((ThemeManifest("Theme1"), "theme1"), (ThemeManifest("Theme2"), "theme2"))
        body = render_comment(change_set, "branch", "owner/repo", {"blueprint": {"landingPage": "/"}})
        lines = [line for line in body.splitlines() if line.startswith("- [")]
        assert [_blueprint_from_line(line) for line in lines] == [{"landingPage": "/"}, {"landingPage": "/"}]

    def test_blueprint_override_in_single_theme(self, tmp_path):
        (tmp_path / "style.css").write_text("Theme Name: Solo", encoding="utf-8")
        body = render_single_theme_comment(tmp_path, "main", "owner/solo", {"blueprint": '{"steps": []}'})
        assert '/#{"steps":[]})' in body


def test_preview_link_markdown():
    link = PreviewLink(name="Child", slug="child", blueprint="{}", url="u", parent="Parent")
    assert link.markdown() == "- [Preview changes for **Child**](u) (child of **Parent**)"
    assert PreviewLink(name="Solo", slug="solo", blueprint="{}", url="u").markdown() == (
        "- [Preview changes for **Solo**](u)"
    )
