"""Tests for the preview block in pull request descriptions."""

from unittest.mock import MagicMock

import pytest

from themepreview_comments.base import CommentClient
from themepreview_core.description import (
    DESCRIPTION_MARKER_END,
    DESCRIPTION_MARKER_START,
    DescriptionBlockManager,
    managed_block,
)
from themepreview_core.lifecycle import CREATED, DELETED, NOOP, SKIPPED, UNCHANGED, UPDATED

CONTENT = "### Preview changes\n\n- [Preview changes for **Theme1**](url)\n"


@pytest.fixture
def client():
    client = MagicMock(spec=CommentClient)
    client.get_description.return_value = ""
    return client


def _written(client):
    number, body = client.update_description.call_args.args
    return body


class TestReconcile:
    def test_block_becomes_whole_empty_description(self, client):
        result = DescriptionBlockManager(client).reconcile(4, CONTENT)

        assert result.action == CREATED
        client.update_description.assert_called_once_with(4, managed_block(CONTENT))

    def test_block_appended_after_author_text(self, client):
        client.get_description.return_value = "Fixes the header.\n\n"
        DescriptionBlockManager(client).reconcile(4, CONTENT)
        assert _written(client) == f"Fixes the header.\n\n{managed_block(CONTENT)}"

    def test_none_description_treated_as_empty(self, client):
        client.get_description.return_value = None
        DescriptionBlockManager(client).reconcile(4, CONTENT)
        assert _written(client) == managed_block(CONTENT)

    def test_existing_block_replaced_in_place(self, client):
        old = managed_block("### Preview changes\n\nold links")
        client.get_description.return_value = f"Intro\n\n{old}\n\nFooter"

        result = DescriptionBlockManager(client).reconcile(4, CONTENT)

        assert result.action == UPDATED
        assert _written(client) == f"Intro\n\n{managed_block(CONTENT)}\n\nFooter"

    def test_identical_block_not_rewritten(self, client):
        client.get_description.return_value = f"Intro\n\n{managed_block(CONTENT)}"
        result = DescriptionBlockManager(client).reconcile(4, CONTENT)
        assert result.action == UNCHANGED
        client.update_description.assert_not_called()

    def test_empty_markers_are_filled(self, client):
        client.get_description.return_value = f"{DESCRIPTION_MARKER_START}\n{DESCRIPTION_MARKER_END}"
        result = DescriptionBlockManager(client).reconcile(4, CONTENT)
        assert result.action == UPDATED
        assert _written(client) == managed_block(CONTENT)

    def test_author_placeholder_kept(self, client):
        client.get_description.return_value = f"{DESCRIPTION_MARKER_START}\nno previews please\n{DESCRIPTION_MARKER_END}"
        result = DescriptionBlockManager(client).reconcile(4, CONTENT)
        assert result.action == SKIPPED
        client.update_description.assert_not_called()

    def test_removed_block_not_restored_when_disabled(self, client):
        client.get_description.return_value = "Author removed the previews."
        result = DescriptionBlockManager(client, restore_if_removed=False).reconcile(4, CONTENT)
        assert result.action == SKIPPED
        client.update_description.assert_not_called()

    def test_none_content_removes_block(self, client):
        client.get_description.return_value = f"Intro\n\n{managed_block(CONTENT)}"
        result = DescriptionBlockManager(client).reconcile(4, None)
        assert result.action == DELETED
        client.update_description.assert_called_once_with(4, "Intro")


class TestRemove:
    def test_block_in_the_middle(self, client):
        client.get_description.return_value = f"Intro\n\n{managed_block(CONTENT)}\n\nFooter"
        DescriptionBlockManager(client).remove(4)
        assert _written(client) == "Intro\n\nFooter"

    def test_nothing_to_remove(self, client):
        client.get_description.return_value = "Just text"
        assert DescriptionBlockManager(client).remove(4).action == NOOP
        client.update_description.assert_not_called()

    def test_placeholder_not_removed(self, client):
        client.get_description.return_value = f"{DESCRIPTION_MARKER_START}\nmine\n{DESCRIPTION_MARKER_END}"
        assert DescriptionBlockManager(client).remove(4).action == NOOP
        client.update_description.assert_not_called()
