"""Unit tests for the selection tracker."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from kgchat.selection import SelectionTracker
from kgchat.workspace import Workspace


@pytest.fixture
def tracker(workspace: Workspace) -> SelectionTracker:
    return workspace.selection_for("root")


class TestSelection:
    """Selecting and clearing text."""

    def test_select_trims(self, tracker: SelectionTracker) -> None:
        tracker.select("  gravity \n")
        assert tracker.selection == "gravity"

    def test_blank_selection_clears(self, tracker: SelectionTracker) -> None:
        tracker.select("gravity")
        tracker.select("   ")
        assert tracker.selection is None

    def test_deep_dive_label(self, tracker: SelectionTracker) -> None:
        assert tracker.deep_dive_label is None

        tracker.select("gravity")
        assert tracker.deep_dive_label == 'Deep dive: "gravity"'

        tracker.select("general relativity and curved spacetime")
        assert tracker.deep_dive_label == 'Deep dive: "general relativity a..."'


class TestModifierChord:
    """Alt/Meta chord triggers a tooltip lookup."""

    @pytest.mark.asyncio
    async def test_explains_selection(self, tracker, mock_completion_client) -> None:
        mock_completion_client.generate = AsyncMock(return_value="A fundamental force.")
        tracker.select("gravity")

        result = await tracker.modifier_chord()

        assert result == "A fundamental force."
        assert tracker.tooltip_visible
        assert tracker.tooltip_text == "A fundamental force."
        assert not tracker.tooltip_loading

    @pytest.mark.asyncio
    async def test_no_selection(self, tracker, mock_completion_client) -> None:
        assert await tracker.modifier_chord() is None
        mock_completion_client.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignored_while_tooltip_showing(self, tracker, mock_completion_client) -> None:
        tracker.select("gravity")
        await tracker.modifier_chord()

        assert await tracker.modifier_chord() is None
        assert mock_completion_client.generate.call_count == 1

    @pytest.mark.asyncio
    async def test_loading_until_answer(self, tracker, mock_completion_client) -> None:
        gate = asyncio.Event()

        async def blocked(prompt, max_tokens=None):
            await gate.wait()
            return "A force."

        mock_completion_client.generate = AsyncMock(side_effect=blocked)
        tracker.select("gravity")

        task = asyncio.create_task(tracker.modifier_chord())
        await asyncio.sleep(0)
        assert tracker.tooltip_loading

        gate.set()
        await task
        assert tracker.tooltip_text == "A force."

    @pytest.mark.asyncio
    async def test_empty_explanation_ends_loading(self, tracker, mock_completion_client) -> None:
        mock_completion_client.generate = AsyncMock(return_value="")
        tracker.select("gravity")

        assert await tracker.modifier_chord() == ""

        assert tracker.tooltip_visible
        assert tracker.tooltip_text == ""
        assert not tracker.tooltip_loading

    @pytest.mark.asyncio
    async def test_stale_answer_not_shown(self, tracker, mock_completion_client) -> None:
        gate = asyncio.Event()

        async def blocked(prompt, max_tokens=None):
            await gate.wait()
            return "A force."

        mock_completion_client.generate = AsyncMock(side_effect=blocked)
        tracker.select("gravity")

        task = asyncio.create_task(tracker.modifier_chord())
        await asyncio.sleep(0)
        tracker.select("mass")

        gate.set()
        await task
        assert tracker.tooltip_text == ""
        assert not tracker.tooltip_visible
        assert not tracker.tooltip_loading

    @pytest.mark.asyncio
    async def test_dismiss(self, tracker) -> None:
        tracker.select("gravity")
        await tracker.modifier_chord()

        tracker.dismiss_tooltip()

        assert tracker.selection is None
        assert not tracker.tooltip_visible


class TestDeepDive:
    """Deep dive from the selection."""

    @pytest.mark.asyncio
    async def test_creates_branch_and_clears(self, tracker, workspace) -> None:
        tracker.select("gravity")

        branch = tracker.deep_dive()

        assert branch is not None
        assert workspace.graph.parent_of(branch.node.id).id == "root"
        assert workspace.state.side_panel.node_id == branch.node.id
        assert tracker.selection is None
        await branch.task

    def test_without_selection(self, tracker, workspace) -> None:
        assert tracker.deep_dive() is None
        assert len(workspace.graph) == 1
