"""Unit tests for deep-dive branch creation."""

import pytest

from kgchat.errors import UnknownParentError
from kgchat.models import EdgeKind, Message, NodeKind
from kgchat.workspace import Workspace


class TestCreateBranch:
    """Tests for BranchManager.create_branch."""

    @pytest.mark.asyncio
    async def test_creates_sub_node_and_edge(self, workspace: Workspace) -> None:
        branch = workspace.branches.create_branch("root", "gravity")

        node = branch.node
        assert node.kind == NodeKind.SUB
        assert node.id.startswith("sub_")
        assert (node.x, node.y) == (100, 450)

        edges = workspace.graph.edges
        assert len(edges) == 1
        assert edges[0].source_id == "root"
        assert edges[0].target_id == node.id
        assert edges[0].kind == EdgeKind.SUB

        await branch.task

    @pytest.mark.asyncio
    async def test_label_is_selection_until_first_send(self, workspace: Workspace) -> None:
        selection = "the second law of thermodynamics in closed systems"
        branch = workspace.branches.create_branch("root", selection)

        # First exchange is scheduled, not yet run
        assert branch.node.label == selection[:40]
        assert workspace.conversations.length(branch.node.id) == 0

        await branch.task
        assert branch.node.label == f"What is {selection}?"[:40]

    @pytest.mark.asyncio
    async def test_opens_side_panel(self, workspace: Workspace) -> None:
        branch = workspace.branches.create_branch("root", "gravity")

        panel = workspace.state.side_panel
        assert panel.node_id == branch.node.id
        assert panel.parent_node_id == "root"
        assert panel.initial_question == "What is gravity?"
        assert workspace.state.active_node_id == "root"

        await branch.task

    @pytest.mark.asyncio
    async def test_first_exchange(self, workspace: Workspace) -> None:
        branch = workspace.branches.create_branch("root", "gravity")
        reply = await branch.task

        assert reply == Message.assistant("Answer to: What is gravity?")
        assert workspace.messages(branch.node.id) == [
            Message.user("What is gravity?"),
            Message.assistant("Answer to: What is gravity?"),
        ]

    @pytest.mark.asyncio
    async def test_siblings_spread(self, workspace: Workspace) -> None:
        branches = [workspace.branches.create_branch("root", f"term {k}") for k in range(3)]
        await workspace.branches.wait_pending()

        assert [(b.node.x, b.node.y) for b in branches] == [
            (100, 450),
            (220, 450),
            (340, 450),
        ]
        assert workspace.branches.pending == 0

    @pytest.mark.asyncio
    async def test_branch_of_branch(self, workspace: Workspace) -> None:
        first = workspace.branches.create_branch("root", "gravity")
        nested = workspace.branches.create_branch(first.node.id, "mass")
        await workspace.branches.wait_pending()

        assert (nested.node.x, nested.node.y) == (100, 600)
        assert workspace.graph.parent_of(nested.node.id).id == first.node.id
        assert workspace.state.side_panel.node_id == nested.node.id

    @pytest.mark.asyncio
    async def test_unknown_parent_leaves_no_state(self, workspace: Workspace) -> None:
        with pytest.raises(UnknownParentError):
            workspace.branches.create_branch("missing", "gravity")

        assert len(workspace.graph) == 1
        assert workspace.graph.edges == []
        assert len(workspace.conversations) == 1
        assert workspace.state.side_panel is None

    @pytest.mark.asyncio
    async def test_blank_selection(self, workspace: Workspace) -> None:
        with pytest.raises(ValueError):
            workspace.branches.create_branch("root", "   ")
        assert len(workspace.graph) == 1

    @pytest.mark.asyncio
    async def test_promote_after_branch(self, workspace: Workspace) -> None:
        branch = workspace.branches.create_branch("root", "gravity")

        state = workspace.promote_side_panel()

        assert state.active_node_id == branch.node.id
        assert state.side_panel is None
        await branch.task

    def test_requires_running_loop(self, workspace: Workspace) -> None:
        with pytest.raises(RuntimeError):
            workspace.branches.create_branch("root", "gravity")
        assert len(workspace.graph) == 1
