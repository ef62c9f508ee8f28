"""Unit tests for session transitions and the session controller."""

import pytest

from kgchat.errors import UnknownNodeError
from kgchat.models import Node, SessionState, SidePanel
from kgchat.session import SessionController, transitions


class TestTransitions:
    """Pure transition functions."""

    def test_initial_state(self) -> None:
        assert transitions.initial_state("root") == SessionState(active_node_id="root")

    def test_focus_keeps_panel(self) -> None:
        state = transitions.open_side_panel(SessionState("root"), "sub_1", "root")
        focused = transitions.focus_node(state, "sub_2")
        assert focused.active_node_id == "sub_2"
        assert focused.side_panel == state.side_panel

    def test_transitions_do_not_mutate(self) -> None:
        state = SessionState("root")
        transitions.open_side_panel(state, "sub_1", "root")
        assert state.side_panel is None

    def test_open_replaces_existing_panel(self) -> None:
        state = transitions.open_side_panel(SessionState("root"), "sub_1", "root")
        state = transitions.open_side_panel(state, "sub_2", "root", "What is b?")
        assert state.side_panel == SidePanel("sub_2", "root", "What is b?")

    def test_close(self) -> None:
        state = transitions.open_side_panel(SessionState("root"), "sub_1", "root")
        assert transitions.close_side_panel(state).side_panel is None

    def test_promote(self) -> None:
        state = transitions.open_side_panel(SessionState("root"), "sub_1", "root")
        promoted = transitions.promote_side_panel(state)
        assert promoted.active_node_id == "sub_1"
        assert promoted.side_panel is None

    def test_promote_without_panel(self) -> None:
        state = SessionState("root")
        assert transitions.promote_side_panel(state) is state

    def test_toggle_graph(self) -> None:
        state = transitions.toggle_graph(SessionState("root"))
        assert state.show_graph is True
        assert transitions.toggle_graph(state).show_graph is False


class TestSessionController:
    """Tests for SessionController."""

    @pytest.fixture
    def session(self, graph) -> SessionController:
        graph.add_node(Node(id="sub_1", label="gravity", x=100, y=450))
        return SessionController(graph, "root")

    def test_starts_on_root(self, session) -> None:
        assert session.active_node_id == "root"
        assert session.state.side_panel is None

    def test_unknown_root(self, graph) -> None:
        with pytest.raises(UnknownNodeError):
            SessionController(graph, "missing")

    def test_focus_node(self, session) -> None:
        session.focus_node("sub_1")
        assert session.active_node_id == "sub_1"

    def test_focus_unknown_node(self, session) -> None:
        with pytest.raises(UnknownNodeError):
            session.focus_node("missing")
        assert session.active_node_id == "root"

    def test_open_and_promote(self, session) -> None:
        session.open_side_panel("sub_1", "root", "What is gravity?")
        assert session.state.side_panel.node_id == "sub_1"

        state = session.promote_side_panel()

        assert state.active_node_id == "sub_1"
        assert state.side_panel is None

    def test_open_and_close(self, session) -> None:
        session.open_side_panel("sub_1", "root")
        session.close_side_panel()
        assert session.state.side_panel is None
        assert session.active_node_id == "root"

    def test_open_unknown_node(self, session) -> None:
        with pytest.raises(UnknownNodeError):
            session.open_side_panel("missing", "root")

    def test_promote_without_panel(self, session) -> None:
        assert session.promote_side_panel().active_node_id == "root"
