"""Pure session transitions.

Each function takes a SessionState and returns the next one. None of them
touch the graph; existence checks belong to SessionController.
"""

from dataclasses import replace

from kgchat.models import SessionState, SidePanel


def initial_state(root_node_id: str) -> SessionState:
    return SessionState(active_node_id=root_node_id)


def focus_node(state: SessionState, node_id: str) -> SessionState:
    """Make node_id the full-screen conversation. The side panel is untouched."""
    return replace(state, active_node_id=node_id)


def open_side_panel(
    state: SessionState,
    node_id: str,
    parent_node_id: str,
    initial_question: str = "",
) -> SessionState:
    """Show a freshly created branch, replacing any panel already open."""
    panel = SidePanel(
        node_id=node_id,
        parent_node_id=parent_node_id,
        initial_question=initial_question,
    )
    return replace(state, side_panel=panel)


def close_side_panel(state: SessionState) -> SessionState:
    return replace(state, side_panel=None)


def promote_side_panel(state: SessionState) -> SessionState:
    """Activate the side panel's branch and close the panel in one step.

    Without an open panel the state is returned unchanged.
    """
    if state.side_panel is None:
        return state
    return replace(state, active_node_id=state.side_panel.node_id, side_panel=None)


def toggle_graph(state: SessionState) -> SessionState:
    return replace(state, show_graph=not state.show_graph)
