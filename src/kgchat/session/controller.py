"""Session controller - owns the current SessionState."""

import logging

from kgchat.graph import GraphStore
from kgchat.models import SessionState
from kgchat.session import transitions

logger = logging.getLogger(__name__)


class SessionController:
    """
    Navigation state machine over {active node, side panel, graph view}.

    Holds one immutable SessionState and swaps it for the result of a pure
    transition. Node ids are checked against the graph before a transition
    is applied, so active_node_id always names an existing node.
    """

    def __init__(self, graph: GraphStore, root_node_id: str) -> None:
        self.graph = graph
        self.graph.get_node(root_node_id)
        self._state = transitions.initial_state(root_node_id)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def active_node_id(self) -> str:
        return self._state.active_node_id

    def focus_node(self, node_id: str) -> SessionState:
        """Activate a node, e.g. after a click in the graph view.

        Raises:
            UnknownNodeError: If the node does not exist
        """
        self.graph.get_node(node_id)
        self._state = transitions.focus_node(self._state, node_id)
        return self._state

    def open_side_panel(
        self,
        node_id: str,
        parent_node_id: str,
        initial_question: str = "",
    ) -> SessionState:
        self.graph.get_node(node_id)
        self.graph.get_node(parent_node_id)
        self._state = transitions.open_side_panel(
            self._state, node_id, parent_node_id, initial_question
        )
        return self._state

    def close_side_panel(self) -> SessionState:
        self._state = transitions.close_side_panel(self._state)
        return self._state

    def promote_side_panel(self) -> SessionState:
        """Switch to the side panel's branch and close the panel."""
        if self._state.side_panel is None:
            logger.debug("promote_side_panel called with no side panel open")
        self._state = transitions.promote_side_panel(self._state)
        return self._state

    def toggle_graph(self) -> SessionState:
        self._state = transitions.toggle_graph(self._state)
        return self._state
