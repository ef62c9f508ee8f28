"""Session navigation state - which node is active and what the side panel shows."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SidePanel:
    """A freshly created branch shown next to the active conversation."""

    node_id: str
    parent_node_id: str
    initial_question: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "node_id": self.node_id,
            "parent_node_id": self.parent_node_id,
            "initial_question": self.initial_question,
        }


@dataclass(frozen=True)
class SessionState:
    """
    Immutable navigation state.

    Transitions never mutate an instance; they return a new one
    (see kgchat.session.transitions).
    """

    active_node_id: str
    side_panel: SidePanel | None = None
    show_graph: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "active_node_id": self.active_node_id,
            "side_panel": self.side_panel.to_dict() if self.side_panel else None,
            "show_graph": self.show_graph,
        }
