"""Graph node and edge models - conversation threads and their lineage."""

from dataclasses import dataclass
from enum import Enum


class NodeKind(str, Enum):
    """Kind of conversation node."""

    ROOT = "root"  # The single starting conversation
    MAIN = "main"  # Reserved for main-line follow-ups, never produced today
    SUB = "sub"  # Deep-dive branch spawned from highlighted text


class EdgeKind(str, Enum):
    """Kind of parent -> child relationship."""

    MAIN = "main"
    SUB = "sub"


@dataclass
class Node:
    """
    A single conversation thread positioned in the graph.

    The label starts as a placeholder (root) or the highlighted text (branches)
    and is replaced by the first user message once it is sent.
    """

    id: str
    label: str
    x: float
    y: float
    kind: NodeKind = NodeKind.SUB

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            label=data.get("label", ""),
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            kind=NodeKind(data.get("kind", NodeKind.SUB.value)),
        )


@dataclass(frozen=True)
class Edge:
    """Directed parent -> child edge. Edges are never mutated or removed."""

    source_id: str
    target_id: str
    kind: EdgeKind = EdgeKind.SUB

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "from": self.source_id,
            "to": self.target_id,
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        """Create from dictionary."""
        return cls(
            source_id=data["from"],
            target_id=data["to"],
            kind=EdgeKind(data.get("kind", EdgeKind.SUB.value)),
        )
