"""In-memory conversation graph.

Nodes live in an insertion-ordered mapping keyed by id, edges in a flat
append-only list. Parent/child relationships are derived by filtering edges;
nodes carry no back-references.
"""

import logging

from kgchat.config import settings
from kgchat.errors import DuplicateIdError, UnknownNodeError
from kgchat.models import Edge, EdgeKind, Node

logger = logging.getLogger(__name__)


class GraphStore:
    """Holds conversation nodes and the parent -> child edges between them."""

    def __init__(
        self,
        horizontal_spacing: float | None = None,
        vertical_drop: float | None = None,
    ) -> None:
        self.horizontal_spacing = (
            settings.branch_horizontal_spacing if horizontal_spacing is None else horizontal_spacing
        )
        self.vertical_drop = (
            settings.branch_vertical_drop if vertical_drop is None else vertical_drop
        )
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    @property
    def nodes(self) -> list[Node]:
        """All nodes in insertion order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> list[Edge]:
        """All edges in insertion order."""
        return list(self._edges)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Node:
        """Get a node by id.

        Raises:
            UnknownNodeError: If no node has this id
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def add_node(self, node: Node) -> Node:
        """Insert a node.

        Raises:
            DuplicateIdError: If a node with the same id is already present
        """
        if node.id in self._nodes:
            raise DuplicateIdError(node.id)
        self._nodes[node.id] = node
        logger.debug(f"Added {node.kind.value} node {node.id} at ({node.x}, {node.y})")
        return node

    def add_edge(self, edge: Edge) -> Edge:
        """Insert an edge.

        Raises:
            UnknownNodeError: If either endpoint is absent
        """
        for endpoint in (edge.source_id, edge.target_id):
            if endpoint not in self._nodes:
                raise UnknownNodeError(endpoint)
        self._edges.append(edge)
        return edge

    def set_label(self, node_id: str, label: str) -> Node:
        """Overwrite a node's label."""
        node = self.get_node(node_id)
        node.label = label
        return node

    def children_of(self, node_id: str, kind: EdgeKind | None = None) -> list[Node]:
        """Nodes one edge away from node_id, in edge insertion order.

        Args:
            node_id: Parent node id
            kind: Only follow edges of this kind (all kinds when None)
        """
        return [
            self._nodes[edge.target_id]
            for edge in self._edges
            if edge.source_id == node_id and (kind is None or edge.kind == kind)
        ]

    def parent_of(self, node_id: str) -> Node | None:
        """The node with an edge into node_id, or None for the root."""
        for edge in self._edges:
            if edge.target_id == node_id:
                return self._nodes[edge.source_id]
        return None

    def compute_branch_position(self, parent_id: str) -> tuple[float, float]:
        """Position for the next Sub child of parent_id.

        The k-th sub child (0-indexed) sits k * horizontal_spacing to the right
        of its parent, vertical_drop below it. Subtrees of different parents
        may overlap.

        Raises:
            UnknownNodeError: If the parent does not exist
        """
        parent = self.get_node(parent_id)
        sibling_count = len(self.children_of(parent_id, EdgeKind.SUB))
        offset = sibling_count * self.horizontal_spacing
        return parent.x + offset, parent.y + self.vertical_drop
