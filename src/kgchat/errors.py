"""Exception hierarchy for kgchat."""


class KGChatError(Exception):
    """Base class for kgchat errors."""


class GraphError(KGChatError):
    """Structural misuse of the conversation graph."""


class DuplicateIdError(GraphError):
    """A node with this id already exists."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node already exists: {node_id}")


class UnknownNodeError(GraphError):
    """A referenced node does not exist."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Unknown node: {node_id}")


class UnknownParentError(UnknownNodeError):
    """A branch was requested from a node that does not exist."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.args = (f"Unknown parent node: {node_id}",)


class CompletionError(KGChatError):
    """The completion service failed or returned an unusable response."""
