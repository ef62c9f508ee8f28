"""Workspace - wires the stores, dispatchers and session for one user.

Creates the root conversation on construction and exposes the read-only
projection a graph renderer consumes.
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from kgchat.config import Settings, settings as default_settings
from kgchat.conversation import ConversationStore
from kgchat.dispatch import MessageDispatcher, TooltipCache
from kgchat.errors import GraphError
from kgchat.graph import GraphStore
from kgchat.graph.branching import Branch, BranchManager
from kgchat.llm import CompletionClient
from kgchat.models import Message, Node, NodeKind, SessionState
from kgchat.selection import SelectionTracker
from kgchat.session import SessionController

logger = logging.getLogger(__name__)

T = TypeVar("T")


def display_label(label: str, max_length: int) -> str:
    """Label as drawn under a graph node."""
    if len(label) > max_length:
        return label[:max_length] + "..."
    return label


class Workspace:
    """
    Composition root for one branching conversation.

    Structural misuse (unknown or duplicate node ids) raises when
    settings.debug is on; otherwise it is logged and the operation returns
    None.
    """

    def __init__(
        self,
        client: CompletionClient,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        s = self.settings

        self.graph = GraphStore(
            horizontal_spacing=s.branch_horizontal_spacing,
            vertical_drop=s.branch_vertical_drop,
        )
        self.conversations = ConversationStore()

        root = Node(
            id=s.root_node_id,
            label=s.root_label,
            x=s.root_x,
            y=s.root_y,
            kind=NodeKind.ROOT,
        )
        self.graph.add_node(root)
        self.conversations.create(root.id)

        self.session = SessionController(self.graph, root.id)
        self.dispatcher = MessageDispatcher(
            self.graph,
            self.conversations,
            client,
            max_tokens=s.chat_max_tokens,
            fallback_reply=s.chat_fallback_reply,
            label_max_length=s.label_max_length,
        )
        self.tooltips = TooltipCache(
            client,
            max_tokens=s.tooltip_max_tokens,
            fallback_reply=s.tooltip_fallback_reply,
        )
        self.branches = BranchManager(
            self.graph,
            self.conversations,
            self.session,
            self.dispatcher,
            label_max_length=s.label_max_length,
        )

    @property
    def root_id(self) -> str:
        return self.settings.root_node_id

    @property
    def state(self) -> SessionState:
        return self.session.state

    def selection_for(self, node_id: str) -> SelectionTracker:
        """A selection tracker for a chat view showing node_id."""
        self.graph.get_node(node_id)
        return SelectionTracker(
            node_id,
            self.tooltips,
            self.branches,
            preview_length=self.settings.deep_dive_preview_length,
        )

    # ------------------------------------------------------------------
    # Guarded operations
    # ------------------------------------------------------------------

    def _guard(self, operation: str, func: Callable[[], T]) -> T | None:
        try:
            return func()
        except GraphError as e:
            if self.settings.debug:
                raise
            logger.warning(f"Ignoring {operation}: {e}")
            return None

    async def _guard_async(
        self, operation: str, func: Callable[[], Awaitable[T]]
    ) -> T | None:
        try:
            return await func()
        except GraphError as e:
            if self.settings.debug:
                raise
            logger.warning(f"Ignoring {operation}: {e}")
            return None

    async def send_message(self, node_id: str, text: str) -> Message | None:
        return await self._guard_async(
            "send_message", lambda: self.dispatcher.send_message(node_id, text)
        )

    def create_branch(self, parent_node_id: str, selected_text: str) -> Branch | None:
        return self._guard(
            "create_branch",
            lambda: self.branches.create_branch(parent_node_id, selected_text),
        )

    async def explain(self, term: str) -> str:
        return await self.tooltips.explain(term)

    def focus_node(self, node_id: str) -> SessionState | None:
        return self._guard("focus_node", lambda: self.session.focus_node(node_id))

    def close_side_panel(self) -> SessionState:
        return self.session.close_side_panel()

    def promote_side_panel(self) -> SessionState:
        return self.session.promote_side_panel()

    def toggle_graph(self) -> SessionState:
        return self.session.toggle_graph()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def messages(self, node_id: str) -> list[Message]:
        return self.conversations.get(node_id)

    def snapshot(self) -> dict[str, Any]:
        """Graph and session state as plain data for a renderer."""
        state = self.session.state
        max_length = self.settings.display_label_max_length
        nodes = []
        for node in self.graph.nodes:
            data = node.to_dict()
            data["display_label"] = display_label(node.label, max_length)
            data["active"] = node.id == state.active_node_id
            data["loading"] = self.dispatcher.is_loading(node.id)
            data["message_count"] = self.conversations.length(node.id)
            nodes.append(data)
        return {
            "nodes": nodes,
            "edges": [edge.to_dict() for edge in self.graph.edges],
            "session": state.to_dict(),
        }
