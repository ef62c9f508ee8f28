"""Message dispatcher: one request/response exchange per call.

Flow for send_message(node_id, text):
1. Reject blank text, or a node that already has a request in flight
2. Append the user turn (and relabel the node if this is its first turn)
3. Mark the node loading and send the whole transcript to the service
4. Append the reply, or the fixed fallback when the service fails
5. Clear the node's loading flag
"""

import logging

from kgchat.config import settings
from kgchat.conversation import ConversationStore
from kgchat.graph import GraphStore
from kgchat.llm import CompletionClient
from kgchat.models import Message

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """
    Drives conversation turns for graph nodes.

    Loading is tracked per node. A node accepts one outstanding request at a
    time; a second send while the first is pending is rejected, so turns of a
    node never interleave. Different nodes dispatch concurrently.
    """

    def __init__(
        self,
        graph: GraphStore,
        conversations: ConversationStore,
        client: CompletionClient,
        max_tokens: int | None = None,
        fallback_reply: str | None = None,
        label_max_length: int | None = None,
    ) -> None:
        self.graph = graph
        self.conversations = conversations
        self.client = client
        self.max_tokens = max_tokens or settings.chat_max_tokens
        self.fallback_reply = fallback_reply or settings.chat_fallback_reply
        self.label_max_length = label_max_length or settings.label_max_length

        self._in_flight: set[str] = set()

    def is_loading(self, node_id: str) -> bool:
        """True while node_id has a request outstanding."""
        return node_id in self._in_flight

    def loading_nodes(self) -> dict[str, bool]:
        """Loading flag for every node in the graph."""
        return {node.id: node.id in self._in_flight for node in self.graph.nodes}

    async def send_message(self, node_id: str, text: str) -> Message | None:
        """
        Send a user turn to a node and append the assistant reply.

        Args:
            node_id: Node whose conversation receives the exchange
            text: User message

        Returns:
            The appended assistant message, or None if the send was rejected

        Raises:
            UnknownNodeError: If the node does not exist
        """
        self.graph.get_node(node_id)

        if not text or not text.strip():
            logger.debug(f"Ignoring blank message for node {node_id}")
            return None
        if node_id in self._in_flight:
            logger.info(f"Node {node_id} already has a request in flight, ignoring send")
            return None

        is_first_turn = self.conversations.length(node_id) == 0
        self.conversations.append(node_id, Message.user(text))
        if is_first_turn:
            self.graph.set_label(node_id, text[: self.label_max_length])

        self._in_flight.add(node_id)
        try:
            reply = await self._complete(node_id)
            message = Message.assistant(reply)
            self.conversations.append(node_id, message)
        finally:
            self._in_flight.discard(node_id)

        return message

    async def _complete(self, node_id: str) -> str:
        """Call the service with the full transcript, falling back on failure."""
        history = self.conversations.to_wire(node_id)
        try:
            return await self.client.complete(history, max_tokens=self.max_tokens)
        except Exception as e:
            logger.error(f"Completion failed for node {node_id}: {e}")
            return self.fallback_reply
