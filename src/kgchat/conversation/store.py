"""Per-node message history."""

import logging

from kgchat.errors import DuplicateIdError, UnknownNodeError
from kgchat.models import Message

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Maps a node id to its ordered, append-only conversation.

    Turns alternate user/assistant by construction: the dispatcher appends a
    user turn and then exactly one assistant reply to it.
    """

    def __init__(self) -> None:
        self._conversations: dict[str, list[Message]] = {}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._conversations

    def __len__(self) -> int:
        return len(self._conversations)

    def create(self, node_id: str) -> None:
        """Start an empty conversation for a new node."""
        if node_id in self._conversations:
            raise DuplicateIdError(node_id)
        self._conversations[node_id] = []

    def get(self, node_id: str) -> list[Message]:
        """Snapshot of a node's conversation."""
        return list(self._messages(node_id))

    def append(self, node_id: str, message: Message) -> int:
        """Append a turn and return the new conversation length."""
        messages = self._messages(node_id)
        messages.append(message)
        return len(messages)

    def length(self, node_id: str) -> int:
        return len(self._messages(node_id))

    def to_wire(self, node_id: str) -> list[dict[str, str]]:
        """The whole conversation in completion-service format."""
        return [message.to_dict() for message in self._messages(node_id)]

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """All conversations keyed by node id."""
        return {
            node_id: [message.to_dict() for message in messages]
            for node_id, messages in self._conversations.items()
        }

    def _messages(self, node_id: str) -> list[Message]:
        try:
            return self._conversations[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None
