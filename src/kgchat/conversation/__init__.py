"""Conversation history storage."""

from kgchat.conversation.store import ConversationStore

__all__ = ["ConversationStore"]
