"""Completion service client."""

from kgchat.llm.completion_client import CompletionClient, extract_reply_text

__all__ = [
    "CompletionClient",
    "extract_reply_text",
]
