"""Asynchronous dispatch to the completion service."""

from kgchat.dispatch.message_dispatcher import MessageDispatcher
from kgchat.dispatch.tooltip_cache import TOOLTIP_PROMPT, TooltipCache

__all__ = [
    "MessageDispatcher",
    "TOOLTIP_PROMPT",
    "TooltipCache",
]
