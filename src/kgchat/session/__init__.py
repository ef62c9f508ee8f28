"""Session navigation: active node, side panel and graph view."""

from kgchat.session import transitions
from kgchat.session.controller import SessionController

__all__ = [
    "SessionController",
    "transitions",
]
