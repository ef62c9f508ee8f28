"""kgchat data models."""

from kgchat.models.message import Message, Role
from kgchat.models.node import Edge, EdgeKind, Node, NodeKind
from kgchat.models.session import SessionState, SidePanel

__all__ = [
    "Node",
    "NodeKind",
    "Edge",
    "EdgeKind",
    "Message",
    "Role",
    "SessionState",
    "SidePanel",
]
