"""Conversation graph: nodes, edges and branch placement.

Branch creation lives in kgchat.graph.branching; it depends on the dispatch
and session layers, so it is not re-exported here.
"""

from kgchat.graph.store import GraphStore

__all__ = [
    "GraphStore",
]
