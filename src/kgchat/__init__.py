"""kgchat - branching conversations with an AI assistant, tracked as a graph."""

__version__ = "0.1.0"
