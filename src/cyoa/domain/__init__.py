"""Domain types and pure helpers for narrative graphs."""

from .defs import Message, NarrativeGraph, NarrativeNode, Option, StoryCatalogEntry
from .diagnostics import Issue, diagnose_graph, format_issue
from .normalize import normalize_messages, normalize_node_messages, normalize_options
from .transcript import Transcript

__all__ = [
    "Issue",
    "Message",
    "NarrativeGraph",
    "NarrativeNode",
    "Option",
    "StoryCatalogEntry",
    "Transcript",
    "diagnose_graph",
    "format_issue",
    "normalize_messages",
    "normalize_node_messages",
    "normalize_options",
]
