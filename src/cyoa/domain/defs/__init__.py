"""Domain definition exports."""

from .story_def import Message, NarrativeGraph, NarrativeNode, Option, StoryCatalogEntry

__all__ = [
    "Message",
    "NarrativeGraph",
    "NarrativeNode",
    "Option",
    "StoryCatalogEntry",
]
