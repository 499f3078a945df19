"""Story definition structures used by the dialogue engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Tuple


@dataclass(frozen=True, slots=True)
class Message:
    """Single line of displayed text and who said it."""

    body: str
    sender: str = ""


@dataclass(frozen=True, slots=True)
class Option:
    """Selectable edge from one node to another."""

    text: str
    destination: str


@dataclass(frozen=True, slots=True)
class NarrativeNode:
    """Fully parsed narrative node."""

    id: str
    messages: Tuple[Message, ...] = ()
    options: Tuple[Option, ...] = ()
    # None when the source omits isEnd
    is_end: bool | None = None

    @property
    def is_terminal(self) -> bool:
        """A node ends the interaction when flagged or when nothing leads onward."""
        return bool(self.is_end) or not self.options


@dataclass(frozen=True, slots=True)
class NarrativeGraph:
    """Directed graph of nodes with a designated starting node."""

    start_node: str
    nodes: Mapping[str, NarrativeNode] = field(default_factory=dict)

    def get(self, node_id: str) -> NarrativeNode:
        """Return a node by id."""
        return self.nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes


@dataclass(frozen=True, slots=True)
class StoryCatalogEntry:
    """Listing metadata for one story and where its graph lives."""

    id: str
    title: str
    description: str
    file: str
    difficulty: str = ""
    themes: Tuple[str, ...] = ()
