"""Engine-level exceptions surfaced to the presentation boundary."""
from __future__ import annotations


class EngineError(Exception):
    """Base exception for the dialogue engine."""


class CatalogUnavailable(EngineError):
    """Raised when the story manifest cannot be fetched or parsed."""


class StoryNotFound(EngineError):
    """Raised when a story id is not listed in the catalog."""

    def __init__(self, story_id: str) -> None:
        super().__init__(f"Story '{story_id}' is not in the catalog.")
        self.story_id = story_id


class GraphUnavailable(EngineError):
    """Raised when a story or conversation file cannot be fetched or parsed."""


class DanglingDestination(EngineError):
    """Raised when an option points at a node the graph does not define."""

    def __init__(self, node_id: str, destination: str) -> None:
        super().__init__(f"Node '{node_id}' has an option leading to missing node '{destination}'.")
        self.node_id = node_id
        self.destination = destination


class InvalidChoice(EngineError):
    """Raised when a choice is not offered by the current node."""


class TransitionInProgress(InvalidChoice):
    """Raised when a choice arrives before the previous one has finished."""


class AlreadyEnded(EngineError):
    """Raised when a choice is made after the interaction has ended."""
