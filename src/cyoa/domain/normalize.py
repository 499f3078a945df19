"""Pure normalization of the message and option shapes found in story files.

Story files carry messages in three shapes that must all read the same:

* ``"message": {...}`` (a single object, older story files)
* ``"message": [...]`` (a list under the singular key)
* ``"messages": [...]`` (the current shape, also accepted as a single object)

Options are read from ``options`` or from the older ``choices`` key.
"""
from __future__ import annotations

from typing import Mapping, Tuple

from cyoa.data.errors import DataValidationError
from cyoa.domain.defs import Message, Option

MESSAGE_KEYS = ("messages", "message")
OPTION_KEYS = ("options", "choices")


def normalize_messages(raw: object, context: str = "messages") -> Tuple[Message, ...]:
    """Collapse a single message object or a list of them into a tuple of Message."""
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        return (_to_message(raw, context),)
    if isinstance(raw, list):
        return tuple(_to_message(entry, f"{context}[{index}]") for index, entry in enumerate(raw))
    raise DataValidationError(f"{context} must be an object or a list of objects.")


def normalize_node_messages(node_data: Mapping[str, object], context: str = "node") -> Tuple[Message, ...]:
    """Return the canonical messages of a raw node, preferring ``messages`` over ``message``."""
    for key in MESSAGE_KEYS:
        if key in node_data:
            return normalize_messages(node_data[key], f"{context} {key}")
    return ()


def normalize_options(node_data: Mapping[str, object], context: str = "node") -> Tuple[Option, ...]:
    """Return the options of a raw node, accepting the legacy ``choices`` key."""
    for key in OPTION_KEYS:
        if key not in node_data:
            continue
        raw = node_data[key]
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise DataValidationError(f"{context} {key} must be a list if provided.")
        return tuple(_to_option(entry, f"{context} {key}[{index}]") for index, entry in enumerate(raw))
    return ()


def _to_message(entry: object, context: str) -> Message:
    if not isinstance(entry, Mapping):
        raise DataValidationError(f"{context} must be an object/dict.")
    body = entry.get("body", entry.get("text"))
    if not isinstance(body, str):
        raise DataValidationError(f"{context} body must be a string.")
    sender = entry.get("sender", "")
    if not isinstance(sender, str):
        raise DataValidationError(f"{context} sender must be a string.")
    return Message(body=body, sender=sender)


def _to_option(entry: object, context: str) -> Option:
    if not isinstance(entry, Mapping):
        raise DataValidationError(f"{context} must be an object/dict.")
    text = entry.get("text")
    destination = entry.get("destination")
    if not isinstance(text, str):
        raise DataValidationError(f"{context} text must be a string.")
    if not isinstance(destination, str):
        raise DataValidationError(f"{context} destination must be a string.")
    return Option(text=text, destination=destination)
