"""Visible message log owned by a single dialogue session."""
from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from cyoa.domain.defs import Message


class Transcript:
    """Ordered log of displayed messages."""

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: List[Message] = list(messages)

    def replace(self, messages: Iterable[Message]) -> None:
        self._messages = list(messages)

    def extend(self, messages: Iterable[Message]) -> None:
        self._messages.extend(messages)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def snapshot(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
