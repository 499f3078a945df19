"""State machine that walks a narrative graph one choice at a time."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from cyoa.config import DEFAULT_REPLY_DELAY, DEFAULT_USER_SENDER
from cyoa.domain.defs import Message, NarrativeGraph, NarrativeNode, Option
from cyoa.domain.transcript import Transcript
from cyoa.errors import AlreadyEnded, DanglingDestination, InvalidChoice, TransitionInProgress

logger = logging.getLogger(__name__)


class MachineState(Enum):
    LOADING = "loading"
    READY = "ready"
    TRANSITIONING = "transitioning"
    ENDED = "ended"
    FAILED = "failed"


class TranscriptPolicy:
    """Decides how the transcript changes when a node is entered or a choice is made."""

    delay: float = 0.0
    deferred: bool = False

    def on_start(self, transcript: Transcript, node: NarrativeNode) -> None:
        raise NotImplementedError

    def on_choice(self, transcript: Transcript, option: Option) -> None:
        raise NotImplementedError

    def on_arrive(self, transcript: Transcript, node: NarrativeNode) -> None:
        raise NotImplementedError


class ReplacePolicy(TranscriptPolicy):
    """Story pages: only the current node's messages are ever visible."""

    def on_start(self, transcript: Transcript, node: NarrativeNode) -> None:
        transcript.replace(node.messages)

    def on_choice(self, transcript: Transcript, option: Option) -> None:
        return None

    def on_arrive(self, transcript: Transcript, node: NarrativeNode) -> None:
        transcript.replace(node.messages)


class AccumulatePolicy(TranscriptPolicy):
    """Conversation pages: a growing chat log with the user's replies echoed.

    The reply is echoed as soon as it is chosen; the next node's messages
    follow after ``delay`` seconds.
    """

    deferred = True

    def __init__(self, user_sender: str = DEFAULT_USER_SENDER, delay: float = DEFAULT_REPLY_DELAY) -> None:
        if delay < 0:
            raise ValueError("delay must not be negative.")
        self.user_sender = user_sender
        self.delay = delay

    def on_start(self, transcript: Transcript, node: NarrativeNode) -> None:
        transcript.extend(node.messages)

    def on_choice(self, transcript: Transcript, option: Option) -> None:
        transcript.append(Message(body=option.text, sender=self.user_sender))

    def on_arrive(self, transcript: Transcript, node: NarrativeNode) -> None:
        transcript.extend(node.messages)


@dataclass(slots=True)
class PendingTransition:
    """Handle for a choice whose destination has not been applied yet."""

    option: Option
    origin_node_id: str
    completed: bool = False
    cancelled: bool = False

    @property
    def done(self) -> bool:
        return self.completed or self.cancelled


class DialogueMachine:
    """Owns the current node and the transcript for one dialogue."""

    def __init__(self, policy: TranscriptPolicy | None = None) -> None:
        self._policy = policy or ReplacePolicy()
        self._state = MachineState.LOADING
        self._graph: NarrativeGraph | None = None
        self._current_node_id: str | None = None
        self._transcript = Transcript()
        self._pending: PendingTransition | None = None
        self._failure: str | None = None
        self._disposed = False

    @property
    def policy(self) -> TranscriptPolicy:
        return self._policy

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def graph(self) -> NarrativeGraph | None:
        return self._graph

    @property
    def current_node_id(self) -> str | None:
        return self._current_node_id

    @property
    def failure(self) -> str | None:
        return self._failure

    @property
    def transcript(self) -> Tuple[Message, ...]:
        return self._transcript.snapshot()

    @property
    def pending(self) -> PendingTransition | None:
        return self._pending

    def attach(self, graph: NarrativeGraph) -> None:
        """Leave the loading state with a freshly loaded graph."""
        if self._state is not MachineState.LOADING:
            raise ValueError(f"Cannot attach a graph while {self._state.value}.")
        start = graph.get(graph.start_node)
        self._graph = graph
        self._current_node_id = start.id
        self._policy.on_start(self._transcript, start)
        self._state = MachineState.ENDED if start.is_terminal else MachineState.READY
        logger.debug("Dialogue started at node '%s' (%s)", start.id, self._state.value)

    def fail(self, reason: str) -> None:
        """Move to the failed state; the dialogue cannot continue afterwards."""
        self._cancel_pending()
        self._failure = reason
        self._state = MachineState.FAILED

    def current_node(self) -> NarrativeNode | None:
        if self._graph is None or self._current_node_id is None:
            return None
        return self._graph.get(self._current_node_id)

    def current_messages(self) -> Tuple[Message, ...]:
        node = self.current_node()
        return node.messages if node is not None else ()

    def current_options(self) -> Tuple[Option, ...]:
        node = self.current_node()
        if node is None or self._state is not MachineState.READY:
            return ()
        return node.options

    def is_terminal(self) -> bool:
        return self._state is MachineState.ENDED

    def begin(self, option: Option) -> PendingTransition:
        """Validate a choice and apply its immediate effect on the transcript.

        Policies without a deferred part finish the transition here; otherwise
        the machine stays ``TRANSITIONING`` until :meth:`complete` is called.
        """
        node = self._require_choosable()
        if option not in node.options:
            raise InvalidChoice(f"'{option.text}' is not an option on node '{node.id}'.")
        assert self._graph is not None
        if option.destination not in self._graph:
            raise DanglingDestination(node.id, option.destination)

        pending = PendingTransition(option=option, origin_node_id=node.id)
        self._policy.on_choice(self._transcript, option)
        if self._policy.deferred:
            self._pending = pending
            self._state = MachineState.TRANSITIONING
        else:
            self._arrive(pending)
        return pending

    def complete(self, pending: PendingTransition) -> bool:
        """Apply the deferred part of a transition; False when it was discarded."""
        if pending.done:
            return False
        if pending is not self._pending:
            raise ValueError("Transition is not pending on this machine.")
        self._pending = None
        self._arrive(pending)
        return True

    def cancel(self, pending: PendingTransition) -> None:
        """Discard a pending transition and stay on its origin node."""
        if pending.done or pending is not self._pending:
            return
        self._cancel_pending()
        if self._state is MachineState.TRANSITIONING:
            self._state = MachineState.READY

    def choose(self, option: Option) -> PendingTransition:
        """Make a choice and apply it fully, without any pacing delay."""
        pending = self.begin(option)
        if not pending.done:
            self.complete(pending)
        return pending

    def dispose(self) -> None:
        """Tear down; any pending transition is dropped and further choices rejected."""
        self._cancel_pending()
        self._disposed = True

    def _require_choosable(self) -> NarrativeNode:
        if self._disposed:
            raise InvalidChoice("Dialogue has been closed.")
        if self._state is MachineState.TRANSITIONING:
            raise TransitionInProgress("Previous choice is still being applied.")
        if self._state is MachineState.ENDED:
            raise AlreadyEnded(f"Dialogue ended at node '{self._current_node_id}'.")
        node = self.current_node()
        if self._state is not MachineState.READY or node is None:
            raise InvalidChoice(f"No choices are available while {self._state.value}.")
        return node

    def _arrive(self, pending: PendingTransition) -> None:
        assert self._graph is not None
        node = self._graph.get(pending.option.destination)
        self._current_node_id = node.id
        self._policy.on_arrive(self._transcript, node)
        pending.completed = True
        self._state = MachineState.ENDED if node.is_terminal else MachineState.READY
        logger.debug("Moved from '%s' to '%s' (%s)", pending.origin_node_id, node.id, self._state.value)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancelled = True
            logger.debug("Discarded pending transition to '%s'", self._pending.option.destination)
            self._pending = None
