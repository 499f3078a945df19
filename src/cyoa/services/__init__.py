"""Service layer exports."""

from .dialogue_machine import (
    AccumulatePolicy,
    DialogueMachine,
    MachineState,
    PendingTransition,
    ReplacePolicy,
    TranscriptPolicy,
)
from .dialogue_session import DialogueSession, SessionView, conversation_session, story_session

__all__ = [
    "AccumulatePolicy",
    "DialogueMachine",
    "DialogueSession",
    "MachineState",
    "PendingTransition",
    "ReplacePolicy",
    "SessionView",
    "TranscriptPolicy",
    "conversation_session",
    "story_session",
]
