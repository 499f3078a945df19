"""Application service that connects loaders, the dialogue machine and a view."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

from cyoa.config import EngineConfig, build_fetcher
from cyoa.data.repositories import CatalogRepository, NarrativeGraphRepository
from cyoa.domain.defs import Message, Option, StoryCatalogEntry
from cyoa.errors import (
    AlreadyEnded,
    CatalogUnavailable,
    DanglingDestination,
    EngineError,
    GraphUnavailable,
    InvalidChoice,
    StoryNotFound,
)
from cyoa.services.dialogue_machine import (
    AccumulatePolicy,
    DialogueMachine,
    MachineState,
    ReplacePolicy,
    TranscriptPolicy,
)

logger = logging.getLogger(__name__)

CATALOG_UNAVAILABLE_TEXT = "Stories can't load right now. Please try again later."
CLOSED_TEXT = "This conversation has been closed."


@dataclass(slots=True)
class SessionView:
    """Data returned to the presentation layer for rendering."""

    status: str
    messages: List[Message] = field(default_factory=list)
    options: List[Option] = field(default_factory=list)
    is_terminal: bool = False
    error: str | None = None
    title: str | None = None


class DialogueSession:
    """One visit to a story or conversation page."""

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        graph_repo: NarrativeGraphRepository,
        policy: TranscriptPolicy | None = None,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._graph_repo = graph_repo
        self._machine = DialogueMachine(policy)
        self._entry: StoryCatalogEntry | None = None
        self._notice: str | None = None
        self._catalog_error: str | None = None
        self._closed = False

    @property
    def machine(self) -> DialogueMachine:
        return self._machine

    @property
    def entry(self) -> StoryCatalogEntry | None:
        return self._entry

    @property
    def catalog_error(self) -> str | None:
        return self._catalog_error

    def list_stories(self) -> List[StoryCatalogEntry]:
        """Return the stories for the selection screen, or nothing when they can't load."""
        try:
            stories = self._catalog_repo.load_catalog()
        except CatalogUnavailable:
            self._catalog_error = CATALOG_UNAVAILABLE_TEXT
            return []
        self._catalog_error = None
        return stories

    def start(self, story_id: str) -> SessionView:
        """Look a story up in the catalog and load its graph."""
        if self._machine.state is not MachineState.LOADING:
            return self._already_started()
        try:
            self._entry = self._catalog_repo.find(story_id)
        except CatalogUnavailable as exc:
            self._catalog_error = CATALOG_UNAVAILABLE_TEXT
            return self._fail(exc)
        except StoryNotFound as exc:
            logger.warning("Requested unknown story '%s'", story_id)
            return self._fail(exc)
        return self.start_from_path(self._entry.file)

    def start_from_path(self, path: str) -> SessionView:
        """Load a graph from a fixed path, as the conversation page does."""
        if self._machine.state is not MachineState.LOADING:
            return self._already_started()
        try:
            graph = self._graph_repo.load(path)
        except GraphUnavailable as exc:
            return self._fail(exc)
        self._machine.attach(graph)
        return self.view()

    async def choose(self, option: Option) -> SessionView:
        """Apply a choice, waiting out the policy's reply delay when it has one."""
        try:
            pending = self._machine.begin(option)
        except DanglingDestination as exc:
            logger.error("Content defect in story graph: %s", exc)
            return self._fail(exc)
        except (InvalidChoice, AlreadyEnded) as exc:
            logger.warning("Rejected choice '%s': %s", option.text, exc)
            self._notice = str(exc)
            return self.view()
        self._notice = None
        if pending.done:
            return self.view()

        try:
            await asyncio.sleep(self._machine.policy.delay)
        except asyncio.CancelledError:
            self._machine.cancel(pending)
            raise
        if self._machine.complete(pending):
            self._notice = None
        else:
            logger.debug("Dropped reply for '%s' after the session closed", option.text)
        return self.view()

    def close(self) -> None:
        """Tear the session down; replies still waiting on their delay are dropped."""
        self._closed = True
        self._machine.dispose()

    @property
    def closed(self) -> bool:
        return self._closed

    def view(self) -> SessionView:
        machine = self._machine
        state = machine.state
        if state is MachineState.FAILED:
            error = machine.failure
        elif self._closed:
            error = CLOSED_TEXT
        else:
            error = self._notice
        options = [] if self._closed else list(machine.current_options())
        return SessionView(
            status=state.value,
            messages=list(machine.transcript),
            options=options,
            is_terminal=machine.is_terminal(),
            error=error,
            title=self._entry.title if self._entry is not None else None,
        )

    def _already_started(self) -> SessionView:
        logger.warning("Session already left the loading state; ignoring start request")
        self._notice = "This session has already been started."
        return self.view()

    def _fail(self, exc: EngineError) -> SessionView:
        self._machine.fail(str(exc))
        return self.view()


def _repositories(config: EngineConfig) -> tuple[CatalogRepository, NarrativeGraphRepository]:
    fetcher = build_fetcher(config)
    return CatalogRepository(fetcher, config.catalog_path), NarrativeGraphRepository(fetcher)


def story_session(config: EngineConfig | None = None) -> DialogueSession:
    """Session for the CYOA story page: each node replaces what is on screen."""
    catalog_repo, graph_repo = _repositories(config or EngineConfig())
    return DialogueSession(catalog_repo, graph_repo, ReplacePolicy())


def conversation_session(config: EngineConfig | None = None) -> DialogueSession:
    """Session for the conversation page: a paced, growing chat log."""
    config = config or EngineConfig()
    catalog_repo, graph_repo = _repositories(config)
    policy = AccumulatePolicy(user_sender=config.user_sender, delay=config.reply_delay)
    return DialogueSession(catalog_repo, graph_repo, policy)
