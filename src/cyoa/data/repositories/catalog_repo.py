"""Repository for the story catalog manifest."""
from __future__ import annotations

import logging
from typing import List, Sequence

from cyoa.data.errors import DataError, DataValidationError
from cyoa.data.fetch import ResourceFetcher
from cyoa.data.repositories.base import RepositoryBase
from cyoa.domain.defs import StoryCatalogEntry
from cyoa.errors import CatalogUnavailable, StoryNotFound

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = "/stories.json"


class CatalogRepository(RepositoryBase):
    """Loads the list of available stories and resolves ids to story files."""

    def __init__(self, fetcher: ResourceFetcher, path: str = DEFAULT_CATALOG_PATH) -> None:
        super().__init__(fetcher)
        self._path = path
        self._entries: List[StoryCatalogEntry] | None = None

    @property
    def path(self) -> str:
        return self._path

    def load_catalog(self) -> List[StoryCatalogEntry]:
        """Return catalog entries in manifest order, fetching the manifest once."""
        if self._entries is None:
            try:
                raw = self._load_raw(self._path)
                self._entries = self._build(raw)
            except DataError as exc:
                logger.warning("Story catalog %s could not be loaded: %s", self._path, exc)
                raise CatalogUnavailable(f"Stories can't load right now ({exc}).") from exc
            logger.info("Loaded %d stories from %s", len(self._entries), self._path)
        return list(self._entries)

    def find(self, story_id: str) -> StoryCatalogEntry:
        """Load the catalog and resolve a story id against it."""
        return resolve(self.load_catalog(), story_id)

    def _build(self, raw: dict[str, object]) -> List[StoryCatalogEntry]:
        stories = self._require_list(raw.get("stories"), "catalog stories")
        entries: List[StoryCatalogEntry] = []
        seen: set[str] = set()
        for index, payload in enumerate(stories):
            context = f"catalog stories[{index}]"
            data = self._require_mapping(payload, context)
            story_id = self._require_str(data.get("id"), f"{context} id")
            if story_id in seen:
                raise DataValidationError(f"Duplicate story id '{story_id}' in catalog.")
            seen.add(story_id)
            themes = data.get("themes", [])
            themes_list = self._require_list(themes, f"{context} themes")
            entries.append(
                StoryCatalogEntry(
                    id=story_id,
                    title=self._require_str(data.get("title"), f"{context} title"),
                    description=self._require_str(data.get("description"), f"{context} description"),
                    file=self._require_str(data.get("file"), f"{context} file"),
                    difficulty=self._require_optional_str(data.get("difficulty"), f"{context} difficulty") or "",
                    themes=tuple(
                        self._require_str(theme, f"{context} themes[{theme_index}]")
                        for theme_index, theme in enumerate(themes_list)
                    ),
                )
            )
        return entries


def resolve(catalog: Sequence[StoryCatalogEntry], story_id: str) -> StoryCatalogEntry:
    """Return the catalog entry with the given id."""
    for entry in catalog:
        if entry.id == story_id:
            return entry
    raise StoryNotFound(story_id)
