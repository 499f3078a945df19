"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json

from .errors import DataLoadError
from .fetch import ResourceFetcher


def load_json(fetcher: ResourceFetcher, path: str) -> object:
    """Fetch a resource and decode it as JSON, raising DataLoadError on failure."""
    text = fetcher.fetch(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc
    except RecursionError as exc:
        raise DataLoadError(f"JSON in {path} is nested too deeply") from exc
