"""Base repository implementation for fetched JSON content."""
from __future__ import annotations

from cyoa.data.errors import DataValidationError
from cyoa.data.fetch import ResourceFetcher
from cyoa.data.json_loader import load_json


class RepositoryBase:
    """Common loading and shape checks for repositories."""

    def __init__(self, fetcher: ResourceFetcher) -> None:
        self._fetcher = fetcher

    def _load_raw(self, path: str) -> dict[str, object]:
        raw = load_json(self._fetcher, path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {path}")
        return raw

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string if provided.")
        return value

    @staticmethod
    def _require_optional_bool(value: object, context: str) -> bool | None:
        if value is None:
            return None
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean if provided.")
        return value
