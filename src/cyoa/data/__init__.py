"""Data layer utilities for fetching and loading story content."""

from .errors import DataError, DataLoadError, DataValidationError
from .fetch import FileFetcher, HttpFetcher, ResourceFetcher
from .paths import get_content_path, get_repo_root

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "FileFetcher",
    "HttpFetcher",
    "ResourceFetcher",
    "get_content_path",
    "get_repo_root",
]
