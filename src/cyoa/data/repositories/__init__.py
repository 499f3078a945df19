"""Repository exports."""

from .catalog_repo import DEFAULT_CATALOG_PATH, CatalogRepository, resolve
from .graph_repo import NarrativeGraphRepository

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "CatalogRepository",
    "NarrativeGraphRepository",
    "resolve",
]
