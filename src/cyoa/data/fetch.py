"""Resource fetchers used by the catalog and narrative loaders."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import httpx

from . import paths
from .errors import DataLoadError

logger = logging.getLogger(__name__)


class ResourceFetcher(Protocol):
    """Anything that can turn a resource path into its text payload."""

    def fetch(self, path: str) -> str:
        ...


class FileFetcher:
    """Reads resources from a local content directory."""

    def __init__(self, base_path: Path | str | None = None) -> None:
        self._base_path = paths.get_content_path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def fetch(self, path: str) -> str:
        file_path = self._base_path / path.lstrip("/")
        logger.debug("Reading resource %s", file_path)
        try:
            return file_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DataLoadError(f"Resource not found: {file_path}") from exc
        except OSError as exc:
            raise DataLoadError(f"Unable to read resource: {file_path}") from exc
        except UnicodeDecodeError as exc:
            raise DataLoadError(f"Resource is not valid UTF-8: {file_path}") from exc


class HttpFetcher:
    """Fetches resources over HTTP relative to a base URL.

    When ``client`` is given it is used as-is and left open; otherwise a
    short-lived ``httpx.Client`` is created per fetch. ``timeout`` is only
    forwarded when set so the client default applies otherwise.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def fetch(self, path: str) -> str:
        url = self.url_for(path)
        logger.debug("Fetching resource %s", url)
        try:
            if self._client is not None:
                response = self._client.get(url, follow_redirects=True)
            else:
                client_kwargs = {} if self._timeout is None else {"timeout": self._timeout}
                with httpx.Client(**client_kwargs) as client:
                    response = client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise DataLoadError(f"Timed out fetching {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise DataLoadError(f"HTTP {exc.response.status_code} fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise DataLoadError(f"Unable to fetch {url}: {exc}") from exc
        return response.text
