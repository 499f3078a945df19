"""Engine configuration and fetcher selection."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from cyoa.data.fetch import FileFetcher, HttpFetcher, ResourceFetcher
from cyoa.data.repositories.catalog_repo import DEFAULT_CATALOG_PATH

logger = logging.getLogger(__name__)

DEFAULT_CONVERSATION_PATH = "/conversation.json"
DEFAULT_REPLY_DELAY = 0.8
DEFAULT_USER_SENDER = "you"


@dataclass(slots=True)
class EngineConfig:
    """Where content comes from and how conversations are paced."""

    content_root: str | None = None
    base_url: str | None = None
    catalog_path: str = DEFAULT_CATALOG_PATH
    conversation_path: str = DEFAULT_CONVERSATION_PATH
    reply_delay: float = DEFAULT_REPLY_DELAY
    user_sender: str = DEFAULT_USER_SENDER
    http_timeout: float | None = None


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _str_or(value: object, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _non_negative_float(value: object, default: float | None) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return number


def _normalize(raw: dict[str, object]) -> EngineConfig:
    defaults = EngineConfig()
    return EngineConfig(
        content_root=_optional_str(raw.get("content_root")),
        base_url=_optional_str(raw.get("base_url")),
        catalog_path=_str_or(raw.get("catalog_path"), defaults.catalog_path),
        conversation_path=_str_or(raw.get("conversation_path"), defaults.conversation_path),
        reply_delay=_non_negative_float(raw.get("reply_delay"), defaults.reply_delay),
        user_sender=_str_or(raw.get("user_sender"), defaults.user_sender),
        http_timeout=_non_negative_float(raw.get("http_timeout"), None),
    )


def load_config(path: Path | str | None = None) -> EngineConfig:
    """Load config from disk or return defaults."""
    if path is None:
        return EngineConfig()
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return EngineConfig()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return EngineConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a JSON object", config_path)
        return EngineConfig()
    unknown = set(raw) - {field.name for field in fields(EngineConfig)}
    if unknown:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
    return _normalize(raw)


def save_config(config: EngineConfig, path: Path | str) -> None:
    """Persist config to disk."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def build_fetcher(config: EngineConfig) -> ResourceFetcher:
    """Return an HTTP fetcher when a base URL is configured, else a local one."""
    if config.base_url:
        return HttpFetcher(config.base_url, timeout=config.http_timeout)
    return FileFetcher(config.content_root)
