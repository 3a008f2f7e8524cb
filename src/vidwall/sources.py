"""Loading and validation of the remote source list (`videos.remote.json`)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = __import__("logging").getLogger(__name__)


@dataclass(frozen=True)
class SourceList:
    """Ordered, non-empty list of remote video URLs.

    Attributes:
        urls: URLs in input order, duplicates removed.
        path: File the list was loaded from, if any.
    """

    urls: tuple[str, ...]
    path: Path | None = None

    def __len__(self) -> int:
        return len(self.urls)

    def __iter__(self):
        return iter(self.urls)


def parse_source_list(raw: Any, *, path: Path | None = None) -> SourceList:
    """Validate a parsed JSON value as a source list.

    Args:
        raw: Value produced by `json.load`.
        path: Origin of the value, used in error messages.

    Returns:
        SourceList with stripped URLs in input order. Exact duplicates are
        dropped (first occurrence kept).

    Raises:
        ConfigError: If raw is not a non-empty list of non-empty strings.
    """
    origin = str(path) if path else "source list"
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"{origin} must be a non-empty array of URLs")

    urls: list[str] = []
    seen: set[str] = set()
    for index, value in enumerate(raw):
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"{origin}: entry {index} must be a non-empty URL string, got {value!r}")
        url = value.strip()
        if url in seen:
            logger.warning("Skipping duplicate URL at index %d: %s", index, url)
            continue
        seen.add(url)
        urls.append(url)

    return SourceList(urls=tuple(urls), path=path)


def load_source_list(path: Path) -> SourceList:
    """Read and validate the source list file.

    Args:
        path: Path to `videos.remote.json`.

    Returns:
        Validated SourceList.

    Raises:
        ConfigError: If the file is missing, is not valid JSON, or does not
            contain a non-empty array of URL strings.
    """
    if not path.exists():
        raise ConfigError(f"Source list not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    sources = parse_source_list(raw, path=path)
    logger.info("Loaded %d source URLs from %s", len(sources), path)
    return sources
