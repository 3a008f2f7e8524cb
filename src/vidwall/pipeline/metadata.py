"""Sidecar metadata parsing and display-title sanitization."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..global_config import MAX_TITLE_LENGTH, UNTITLED
from ..errors import MetadataParseError

logger = __import__("logging").getLogger(__name__)

_WHITESPACE_CONTROL = re.compile(r"[\n\r\t]")
# ASCII word characters and whitespace only
_DISALLOWED = re.compile(r"[^\w\-\s()\[\].&',]", re.ASCII)


@dataclass(frozen=True)
class SidecarMetadata:
    """Fields read from a `<id>.info.json` sidecar.

    Attributes:
        title: Title string, if present and a string.
        item_id: The tool's item id, if present.
        webpage_url: Canonical page URL, if present.
    """

    title: str | None = None
    item_id: str | None = None
    webpage_url: str | None = None


def sanitize_title(text: str) -> str:
    """Make a title safe to render as plain text.

    Newline, tab and carriage return become spaces; characters outside ASCII
    word characters, hyphen, whitespace, parentheses, brackets, period, ampersand,
    apostrophe and comma are removed; the result is stripped and truncated to
    MAX_TITLE_LENGTH. Applying it twice gives the same result as once.
    """
    cleaned = _WHITESPACE_CONTROL.sub(" ", text)
    cleaned = _DISALLOWED.sub("", cleaned)
    # Strip again after truncation so a cut at a space does not leave a trailing blank
    return cleaned.strip()[:MAX_TITLE_LENGTH].strip()


def display_title(candidate: str | None, item_id: str) -> str:
    """Sanitize a title candidate, falling back to the item id.

    Returns the sanitized candidate, else the sanitized item id, else
    UNTITLED, so the result is never empty and always passes the sanitizer.
    """
    for value in (candidate, item_id):
        if value:
            sanitized = sanitize_title(value)
            if sanitized:
                return sanitized
    return UNTITLED


def parse_sidecar(path: Path) -> SidecarMetadata:
    """Parse a sidecar metadata file.

    Raises:
        MetadataParseError: If the file cannot be read, is not JSON, or is
            not a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MetadataParseError(f"Could not parse {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise MetadataParseError(f"{path.name} must contain a JSON object, got {type(data).__name__}")

    return SidecarMetadata(
        title=_optional_str(data.get("title")),
        item_id=_optional_str(data.get("id")),
        webpage_url=_optional_str(data.get("webpage_url")),
    )


def resolve_title(item_id: str, sidecar_path: Path | None) -> str:
    """Return the display title for an item.

    Uses the sidecar `title` when available; a missing sidecar, a parse
    failure or a missing title falls back to the item id.
    """
    candidate: str | None = None
    if sidecar_path is not None:
        try:
            candidate = parse_sidecar(sidecar_path).title
        except MetadataParseError as e:
            logger.warning("Using item id as title for %s: %s", item_id, e)
    return display_title(candidate, item_id)


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None
