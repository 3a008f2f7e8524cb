"""Playlist manifest (`videos.json`) types, writer and reader.

The manifest is a JSON array of at most MAX_MANIFEST_ENTRIES objects:

    [
      {"src": "video/abc123/abc123.mp4", "title": "Some title"},
      ...
    ]

`src` is relative to the public web root. The renderer reads the file once at
startup and assigns entries to screens with `select_for_surface`.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import ManifestFormatError, NoMediaError
from ..global_config import MAX_MANIFEST_ENTRIES, MAX_TITLE_LENGTH

logger = __import__("logging").getLogger(__name__)


@dataclass(frozen=True)
class ManifestEntry:
    """One playable item.

    Attributes:
        src: Media path relative to the public root (POSIX separators).
        title: Sanitized display title.
    """

    src: str
    title: str

    def to_dict(self) -> dict[str, str]:
        return {"src": self.src, "title": self.title}


Manifest = tuple[ManifestEntry, ...]


def truncate_entries(
    entries: Sequence[ManifestEntry], limit: int = MAX_MANIFEST_ENTRIES
) -> Manifest:
    """Keep the first `limit` entries in discovery order.

    Raises:
        ValueError: If limit is outside 1..MAX_MANIFEST_ENTRIES.
    """
    if not 1 <= limit <= MAX_MANIFEST_ENTRIES:
        raise ValueError(f"limit must be between 1 and {MAX_MANIFEST_ENTRIES}, got {limit}")
    return tuple(entries[:limit])


def serialize_manifest(entries: Sequence[ManifestEntry]) -> str:
    """Serialize entries as indented JSON with a trailing newline."""
    return json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False) + "\n"


def write_manifest(
    entries: Sequence[ManifestEntry],
    manifest_path: Path,
    *,
    limit: int = MAX_MANIFEST_ENTRIES,
) -> Manifest:
    """Truncate and atomically write the manifest.

    Args:
        entries: Entries in discovery order.
        manifest_path: Destination file.
        limit: Maximum number of entries to keep.

    Returns:
        The manifest that was written.

    Raises:
        NoMediaError: If entries is empty.

    Side Effects:
        - Writes a temporary file next to manifest_path and renames it into place.
    """
    if not entries:
        raise NoMediaError("No videos found after download")

    manifest = truncate_entries(entries, limit)
    payload = serialize_manifest(manifest)

    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=manifest_path.parent, prefix=f".{manifest_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, manifest_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Wrote %d entries to %s", len(manifest), manifest_path)
    return manifest


def parse_manifest(raw: Any) -> Manifest:
    """Validate a parsed JSON value as a manifest.

    Raises:
        ManifestFormatError: If raw is not a list of at most
            MAX_MANIFEST_ENTRIES objects with non-empty string `src` and
            `title` fields.
    """
    if not isinstance(raw, list):
        raise ManifestFormatError(f"Manifest must be a JSON array, got {type(raw).__name__}")
    if len(raw) > MAX_MANIFEST_ENTRIES:
        raise ManifestFormatError(
            f"Manifest has {len(raw)} entries, at most {MAX_MANIFEST_ENTRIES} allowed"
        )

    entries: list[ManifestEntry] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ManifestFormatError(f"Entry {index} must be an object")
        src = item.get("src")
        title = item.get("title")
        if not isinstance(src, str) or not src:
            raise ManifestFormatError(f"Entry {index} has no src")
        if not isinstance(title, str) or not title or len(title) > MAX_TITLE_LENGTH:
            raise ManifestFormatError(f"Entry {index} has an invalid title")
        entries.append(ManifestEntry(src=src, title=title))
    return tuple(entries)


def read_manifest(manifest_path: Path) -> Manifest:
    """Read and validate an existing manifest file.

    Raises:
        ManifestFormatError: If the file is missing, unparsable or malformed.
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ManifestFormatError(f"Manifest not found: {manifest_path}") from e
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestFormatError(f"Could not parse {manifest_path}: {e}") from e
    return parse_manifest(raw)


def select_for_surface(manifest: Sequence[ManifestEntry], ordinal: int) -> ManifestEntry | None:
    """Return the entry shown on display surface `ordinal`.

    Surfaces cycle through the manifest (`ordinal mod len`); an empty
    manifest yields None (the surface gets an empty source).
    """
    if not manifest:
        return None
    return manifest[ordinal % len(manifest)]
