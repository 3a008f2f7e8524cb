"""Discovery of downloaded media under the video root.

Two strategies:
- `scan_item_dirs` reads the structured `video/<id>/` layout written by the
  downloader, one item per subdirectory.
- `scan_flat` is the fallback used when no structured item was found; it
  picks up media files dropped directly into the video root.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..global_config import MEDIA_EXTENSIONS, SIDECAR_SUFFIX
from .manifest import ManifestEntry
from .metadata import display_title, resolve_title

logger = __import__("logging").getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredMedia:
    """Classification of one item directory.

    Attributes:
        item_id: Directory name.
        directory: Absolute path of the item directory.
        candidates: Media file names ordered by container priority.
        sidecar: Sidecar metadata file, if one exists.
    """

    item_id: str
    directory: Path
    candidates: tuple[str, ...]
    sidecar: Path | None = None

    @property
    def chosen(self) -> str | None:
        return self.candidates[0] if self.candidates else None


def media_candidates(filenames: list[str], item_id: str | None = None) -> tuple[str, ...]:
    """Order media file names by container priority (mp4, webm, mkv, m4v).

    Extensions are matched case-insensitively; names with another extension
    are dropped. Within one container, the merged `<item_id>.<ext>` output
    comes first, ahead of leftover per-format streams such as
    `<item_id>.f137.mp4`; the rest keep sorted order.
    """
    exact = {f"{item_id}{ext}".lower() for ext in MEDIA_EXTENSIONS} if item_id else set()
    ordered: list[str] = []
    for ext in MEDIA_EXTENSIONS:
        matches = [name for name in sorted(filenames) if name.lower().endswith(ext)]
        matches.sort(key=lambda name: name.lower() not in exact)
        ordered.extend(matches)
    return tuple(ordered)


def choose_media_file(filenames: list[str], item_id: str | None = None) -> str | None:
    """Return the highest-priority media file name, or None."""
    candidates = media_candidates(filenames, item_id)
    return candidates[0] if candidates else None


def find_sidecar(directory: Path, filenames: list[str]) -> Path | None:
    """Return the first `*.info.json` file in sorted order, or None."""
    for name in sorted(filenames):
        if name.endswith(SIDECAR_SUFFIX):
            return directory / name
    return None


def classify_item_dir(directory: Path) -> DiscoveredMedia:
    """Classify the files of one item directory."""
    filenames = [p.name for p in directory.iterdir() if p.is_file()]
    return DiscoveredMedia(
        item_id=directory.name,
        directory=directory,
        candidates=media_candidates(filenames, directory.name),
        sidecar=find_sidecar(directory, filenames),
    )


def scan_item_dirs(video_dir: Path) -> list[DiscoveredMedia]:
    """Classify every immediate subdirectory of the video root.

    Subdirectories are visited in name order; hidden directories are
    ignored. A missing video root yields an empty list.
    """
    if not video_dir.is_dir():
        logger.debug("Video directory not found: %s", video_dir)
        return []

    discovered: list[DiscoveredMedia] = []
    for directory in sorted(p for p in video_dir.iterdir() if p.is_dir()):
        if directory.name.startswith("."):
            continue
        discovered.append(classify_item_dir(directory))
    return discovered


def entries_from_items(items: list[DiscoveredMedia], public_dir: Path) -> list[ManifestEntry]:
    """Turn discovered items into manifest entries, skipping items with no media."""
    entries: list[ManifestEntry] = []
    for item in items:
        chosen = item.chosen
        if chosen is None:
            logger.debug("No playable media in %s, skipping", item.directory)
            continue
        src = (item.directory / chosen).relative_to(public_dir).as_posix()
        entries.append(ManifestEntry(src=src, title=resolve_title(item.item_id, item.sidecar)))
    return entries


def scan_flat(video_dir: Path, public_dir: Path) -> list[ManifestEntry]:
    """Build entries from media files directly inside the video root.

    The title is the file name without its final extension, sanitized the
    same way as sidecar titles.
    """
    if not video_dir.is_dir():
        return []

    entries: list[ManifestEntry] = []
    for path in sorted(p for p in video_dir.iterdir() if p.is_file()):
        if not path.name.lower().endswith(MEDIA_EXTENSIONS):
            continue
        src = path.relative_to(public_dir).as_posix()
        entries.append(ManifestEntry(src=src, title=display_title(path.stem, path.stem)))
    return entries
