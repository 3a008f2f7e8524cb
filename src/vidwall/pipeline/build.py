"""End-to-end manifest build.

Control flow: load sources -> probe downloader -> fetch (if available) ->
scan item directories -> fallback flat scan (if nothing found) -> write
manifest.
"""

from __future__ import annotations

import time
from typing import Any

from ..config import ProjectPaths
from ..downloader import Downloader
from ..errors import NoMediaError
from ..global_config import MAX_MANIFEST_ENTRIES, YTDLP_INSTALL_HINT
from ..sources import load_source_list
from .fetch import FetchReport, fetch_all
from .manifest import ManifestEntry, truncate_entries, write_manifest
from .scan import entries_from_items, scan_flat, scan_item_dirs

logger = __import__("logging").getLogger(__name__)


def discover_entries(paths: ProjectPaths) -> tuple[list[ManifestEntry], str, int]:
    """Scan the video root, falling back to a flat scan when nothing is found.

    Args:
        paths: Project layout to scan.

    Returns:
        Tuple of (entries, mode, skipped) where mode is "structured" or
        "fallback" and skipped counts item directories without media.
    """
    items = scan_item_dirs(paths.video_dir)
    entries = entries_from_items(items, paths.public_dir)
    skipped = len(items) - len(entries)
    if entries:
        return entries, "structured", skipped

    logger.info("No structured items found, scanning %s for loose media files", paths.video_dir)
    return scan_flat(paths.video_dir, paths.public_dir), "fallback", skipped


def build_manifest(
    paths: ProjectPaths,
    downloader: Downloader,
    *,
    dry_run: bool = False,
    limit: int = MAX_MANIFEST_ENTRIES,
) -> dict[str, Any]:
    """Fetch sources, scan local media and write `videos.json`.

    Args:
        paths: Project layout (sources file, video root, manifest path).
        downloader: Downloader used for fetches; skipped when unavailable.
        dry_run: If True, neither fetch nor write; report what would be written.
        limit: Maximum manifest length.

    Returns:
        Result dictionary with:
        - success: bool
        - total: int (number of source URLs)
        - succeeded: int (URLs fetched)
        - failed: int (URLs that failed to fetch)
        - skipped: int (item directories without playable media)
        - elapsed_s: float
        - message: str (summary message)
        - failures: list of {"item", "reason"} per failed URL
        - items: list of manifest entries (as dicts)
        - mode: "structured" or "fallback"
        - tool_available: bool
        - manifest_path: str

    Raises:
        ConfigError: If the source list is missing or malformed.
        NoMediaError: If no media was found by either scan.
    """
    started = time.monotonic()
    sources = load_source_list(paths.sources_file)

    if not dry_run:
        paths.video_dir.mkdir(parents=True, exist_ok=True)

    tool_available = downloader.is_available()
    report = FetchReport()
    if not tool_available:
        logger.warning(
            "yt-dlp not found. Skipping downloads and using existing local videos. %s",
            YTDLP_INSTALL_HINT,
        )
    elif dry_run:
        logger.info("[DRY RUN] Would download %d URLs", len(sources))
    else:
        report = fetch_all(sources, downloader, paths.video_dir)

    entries, mode, skipped = discover_entries(paths)
    if not entries:
        raise NoMediaError(f"No videos found in {paths.video_dir}")

    if dry_run:
        manifest = truncate_entries(entries, limit)
        message = f"[DRY RUN] Would write {len(manifest)} entries to {paths.manifest_file.name}"
    else:
        manifest = write_manifest(entries, paths.manifest_file, limit=limit)
        message = f"Wrote {len(manifest)} entries to {paths.manifest_file.name}"
    if mode == "fallback":
        message += " (fallback scan)"

    return {
        "success": True,
        "total": len(sources),
        "succeeded": len(report.succeeded),
        "failed": len(report.failures),
        "skipped": skipped,
        "elapsed_s": time.monotonic() - started,
        "message": message,
        "failures": [{"item": f.url, "reason": f.diagnostic} for f in report.failures],
        "items": [entry.to_dict() for entry in manifest],
        "mode": mode,
        "tool_available": tool_available,
        "manifest_path": str(paths.manifest_file),
    }
