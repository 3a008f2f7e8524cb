"""CLI commands for building the manifest: build, scan, probe."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...config import ProjectPaths, ProjectSettings, load_project_settings
from ...downloader import Downloader, NullDownloader, YtDlpDownloader
from ...pipeline.build import build_manifest, discover_entries
from ..base import BaseCLI

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        help="Project root holding videos.remote.json, public/video/ and videos.json (default: current directory)",
        file_okay=False,
    ),
]
YtDlpOption = Annotated[
    str | None,
    typer.Option("--ytdlp", help="yt-dlp executable to use (overrides vidwall.yaml)"),
]


def _make_downloader(settings: ProjectSettings, ytdlp: str | None, skip_fetch: bool) -> Downloader:
    if skip_fetch:
        return NullDownloader()
    return YtDlpDownloader(ytdlp or settings.ytdlp_executable, timeout_s=settings.fetch_timeout_s)


def build_command(
    root: RootOption = None,
    skip_fetch: Annotated[
        bool,
        typer.Option("--skip-fetch", help="Do not call yt-dlp; use previously downloaded files only"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Probe and scan without downloading or writing videos.json"),
    ] = False,
    ytdlp: YtDlpOption = None,
) -> None:
    """Download sources and write videos.json.

    Reads videos.remote.json, downloads each URL with yt-dlp into
    public/video/<id>/, scans the downloaded items and writes up to 12
    entries to videos.json. Without yt-dlp, existing local files are used.
    """
    paths = ProjectPaths.from_root(root)
    cli = BaseCLI(logs_dir=paths.logs_dir)

    def _build() -> dict:
        settings = load_project_settings(paths)
        downloader = _make_downloader(settings, ytdlp, skip_fetch)
        return build_manifest(paths, downloader, dry_run=dry_run, limit=settings.max_entries)

    cli.handle_cli_operation(
        operation="build",
        op_callable=_build,
        pre_message=(
            "[DRY RUN] Would build videos.json..." if dry_run else f"Building videos.json in {paths.root}..."
        ),
        log_module="build",
        log_dry_run=dry_run,
        log_context={"root": paths.root, "skip_fetch": skip_fetch},
    )


def scan_command(root: RootOption = None) -> None:
    """List the media that would go into videos.json, without downloading."""
    paths = ProjectPaths.from_root(root)
    cli = BaseCLI()

    def _scan() -> dict:
        entries, mode, skipped = discover_entries(paths)
        return {
            "success": bool(entries),
            "total": len(entries),
            "skipped": skipped,
            "message": f"{mode} scan of {paths.video_dir}",
            "items": [entry.to_dict() for entry in entries],
        }

    cli.handle_cli_operation(operation="scan", op_callable=_scan, enable_log=False)


def probe_command(
    root: RootOption = None,
    ytdlp: YtDlpOption = None,
) -> None:
    """Report whether yt-dlp is usable in this environment."""
    paths = ProjectPaths.from_root(root)
    cli = BaseCLI()

    def _probe() -> dict:
        settings = load_project_settings(paths)
        downloader = YtDlpDownloader(ytdlp or settings.ytdlp_executable)
        available = downloader.is_available()
        if available:
            location = downloader.resolve_executable() or downloader.executable
            message = f"{location} {downloader.version or ''}".strip()
        else:
            message = f"{downloader.executable} not available; builds will use local files only"
        return {"success": available, "message": message}

    cli.handle_cli_operation(operation="probe", op_callable=_probe, enable_log=False)
