"""
vidwall core package.

Builds the playlist manifest (`videos.json`) consumed by the video wall
renderer:
- `vidwall.sources` loads the list of remote video URLs
- `vidwall.downloader` wraps the external yt-dlp tool
- `vidwall.pipeline` fetches, scans, normalizes titles and writes the manifest
- `vidwall.cli` exposes the Typer CLI (`vidwall build`, `vidwall show`, ...)

Configuration:
- Shared filesystem anchors live in `vidwall.global_config`.
- Per-project overrides are read from `vidwall.yaml` by `vidwall.config`.
"""
