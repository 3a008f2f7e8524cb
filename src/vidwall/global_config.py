"""Global, project-wide configuration constants.

This module intentionally contains **no business logic** – only simple,
shared file names and cross-cutting constants that many modules
can import.

Concrete paths are derived from a project root by
`vidwall.config.ProjectPaths`; the CLI uses the current directory.
"""

# Core Names
PACKAGE_NAME = "vidwall"

# File names relative to a project root
SOURCES_FILENAME = "videos.remote.json"
MANIFEST_FILENAME = "videos.json"
SETTINGS_FILENAME = "vidwall.yaml"
PUBLIC_DIRNAME = "public"
VIDEO_DIRNAME = "video"
LOGS_DIRNAME = "logs"

# Manifest bounds
MAX_MANIFEST_ENTRIES = 12
MAX_TITLE_LENGTH = 120
# Title used when neither the metadata nor the item id leaves any allowed character
UNTITLED = "untitled"

# Container types in priority order (first match wins)
MEDIA_EXTENSIONS: tuple[str, ...] = (".mp4", ".webm", ".mkv", ".m4v")
SIDECAR_SUFFIX = ".info.json"

# External downloader
YTDLP_EXECUTABLE = "yt-dlp"
YTDLP_INSTALL_HINT = "Install with: brew install yt-dlp ffmpeg (or pipx install yt-dlp)"

# Number of screens on the default wall layout
DEFAULT_SURFACE_COUNT = 4
