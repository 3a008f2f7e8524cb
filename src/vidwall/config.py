"""Project paths and optional per-project settings.

Every pipeline component receives a `ProjectPaths` value instead of reading
`global_config` directly, so a whole run can be redirected to another tree
(tests use a temporary directory).

Optional settings are read from `vidwall.yaml` at the project root:

    ytdlp_executable: /opt/homebrew/bin/yt-dlp
    fetch_timeout_s: 600
    max_entries: 8
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .global_config import (
    LOGS_DIRNAME,
    MANIFEST_FILENAME,
    MAX_MANIFEST_ENTRIES,
    PUBLIC_DIRNAME,
    SETTINGS_FILENAME,
    SOURCES_FILENAME,
    VIDEO_DIRNAME,
    YTDLP_EXECUTABLE,
)

logger = __import__("logging").getLogger(__name__)


@dataclass(frozen=True)
class ProjectPaths:
    """Filesystem layout of one video wall project.

    Attributes:
        root: Project root directory.
        public_dir: Web root; manifest `src` values are relative to it.
        video_dir: Directory holding per-item download folders.
        sources_file: Input list of remote URLs.
        manifest_file: Output manifest consumed by the renderer.
        settings_file: Optional YAML settings file.
        logs_dir: Per-run CLI log files.
    """

    root: Path
    public_dir: Path
    video_dir: Path
    sources_file: Path
    manifest_file: Path
    settings_file: Path
    logs_dir: Path

    @classmethod
    def from_root(cls, root: Path | str | None = None) -> ProjectPaths:
        """Derive the layout from a project root (the current directory if None)."""
        root = Path(root if root is not None else Path.cwd()).resolve()
        public_dir = root / PUBLIC_DIRNAME
        return cls(
            root=root,
            public_dir=public_dir,
            video_dir=public_dir / VIDEO_DIRNAME,
            sources_file=root / SOURCES_FILENAME,
            manifest_file=root / MANIFEST_FILENAME,
            settings_file=root / SETTINGS_FILENAME,
            logs_dir=root / LOGS_DIRNAME,
        )


@dataclass(frozen=True)
class ProjectSettings:
    """Tunable settings for a project.

    Attributes:
        ytdlp_executable: Name or path of the yt-dlp executable.
        fetch_timeout_s: Per-URL timeout in seconds, or None to rely on the tool.
        max_entries: Maximum manifest length (1..MAX_MANIFEST_ENTRIES).
    """

    ytdlp_executable: str = YTDLP_EXECUTABLE
    fetch_timeout_s: float | None = None
    max_entries: int = MAX_MANIFEST_ENTRIES


_SETTINGS_KEYS = {"ytdlp_executable", "fetch_timeout_s", "max_entries"}


def load_project_settings(paths: ProjectPaths) -> ProjectSettings:
    """Load `vidwall.yaml` for a project, falling back to defaults.

    Args:
        paths: Project layout whose settings file should be read.

    Returns:
        ProjectSettings with file values applied over the defaults.

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping,
            contains unknown keys, or holds values of the wrong type.
    """
    settings_file = paths.settings_file
    if not settings_file.exists():
        return ProjectSettings()

    try:
        with open(settings_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read {settings_file}: {e}") from e

    if data is None:
        return ProjectSettings()
    if not isinstance(data, dict):
        raise ConfigError(f"{settings_file} must contain a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _SETTINGS_KEYS)
    if unknown:
        raise ConfigError(
            f"Unknown settings in {settings_file}: {', '.join(unknown)}. "
            f"Known settings: {', '.join(sorted(_SETTINGS_KEYS))}"
        )

    logger.debug("Loaded settings from %s", settings_file)
    return ProjectSettings(
        ytdlp_executable=_parse_executable(data.get("ytdlp_executable", YTDLP_EXECUTABLE)),
        fetch_timeout_s=_parse_timeout(data.get("fetch_timeout_s")),
        max_entries=_parse_max_entries(data.get("max_entries", MAX_MANIFEST_ENTRIES)),
    )


def _parse_executable(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("ytdlp_executable must be a non-empty string")
    return value.strip()


def _parse_timeout(value: Any) -> float | None:
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"fetch_timeout_s must be a positive number, got {value!r}")
    return float(value)


def _parse_max_entries(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"max_entries must be an integer, got {value!r}")
    if not 1 <= value <= MAX_MANIFEST_ENTRIES:
        raise ConfigError(f"max_entries must be between 1 and {MAX_MANIFEST_ENTRIES}, got {value}")
    return value
