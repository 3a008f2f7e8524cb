"""External downloader capability interface.

The pipeline only talks to a `Downloader`: one capability query and one
fetch call. `YtDlpDownloader` shells out to the yt-dlp CLI; `NullDownloader`
is never available and lets the pipeline run on pre-downloaded files only.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from .errors import FetchFailure, ToolUnavailable
from .global_config import YTDLP_EXECUTABLE

logger = __import__("logging").getLogger(__name__)

# Ordered format selectors, evaluated left to right by yt-dlp:
# 1. H.264 video + AAC audio, remuxed into mp4 (needs ffmpeg)
# 2. any H.264 video + best audio
# 3. best single mp4 file
# 4. best single file of any container
FORMAT_PREFERENCE: tuple[str, ...] = (
    "bv*[ext=mp4][vcodec*=avc1]+ba[ext=m4a]",
    "bv*[vcodec*=avc1]+ba",
    "best[ext=mp4]",
    "best",
)
MERGE_OUTPUT_FORMAT = "mp4"

# Lines of stderr kept in a FetchFailure diagnostic
_DIAGNOSTIC_TAIL_LINES = 5


class Downloader(Protocol):
    """Capability interface for the external download tool."""

    def is_available(self) -> bool:
        """Return True if fetches can be attempted in this environment."""
        ...

    def fetch(self, url: str, output_template: str) -> None:
        """Download one URL to the given output template.

        Raises:
            FetchFailure: If the URL could not be fetched.
        """
        ...


def format_selector() -> str:
    """Return the yt-dlp `-f` expression for the format-preference chain."""
    return "/".join(FORMAT_PREFERENCE)


def output_template(video_dir: Path) -> str:
    """Return the yt-dlp `-o` template placing items under `<video_dir>/<id>/<id>.<ext>`."""
    return str(video_dir / "%(id)s" / "%(id)s.%(ext)s")


def build_fetch_args(url: str, template: str) -> list[str]:
    """Build yt-dlp arguments (without the executable) for a single URL."""
    return [
        "-o",
        template,
        "-f",
        format_selector(),
        "--merge-output-format",
        MERGE_OUTPUT_FORMAT,
        "--no-warnings",
        "--write-info-json",
        "--no-playlist",
        url,
    ]


class YtDlpDownloader:
    """Downloader backed by the yt-dlp command line tool.

    Attributes:
        executable: Name or path of the yt-dlp executable.
        timeout_s: Optional per-fetch timeout in seconds.
        version: Version reported by the last successful probe.
    """

    def __init__(self, executable: str = YTDLP_EXECUTABLE, *, timeout_s: float | None = None) -> None:
        self.executable = executable
        self.timeout_s = timeout_s
        self.version: str | None = None
        self._available: bool | None = None

    def resolve_executable(self) -> str | None:
        """Resolve the executable via PATH (or as given, if it is a path)."""
        candidate = Path(self.executable)
        if candidate.parent != Path(".") and candidate.exists():
            return str(candidate)
        return shutil.which(self.executable)

    def is_available(self) -> bool:
        """Probe the tool with `--version` and cache the result."""
        if self._available is not None:
            return self._available

        try:
            result = subprocess.run(
                [self.executable, "--version"],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=30,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("yt-dlp probe failed: %s", e)
            self._available = False
            return False

        self._available = result.returncode == 0
        if self._available:
            self.version = result.stdout.strip() or None
            logger.info("Using %s %s", self.executable, self.version or "(unknown version)")
        else:
            logger.debug("yt-dlp probe exited with status %s", result.returncode)
        return self._available

    def fetch(self, url: str, output_template: str) -> None:
        args = [self.executable, *build_fetch_args(url, output_template)]
        logger.debug("Running: %s", " ".join(args))
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            raise FetchFailure(url, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise FetchFailure(url, str(e)) from e

        if result.returncode != 0:
            raise FetchFailure(url, _diagnostic(result.stderr, result.returncode))


class NullDownloader:
    """Downloader that is never available (degraded mode)."""

    def is_available(self) -> bool:
        return False

    def fetch(self, url: str, output_template: str) -> None:
        raise ToolUnavailable("No downloader configured")


def _diagnostic(stderr: str | None, returncode: int) -> str:
    lines = [line for line in (stderr or "").splitlines() if line.strip()]
    if not lines:
        return f"exit status {returncode}"
    return "\n".join(lines[-_DIAGNOSTIC_TAIL_LINES:])
