"""Exception types for the manifest acquisition pipeline."""

from __future__ import annotations


class VidwallError(Exception):
    """Base exception for pipeline errors."""


class ConfigError(VidwallError):
    """Raised when the source list or project settings are missing or malformed."""


class ToolUnavailable(VidwallError):
    """Raised when the external downloader cannot be used in this environment."""


class FetchFailure(VidwallError):
    """Raised when a single URL could not be fetched.

    Attributes:
        url: Source URL that failed.
        diagnostic: Tool-provided diagnostic (stderr tail or exception text).
    """

    def __init__(self, url: str, diagnostic: str) -> None:
        super().__init__(f"Failed to download {url}: {diagnostic}")
        self.url = url
        self.diagnostic = diagnostic


class MetadataParseError(VidwallError):
    """Raised when a sidecar metadata file cannot be parsed."""


class NoMediaError(VidwallError):
    """Raised when no usable media was found after both scanning strategies."""


class ManifestFormatError(VidwallError):
    """Raised when an existing manifest file does not have the expected shape."""
