"""Tests for project paths and vidwall.yaml settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from vidwall.config import ProjectPaths, ProjectSettings, load_project_settings
from vidwall.errors import ConfigError
from vidwall.global_config import MAX_MANIFEST_ENTRIES, YTDLP_EXECUTABLE


@pytest.mark.unit
def test_project_paths_derive_from_root(tmp_path: Path) -> None:
    paths = ProjectPaths.from_root(tmp_path)
    root = tmp_path.resolve()

    assert paths.root == root
    assert paths.public_dir == root / "public"
    assert paths.video_dir == root / "public" / "video"
    assert paths.sources_file == root / "videos.remote.json"
    assert paths.manifest_file == root / "videos.json"
    assert paths.settings_file == root / "vidwall.yaml"
    assert paths.logs_dir == root / "logs"


@pytest.mark.unit
def test_project_paths_default_to_current_directory(project_root: Path) -> None:
    paths = ProjectPaths.from_root()

    assert paths == ProjectPaths.from_root(project_root)
    assert paths.root == project_root.resolve()


@pytest.mark.integration
def test_settings_default_when_file_missing(paths: ProjectPaths) -> None:
    settings = load_project_settings(paths)

    assert settings == ProjectSettings()
    assert settings.ytdlp_executable == YTDLP_EXECUTABLE
    assert settings.fetch_timeout_s is None
    assert settings.max_entries == MAX_MANIFEST_ENTRIES


@pytest.mark.integration
def test_settings_empty_file_uses_defaults(paths: ProjectPaths) -> None:
    paths.settings_file.write_text("", encoding="utf-8")

    assert load_project_settings(paths) == ProjectSettings()


@pytest.mark.integration
def test_settings_read_from_yaml(paths: ProjectPaths) -> None:
    paths.settings_file.write_text(
        "ytdlp_executable: /opt/bin/yt-dlp\nfetch_timeout_s: 90\nmax_entries: 4\n",
        encoding="utf-8",
    )

    settings = load_project_settings(paths)

    assert settings.ytdlp_executable == "/opt/bin/yt-dlp"
    assert settings.fetch_timeout_s == 90.0
    assert settings.max_entries == 4


@pytest.mark.integration
@pytest.mark.parametrize(
    "content, match",
    [
        ("- a\n- b\n", "mapping"),
        ("colour: red\n", "Unknown settings"),
        ("max_entries: 13\n", "between 1 and 12"),
        ("max_entries: 0\n", "between 1 and 12"),
        ("max_entries: true\n", "integer"),
        ("fetch_timeout_s: -5\n", "positive"),
        ("ytdlp_executable: ''\n", "non-empty"),
        ("key: [unclosed\n", "Could not read"),
    ],
)
def test_settings_rejects_invalid_values(paths: ProjectPaths, content: str, match: str) -> None:
    paths.settings_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=match):
        load_project_settings(paths)
