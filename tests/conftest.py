from __future__ import annotations

import json
from pathlib import Path

import pytest

from vidwall.config import ProjectPaths


@pytest.fixture
def project_root(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """
    A dedicated temp project root for each test.
    All filesystem writes in tests should be under this root (or tmp_path directly).
    """
    return tmp_path_factory.mktemp("proj")


@pytest.fixture(autouse=True)
def chdir_to_project_root(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Automatically change working directory to project_root for all tests.
    This ensures relative-path operations go into the temp directory by default.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def paths(project_root: Path) -> ProjectPaths:
    """Project layout rooted at the temp project root, with public/video/ created."""
    layout = ProjectPaths.from_root(project_root)
    layout.video_dir.mkdir(parents=True)
    return layout


@pytest.fixture
def write_sources(paths: ProjectPaths):
    """Write videos.remote.json with the given value and return its path."""

    def _write(value: object) -> Path:
        paths.sources_file.write_text(json.dumps(value), encoding="utf-8")
        return paths.sources_file

    return _write


@pytest.fixture
def make_item(paths: ProjectPaths):
    """Create `public/video/<id>/` with the given files.

    Files ending in `.info.json` get their metadata dict (or raw string)
    serialized; other files get placeholder bytes.
    """

    def _make(item_id: str, files: dict[str, object] | list[str]) -> Path:
        item_dir = paths.video_dir / item_id
        item_dir.mkdir(parents=True, exist_ok=True)
        if isinstance(files, list):
            files = {name: None for name in files}
        for name, content in files.items():
            target = item_dir / name
            if isinstance(content, str):
                target.write_text(content, encoding="utf-8")
            elif content is not None:
                target.write_text(json.dumps(content), encoding="utf-8")
            else:
                target.write_bytes(b"fake media")
        return item_dir

    return _make
