"""Tests for the yt-dlp capability interface."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from vidwall.downloader import (
    FORMAT_PREFERENCE,
    NullDownloader,
    YtDlpDownloader,
    build_fetch_args,
    format_selector,
    output_template,
)
from vidwall.errors import FetchFailure, ToolUnavailable
from vidwall.pipeline.fetch import fetch_all
from vidwall.sources import SourceList


class _RunRecorder:
    """Stand-in for subprocess.run returning canned results."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "", exc: Exception | None = None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.exc = exc
        self.calls: list[dict] = []

    def __call__(self, args, **kwargs):
        self.calls.append({"args": list(args), **kwargs})
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


@pytest.mark.unit
def test_format_selector_is_ordered_chain() -> None:
    assert format_selector() == "bv*[ext=mp4][vcodec*=avc1]+ba[ext=m4a]/bv*[vcodec*=avc1]+ba/best[ext=mp4]/best"
    assert FORMAT_PREFERENCE[-1] == "best"


@pytest.mark.unit
def test_output_template_places_item_in_own_directory(tmp_path: Path) -> None:
    template = output_template(tmp_path / "video")

    assert template == str(tmp_path / "video" / "%(id)s" / "%(id)s.%(ext)s")


@pytest.mark.unit
def test_build_fetch_args() -> None:
    args = build_fetch_args("https://a.example/1", "out/%(id)s.%(ext)s")

    assert args[:2] == ["-o", "out/%(id)s.%(ext)s"]
    assert args[args.index("-f") + 1] == format_selector()
    assert args[args.index("--merge-output-format") + 1] == "mp4"
    assert "--write-info-json" in args
    assert "--no-playlist" in args
    assert "--no-warnings" in args
    assert args[-1] == "https://a.example/1"


@pytest.mark.unit
def test_probe_available(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _RunRecorder(stdout="2025.01.15\n")
    monkeypatch.setattr("vidwall.downloader.subprocess.run", run)
    downloader = YtDlpDownloader("yt-dlp")

    assert downloader.is_available() is True
    assert downloader.version == "2025.01.15"
    assert run.calls[0]["args"] == ["yt-dlp", "--version"]


@pytest.mark.unit
def test_probe_result_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _RunRecorder()
    monkeypatch.setattr("vidwall.downloader.subprocess.run", run)
    downloader = YtDlpDownloader()

    downloader.is_available()
    downloader.is_available()

    assert len(run.calls) == 1


@pytest.mark.unit
def test_probe_nonzero_exit_is_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vidwall.downloader.subprocess.run", _RunRecorder(returncode=127))

    assert YtDlpDownloader().is_available() is False


@pytest.mark.unit
def test_probe_missing_executable_is_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "vidwall.downloader.subprocess.run",
        _RunRecorder(exc=FileNotFoundError(2, "No such file or directory", "yt-dlp")),
    )

    assert YtDlpDownloader().is_available() is False


@pytest.mark.unit
def test_fetch_passes_arguments_and_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _RunRecorder()
    monkeypatch.setattr("vidwall.downloader.subprocess.run", run)

    YtDlpDownloader("/opt/yt-dlp", timeout_s=60).fetch("https://a.example/1", "t/%(id)s.%(ext)s")

    call = run.calls[0]
    assert call["args"][0] == "/opt/yt-dlp"
    assert call["args"][1:] == build_fetch_args("https://a.example/1", "t/%(id)s.%(ext)s")
    assert call["timeout"] == 60
    assert call["check"] is False


@pytest.mark.unit
def test_fetch_failure_carries_stderr_tail(monkeypatch: pytest.MonkeyPatch) -> None:
    stderr = "\n".join(f"line {i}" for i in range(10)) + "\nERROR: Video unavailable\n"
    monkeypatch.setattr("vidwall.downloader.subprocess.run", _RunRecorder(returncode=1, stderr=stderr))

    with pytest.raises(FetchFailure) as excinfo:
        YtDlpDownloader().fetch("https://a.example/gone", "t")

    assert excinfo.value.url == "https://a.example/gone"
    assert excinfo.value.diagnostic.endswith("ERROR: Video unavailable")
    assert "line 0" not in excinfo.value.diagnostic


@pytest.mark.unit
def test_fetch_failure_without_stderr_reports_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vidwall.downloader.subprocess.run", _RunRecorder(returncode=2))

    with pytest.raises(FetchFailure, match="exit status 2"):
        YtDlpDownloader().fetch("https://a.example/1", "t")


@pytest.mark.unit
def test_fetch_timeout_becomes_fetch_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "vidwall.downloader.subprocess.run",
        _RunRecorder(exc=subprocess.TimeoutExpired(["yt-dlp"], 5)),
    )

    with pytest.raises(FetchFailure, match="timed out"):
        YtDlpDownloader(timeout_s=5).fetch("https://a.example/slow", "t")


@pytest.mark.unit
def test_null_downloader_is_never_available() -> None:
    downloader = NullDownloader()

    assert downloader.is_available() is False
    with pytest.raises(ToolUnavailable):
        downloader.fetch("https://a.example/1", "t")


@pytest.mark.unit
def test_subprocess_output_is_decoded_leniently(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _RunRecorder()
    monkeypatch.setattr("vidwall.downloader.subprocess.run", run)
    downloader = YtDlpDownloader()

    downloader.is_available()
    downloader.fetch("https://a.example/1", "t")

    for call in run.calls:
        assert call["text"] is True
        assert call["encoding"] == "utf-8"
        assert call["errors"] == "replace"


@pytest.mark.integration
@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script as the executable")
def test_undecodable_stderr_is_a_fetch_failure(tmp_path: Path) -> None:
    calls_log = tmp_path / "calls.log"
    tool = tmp_path / "yt-dlp"
    tool.write_text(
        "#!/bin/sh\n"
        f'for last; do :; done; echo "$last" >> "{calls_log}"\n'
        'case "$last" in *bad*) printf \'\\377\\376 caf\\351\' >&2; exit 1;; esac\n'
        "exit 0\n",
        encoding="utf-8",
    )
    tool.chmod(0o755)
    downloader = YtDlpDownloader(str(tool))
    urls = ["https://a.example/bad", "https://a.example/good"]

    report = fetch_all(SourceList(urls=tuple(urls)), downloader, tmp_path / "video")

    assert report.attempted == 2
    assert report.succeeded == ["https://a.example/good"]
    assert [failure.url for failure in report.failures] == ["https://a.example/bad"]
    assert "caf" in report.failures[0].diagnostic
    assert calls_log.read_text(encoding="utf-8").split() == urls
