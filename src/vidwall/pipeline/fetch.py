"""Sequential fetch loop over the source list."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..downloader import Downloader, output_template
from ..errors import FetchFailure
from ..sources import SourceList

logger = __import__("logging").getLogger(__name__)


@dataclass
class FetchReport:
    """Outcome of one pass over the source list.

    Attributes:
        attempted: Number of URLs passed to the downloader.
        succeeded: URLs the downloader reported as fetched.
        failures: One FetchFailure per URL that failed.
    """

    attempted: int = 0
    succeeded: list[str] = field(default_factory=list)
    failures: list[FetchFailure] = field(default_factory=list)


def fetch_all(sources: SourceList, downloader: Downloader, video_dir: Path) -> FetchReport:
    """Fetch every URL one at a time, isolating per-URL failures.

    Args:
        sources: URLs to fetch, in order.
        downloader: Available downloader.
        video_dir: Root under which `<id>/<id>.<ext>` is written.

    Returns:
        FetchReport with attempted/succeeded counts and the failures.
    """
    report = FetchReport()
    template = output_template(video_dir)

    for url in sources:
        report.attempted += 1
        logger.info("Downloading: %s", url)
        try:
            downloader.fetch(url, template)
        except FetchFailure as e:
            logger.error("Failed to download %s: %s", e.url, e.diagnostic)
            report.failures.append(e)
            continue
        report.succeeded.append(url)

    return report
