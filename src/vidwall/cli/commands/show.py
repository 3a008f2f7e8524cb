"""CLI command to display the current manifest and screen assignments."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...config import ProjectPaths
from ...global_config import DEFAULT_SURFACE_COUNT
from ...pipeline.manifest import Manifest, read_manifest, select_for_surface
from ..base import get_logger, handle_errors

logger = get_logger(__name__)


def render_assignments(manifest: Manifest, surfaces: int, console: Console | None = None) -> None:
    """Print a table mapping each screen to the manifest entry it plays.

    Args:
        manifest: Manifest read from videos.json.
        surfaces: Number of screens on the wall.
        console: Rich Console instance (None to create new).
    """
    if console is None:
        console = Console()

    table = Table(title=f"{len(manifest)} entries on {surfaces} screens")
    table.add_column("Screen", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Title")
    table.add_column("Source", style="dim")

    for ordinal in range(surfaces):
        entry = select_for_surface(manifest, ordinal)
        if entry is None:
            table.add_row(str(ordinal), "-", "[yellow](empty)[/yellow]", "")
            continue
        table.add_row(str(ordinal), str(ordinal % len(manifest)), escape(entry.title), escape(entry.src))

    console.print(table)


def show_command(
    root: Annotated[
        Path | None,
        typer.Option(
            "--root", "-r", help="Project root holding videos.json (default: current directory)", file_okay=False
        ),
    ] = None,
    surfaces: Annotated[
        int,
        typer.Option("--surfaces", "-n", min=1, help="Number of screens on the wall"),
    ] = DEFAULT_SURFACE_COUNT,
) -> None:
    """Show which manifest entry each screen will play.

    Reads videos.json and applies the renderer's assignment rule
    (screen index modulo manifest length).
    """
    paths = ProjectPaths.from_root(root)
    with handle_errors("show", logger=logger):
        manifest = read_manifest(paths.manifest_file)
        render_assignments(manifest, surfaces)
