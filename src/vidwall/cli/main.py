from __future__ import annotations

import logging
from typing import Annotated

import typer

from .base import configure_logging
from .commands.build import build_command, probe_command, scan_command
from .commands.show import show_command

configure_logging()
app = typer.Typer(
    help="Build the video wall playlist manifest",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)

app.command("build")(build_command)
app.command("scan")(scan_command)
app.command("probe")(probe_command)
app.command("show")(show_command)


@app.callback()
def root(
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Enable debug logging"),
    ] = False,
) -> None:
    """Build the video wall playlist manifest."""
    if verbose:
        configure_logging(logging.DEBUG)


def main() -> None:
    """Main entry point for package CLI.

    Invokes the Typer application, which handles command parsing and
    execution.

    Side Effects:
        - Processes CLI arguments and executes commands.
        - May exit with non-zero code on errors.
    """
    app()


if __name__ == "__main__":
    main()
