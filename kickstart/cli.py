"""Command-line entry point.

Usage::

    kickstart            # interactive: pick a template, name the project
    kickstart --version
    python -m kickstart

Everything about the project is asked interactively; package-manager
behaviour is tuned through ``KICKSTART_*`` environment variables (see
:class:`kickstart.config.Config`).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

import pydantic

from kickstart import __version__
from kickstart.config import Config
from kickstart.errors import KickstartError, PromptCancelled
from kickstart.pipeline import Scaffolder
from kickstart.scaffolder.registry import build_registry
from kickstart.utils import err_console, print_error

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kickstart",
        description="A universal CLI tool to set up project templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment:\n"
            "  KICKSTART_PACKAGE_MANAGER  package manager executable (default: npm)\n"
            "  KICKSTART_INSTALL_TIMEOUT  seconds per install step (default: 300)\n"
            "  KICKSTART_STRICT_INSTALL   fail the run when an install step fails\n"
            "  KICKSTART_SKIP_INSTALL     do not run the package manager\n"
        ),
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def run(argv: Sequence[str] | None = None, cwd: str | Path | None = None) -> int:
    """Parse *argv*, run one scaffolding session and return the exit code."""
    build_parser().parse_args(argv)

    try:
        config = Config.from_env()
    except pydantic.ValidationError as exc:
        print_error(f"Error: invalid configuration: {exc}")
        return EXIT_ERROR

    scaffolder = Scaffolder(config, build_registry())
    try:
        asyncio.run(scaffolder.run(cwd or Path.cwd()))
    except PromptCancelled:
        err_console.print("[yellow]Cancelled, nothing was created.[/yellow]")
        return EXIT_CANCELLED
    except KeyboardInterrupt:
        err_console.print()
        print_error("Interrupted.")
        return EXIT_CANCELLED
    except KickstartError:
        # Already reported by the orchestrator.
        return EXIT_ERROR
    return EXIT_OK


def main() -> None:
    """CLI entry point for ``kickstart`` and ``python -m kickstart``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
