"""Logging setup with rich output on stderr.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once so diagnostics go to stderr and never mix with
the report on stdout.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Diagnostics only; reports are written to stdout by the CLI
console = Console(stderr=True)


def setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger with a rich handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # Clear existing handlers
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(rich_handler)


def error(message: str) -> None:
    """Print a user-facing error message to stderr."""
    console.print(f"[red]error:[/red] {escape(message)}", highlight=False)
