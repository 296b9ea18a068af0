"""
Shared CLI plumbing: logging setup and the error boundary.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

import typer
from loguru import logger
from pydantic import ValidationError

from bsvtools.errors import BsvToolsError

DEBUG_OPTION_HELP = "Enable debug logging"


def setup_logging(level: str = "WARNING") -> None:
    """Configure loguru logging. stdout is reserved for tool output."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def log_level(debug: bool) -> str:
    return "DEBUG" if debug else "WARNING"


@contextmanager
def handle_errors() -> Iterator[None]:
    """
    Map library errors to a logged message and a non-zero exit.

    Each error kind carries its own exit code.
    """
    try:
        yield
    except BsvToolsError as e:
        logger.error(str(e))
        raise typer.Exit(e.exit_code) from e
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        raise typer.Exit(2) from e
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        raise typer.Exit(130)


def style(
    text: str, color: bool, fg: str | None = None, bold: bool = False, dim: bool = False
) -> str:
    """typer.style that can be switched off with --no-color."""
    if not color:
        return text
    return typer.style(text, fg=fg, bold=bold or None, dim=dim or None)
