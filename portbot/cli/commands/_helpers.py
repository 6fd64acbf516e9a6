"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from portbot.output.console import ConsoleProtocol
from portbot.output.errors import print_publish_error, publish_error_exit_code
from portbot.services.errors import PublishError


def exit_on_publish_error(error: PublishError, console: ConsoleProtocol) -> NoReturn:
    """Print error and its hint, then exit with the mapped code."""
    print_publish_error(error, console)
    raise typer.Exit(code=publish_error_exit_code(error))
