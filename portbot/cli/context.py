from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from portbot.core.config import CONFIG_FILENAME, Config, load_config, load_config_or_default
from portbot.core.errors import ErrorCode
from portbot.core.result import Err
from portbot.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    source: Path
    config: Config
    console: ConsoleProtocol


def build_context(*, source: Path, config_path: Path | None) -> CLIContext:
    """Resolve the source checkout and load its configuration.

    An explicit --config must exist; otherwise ``portbot.toml`` in the
    source checkout is used when present.
    """
    console = RichConsole()
    root = source.expanduser().resolve()

    if config_path is not None:
        result = load_config(config_path.expanduser())
    else:
        result = load_config_or_default(root / CONFIG_FILENAME)

    if isinstance(result, Err):
        console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(source=root, config=result.value, console=console)
