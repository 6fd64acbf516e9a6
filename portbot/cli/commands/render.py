"""Render command - print the port files for a version without side effects."""

from __future__ import annotations

from pathlib import Path

import typer

from portbot.cli.context import build_context
from portbot.output.console import Style
from portbot.services.publisher import render_port_files
from portbot.services.version import version_from_tag
from portbot.vcpkg.portfile import PLACEHOLDER_SHA512


def render(
    version: str = typer.Argument(..., help="Version or release tag (e.g. 10.0.29 or v10.0.29)"),
    sha512: str = typer.Option(PLACEHOLDER_SHA512, "--sha512", help="Archive SHA512"),
    source: Path = typer.Option(Path("."), "--source", help="Checkout holding portbot.toml"),
    config_path: Path | None = typer.Option(
        None, "--config", help="Config file (default: <source>/portbot.toml)", show_default=False
    ),
) -> None:
    """Print vcpkg.json and portfile.cmake for a version."""
    ctx = build_context(source=source, config_path=config_path)
    name = ctx.config.package.name
    manifest_json, portfile = render_port_files(ctx.config, version_from_tag(version), sha512)

    ctx.console.header(f"ports/{name}/vcpkg.json")
    ctx.console.print(manifest_json, Style.DEFAULT)

    ctx.console.header(f"ports/{name}/portfile.cmake")
    ctx.console.print(portfile)
