"""Publish command - regenerate the vcpkg port for the latest tag and push it."""

from __future__ import annotations

from pathlib import Path

import typer

from portbot.cli.commands._helpers import exit_on_publish_error
from portbot.cli.context import build_context
from portbot.core.errors import ErrorCode
from portbot.core.result import Err, Ok
from portbot.services.publisher import Credentials, ReleasePublisher


def publish(
    owner: str | None = typer.Argument(
        None,
        envvar="PORTBOT_GITHUB_USER",
        help="GitHub user that clones and pushes the repository",
        show_default=False,
    ),
    token: str | None = typer.Argument(
        None,
        envvar="PORTBOT_GITHUB_TOKEN",
        help="GitHub access token for that user",
        show_default=False,
        show_envvar=False,
    ),
    ref: str | None = typer.Option(
        None, "--ref", help="Branch or tag to check out (default: upstream default branch)"
    ),
    source: Path = typer.Option(
        Path("."), "--source", help="Checkout whose latest tag is published"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Config file (default: <source>/portbot.toml)", show_default=False
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print actions without modifying"),
) -> None:
    """Publish the vcpkg port for the latest release tag."""
    ctx = build_context(source=source, config_path=config_path)

    if not owner or not token:
        ctx.console.error("Missing github repository owner and access token")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx.console.info("Starting vcpkg updater...")
    created = ReleasePublisher.from_source(
        source=ctx.source,
        config=ctx.config,
        credentials=Credentials(user=owner, token=token),
        console=ctx.console,
        dry_run=dry_run,
    )
    if isinstance(created, Err):
        exit_on_publish_error(created.error, ctx.console)

    match created.value.publish(ref):
        case Ok(published):
            ctx.console.success(f"sha512: {published.checksum}")
        case Err(error):
            exit_on_publish_error(error, ctx.console)
