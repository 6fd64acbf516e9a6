"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from portbot.core.errors import ErrorCode
from portbot.output.console import Style
from portbot.services.errors import PublishError

if TYPE_CHECKING:
    from portbot.output.console import ConsoleProtocol

__all__ = ["print_publish_error", "publish_error_exit_code"]


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    """Print a publish error with its hint."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def publish_error_exit_code(error: PublishError) -> int:
    """Get exit code for a publish error."""
    match error.kind:
        case "tag_not_found":
            return int(ErrorCode.ENV_ERROR)
        case "checkout_failed" | "push_failed":
            return int(ErrorCode.NETWORK_ERROR)
        case "port_write_failed" | "privileged_copy_failed":
            return int(ErrorCode.IO_ERROR)
        case "checksum_not_found" | "vcpkg_failed" | "commit_failed" | "verification_failed":
            return int(ErrorCode.BUILD_ERROR)
