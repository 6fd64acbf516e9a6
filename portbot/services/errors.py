from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = ["BuildOrderError", "PublishError", "PublishErrorKind"]


PublishErrorKind = Literal[
    "tag_not_found",
    "checkout_failed",
    "port_write_failed",
    "checksum_not_found",
    "privileged_copy_failed",
    "vcpkg_failed",
    "commit_failed",
    "push_failed",
    "verification_failed",
]


@dataclass(frozen=True, slots=True)
class PublishError:
    kind: PublishErrorKind
    message: str
    hint: str | None = None


class BuildOrderError(RuntimeError):
    """The confirming build was requested without a discovered checksum.

    This is a programming error in the caller, not a runtime condition.
    """
