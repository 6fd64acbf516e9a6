"""Build states of a publish run.

    Unbuilt --first_build--> ChecksumKnown --second_build--> Published

States are values passed between the publisher's steps; the confirming
build only accepts a ``ChecksumKnown``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

__all__ = ["BuildState", "ChecksumKnown", "Published", "UNBUILT", "Unbuilt"]


@dataclass(frozen=True, slots=True)
class Unbuilt:
    pass


@dataclass(frozen=True, slots=True)
class ChecksumKnown:
    checksum: str


@dataclass(frozen=True, slots=True)
class Published:
    checksum: str


BuildState: TypeAlias = Unbuilt | ChecksumKnown | Published


UNBUILT = Unbuilt()
