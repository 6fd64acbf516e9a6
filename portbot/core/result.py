"""Result type for explicit error handling.

Every external step of a publish run (git, vcpkg, privileged copies) can
fail. Each step returns ``Ok(value)`` or ``Err(error)`` and the caller
branches on it with ``isinstance`` or ``match``:

    match repo.latest_tag():
        case Ok(tag):
            console.info(f"latest tag: {tag}")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

__all__ = ["Err", "Ok", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def unwrap(self) -> None:
        """Raise ValueError carrying the error; for tests and scripts."""
        raise ValueError(f"called unwrap on Err: {self.error}")


Result: TypeAlias = Ok[T] | Err[E]
