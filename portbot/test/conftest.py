from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import pytest

from portbot.core.config import Config, VcpkgConfig
from portbot.core.result import Err, Ok, Result
from portbot.git import repository as repository_mod
from portbot.platform.process import ProcessError
from portbot.services import publisher as publisher_mod
from portbot.vcpkg import tool as tool_mod

Handler: TypeAlias = Result[str, ProcessError] | Callable[[list[str]], Result[str, ProcessError]]


def normalize(cmd: list[str]) -> list[str]:
    """Drop sudo, git -C <path> and the vcpkg install path from a command."""
    out = list(cmd)
    if out and out[0] == "sudo":
        out = out[1:]
    if out and out[0].endswith("/vcpkg"):
        out[0] = "vcpkg"
    if len(out) >= 3 and out[0] == "git" and out[1] == "-C":
        out = ["git", *out[3:]]
    return out


def failure(
    cmd: list[str], *, stdout: str = "", stderr: str = "", code: int = 1
) -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=code, stdout=stdout, stderr=stderr))


class FakeRunner:
    """Stands in for every subprocess call; records normalized commands."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.raw_calls: list[list[str]] = []
        self._handlers: list[tuple[tuple[str, ...], Handler]] = []

    def on(self, *prefix: str, result: Handler) -> None:
        """Answer commands starting with prefix; later registrations win."""
        self._handlers.append((prefix, result))

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        del cwd, env, timeout
        return self._dispatch(cmd)

    def silent(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> Result[None, ProcessError]:
        del cwd, env
        result = self._dispatch(cmd)
        if isinstance(result, Err):
            return result
        return Ok(None)

    def index(self, *prefix: str) -> int:
        """Position of the first recorded call starting with prefix."""
        for i, call in enumerate(self.calls):
            if tuple(call[: len(prefix)]) == prefix:
                return i
        raise AssertionError(f"command not run: {' '.join(prefix)}")

    def _dispatch(self, cmd: list[str]) -> Result[str, ProcessError]:
        normalized = normalize(cmd)
        self.raw_calls.append(list(cmd))
        self.calls.append(normalized)
        for prefix, handler in reversed(self._handlers):
            if tuple(normalized[: len(prefix)]) == prefix:
                if callable(handler):
                    return handler(cmd)
                return handler
        return Ok("")


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr(repository_mod, "run_process", runner)
    monkeypatch.setattr(tool_mod, "run", runner)
    monkeypatch.setattr(tool_mod, "run_silent", runner.silent)
    monkeypatch.setattr(publisher_mod, "run_process", runner)
    return runner


@pytest.fixture
def vcpkg_root(tmp_path: Path) -> Path:
    """A fake system vcpkg checkout with the files x-add-version produces."""
    root = tmp_path / "vcpkg"
    (root / "ports" / "dpp").mkdir(parents=True)
    (root / "ports" / "dpp" / "vcpkg.json").write_text('{"formatted": true}\n', encoding="utf-8")
    (root / "versions" / "d-").mkdir(parents=True)
    (root / "versions" / "baseline.json").write_text('{"default": {}}\n', encoding="utf-8")
    (root / "versions" / "d-" / "dpp.json").write_text('{"versions": []}\n', encoding="utf-8")
    return root


@pytest.fixture
def config(vcpkg_root: Path) -> Config:
    return Config(vcpkg=VcpkgConfig(root=str(vcpkg_root), sudo=False))
