"""vcpkg executable wrapper.

Drives the system-wide vcpkg checkout (``install``, ``format-manifest``,
``x-add-version``) and knows where it keeps ports, version files and
build logs. Commands run through sudo when the checkout is root-owned.
"""

from __future__ import annotations

import re
from pathlib import Path

from portbot.core.config import VcpkgConfig
from portbot.core.result import Result
from portbot.platform.process import ProcessError, privileged, run, run_silent

__all__ = ["Vcpkg", "extract_actual_hash", "version_file_relpath"]

_ACTUAL_HASH_RE = re.compile(r"Actual hash:\s+([0-9a-fA-F]+)")


def extract_actual_hash(output: str) -> str | None:
    """Find the archive checksum vcpkg reports on a hash mismatch.

    vcpkg prints ``Expected hash: ...`` / ``Actual hash: <sha512>`` when a
    download does not match the portfile. Returns None if no such line.
    """
    m = _ACTUAL_HASH_RE.search(output)
    if m is None:
        return None
    return m.group(1)


def version_file_relpath(port: str) -> Path:
    """Path of a port's version file, relative to the registry root.

    vcpkg shards version files by first letter: ``versions/d-/dpp.json``.
    """
    return Path("versions") / f"{port[0]}-" / f"{port}.json"


class Vcpkg:
    """A vcpkg installation rooted at ``config.root``."""

    def __init__(self, config: VcpkgConfig) -> None:
        self.config = config
        self.root = config.root_path

    @property
    def executable(self) -> Path:
        return self.root / "vcpkg"

    @property
    def ports_dir(self) -> Path:
        return self.root / "ports"

    def port_dir(self, port: str) -> Path:
        return self.ports_dir / port

    @property
    def baseline_file(self) -> Path:
        return self.root / "versions" / "baseline.json"

    def version_file(self, port: str) -> Path:
        return self.root / version_file_relpath(port)

    def build_log(self, port: str) -> Path:
        """Debug build log written by a failed ``install``."""
        return self.root / "buildtrees" / port / f"install-{self.config.triplet}-dbg-out.log"

    def spec(self, port: str) -> str:
        return f"{port}:{self.config.triplet}"

    def install_command(self, port: str) -> list[str]:
        return self._cmd(["install", self.spec(port)])

    def format_manifest_command(self, port: str) -> list[str]:
        return self._cmd(["format-manifest", str(Path("ports") / port / "vcpkg.json")])

    def add_version_command(self, port: str) -> list[str]:
        return self._cmd(["x-add-version", port])

    def install(self, port: str) -> Result[str, ProcessError]:
        """Install a port, capturing output (for checksum discovery)."""
        return run(self.install_command(port), cwd=self.root)

    def install_streaming(self, port: str) -> Result[None, ProcessError]:
        """Install a port with output streamed to the job log."""
        return run_silent(self.install_command(port), cwd=self.root)

    def format_manifest(self, port: str) -> Result[str, ProcessError]:
        return run(self.format_manifest_command(port), cwd=self.root)

    def add_version(self, port: str) -> Result[str, ProcessError]:
        """Register the port's current version and git-tree in the version index."""
        return run(self.add_version_command(port), cwd=self.root)

    def _cmd(self, args: list[str]) -> list[str]:
        return privileged([str(self.executable), *args], sudo=self.config.sudo)
