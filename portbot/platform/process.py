"""Subprocess execution with Result-based error handling.

Every external tool portbot drives (git, vcpkg, sudo mkdir/cp) goes through
this module, so a non-zero exit can never pass unnoticed: callers get
``Ok(...)`` or ``Err(ProcessError)``.

``run`` captures output (tag lookup, checksum discovery); ``run_silent``
lets output through to the job log (verification builds).
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from portbot.core.result import Err, Ok, Result

__all__ = ["ProcessError", "privileged", "run", "run_silent"]

# returncode reported when the process never ran or was killed
_NOT_RUN = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero, timed out or could not start.

    Attributes:
        command: Full argv, including any sudo prefix
        returncode: Exit status, -1 if the process never ran to completion
        stdout: Captured output (empty for streamed commands)
        stderr: Captured errors, or the reason the command did not run
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """stdout then stderr; vcpkg prints hash mismatches on either."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def __str__(self) -> str:
        head = " ".join(self.command[:3])
        if len(self.command) > 3:
            head += " ..."
        return f"{head} failed (exit {self.returncode})"


def privileged(cmd: list[str], *, sudo: bool) -> list[str]:
    """Prefix cmd with sudo when elevation is required."""
    return ["sudo", *cmd] if sudo else list(cmd)


def _error(
    cmd: list[str], returncode: int, stdout: str = "", stderr: str = ""
) -> Err[ProcessError]:
    return Err(ProcessError(tuple(cmd), returncode, stdout, stderr))


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run cmd and capture its output.

    Args:
        cmd: Command and arguments
        cwd: Working directory
        env: Environment (inherits the current one if None)
        timeout: Seconds before the process is killed, None for no limit

    Returns:
        Ok(stdout) on exit status 0, Err(ProcessError) otherwise
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _error(cmd, _NOT_RUN, partial, f"Command timed out after {timeout}s")
    except OSError as e:
        return _error(cmd, _NOT_RUN, stderr=str(e))

    if proc.returncode != 0:
        return _error(cmd, proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run cmd with stdout/stderr inherited, for long builds.

    The error carries no output: it has already gone to the terminal.
    """
    try:
        returncode = subprocess.run(cmd, cwd=str(cwd), env=env, check=False).returncode
    except OSError as e:
        return _error(cmd, _NOT_RUN, stderr=str(e))

    if returncode != 0:
        return _error(cmd, returncode)
    return Ok(None)
