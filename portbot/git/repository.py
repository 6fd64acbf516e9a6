"""Git repository abstraction.

This module provides the Repository class for the git operations a publish
run needs: tag discovery in the source checkout, clone/checkout of the
working copy, and commit/pull/push of the regenerated port files.
All operations return Result types.

Usage:
    repo = Repository(Path.cwd())

    match repo.latest_tag():
        case Ok(tag):
            print(f"Latest tag: {tag}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from portbot.core.result import Err, Ok, Result
from portbot.platform.process import ProcessError, privileged
from portbot.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})

__all__ = [
    "GitError",
    "Repository",
    "authenticated_url",
    "clone",
    "redact",
    "set_global_config",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "push origin master")
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    @property
    def nothing_to_commit(self) -> bool:
        """True if a commit failed only because the tree was unchanged."""
        return self.command.startswith("commit") and "nothing to commit" in self.message


def authenticated_url(slug: str, user: str, token: str) -> str:
    """Build an HTTPS clone URL carrying percent-encoded credentials."""
    return f"https://{quote(user, safe='')}:{quote(token, safe='')}@github.com/{slug}"


def redact(text: str, secrets: tuple[str, ...]) -> str:
    """Replace every secret (raw and percent-encoded) in text with ***."""
    for secret in secrets:
        if not secret:
            continue
        text = text.replace(quote(secret, safe=""), "***").replace(secret, "***")
    return text


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )


def _run_git(
    args: list[str],
    cwd: Path,
    *,
    repo: Path | None = None,
    sudo: bool = False,
) -> Result[str, ProcessError]:
    command = args[0] if args else ""
    timeout = _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
    cmd = ["git", "-C", str(repo), *args] if repo is not None else ["git", *args]
    return run_process(privileged(cmd, sudo=sudo), cwd=cwd, timeout=timeout)


def set_global_config(key: str, value: str, *, cwd: Path) -> Result[None, GitError]:
    """Set a process-wide (``--global``) git config value."""
    result = _run_git(["config", "--global", key, value], cwd)
    if isinstance(result, Err):
        return Err(_git_error(f"config --global {key}", result.error, "git config failed"))
    return Ok(None)


def clone(
    url: str,
    dest: Path,
    *,
    depth: int | None = 1,
    secrets: tuple[str, ...] = (),
) -> Result[Repository, GitError]:
    """Clone url into dest.

    Args:
        url: Remote URL, possibly carrying credentials
        dest: Target directory (must not exist)
        depth: Shallow clone depth, None for full history
        secrets: Values to mask in any error message

    Returns:
        Ok(Repository) on success, Err(GitError) on failure
    """
    args = ["clone", url, str(dest)]
    if depth is not None:
        args.append(f"--depth={depth}")

    dest.parent.mkdir(parents=True, exist_ok=True)
    result = _run_git(args, dest.parent)
    if isinstance(result, Err):
        error = _git_error("clone", result.error, "git clone failed")
        return Err(
            GitError(
                command=error.command,
                message=redact(error.message, secrets),
                returncode=error.returncode,
            )
        )
    return Ok(Repository(dest))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
        sudo: Run every git command through sudo (root-owned checkouts)
    """

    def __init__(self, path: Path, *, sudo: bool = False) -> None:
        self.path = path
        self.sudo = sudo

    def latest_tag(self) -> Result[str, GitError]:
        """Get the most recent tag reachable from any ref.

        Equivalent to ``git describe --tags $(git rev-list --tags --max-count=1)``.
        """
        rev = self._run(["rev-list", "--tags", "--max-count=1"])
        if isinstance(rev, Err):
            return Err(_git_error("rev-list --tags", rev.error, "git rev-list failed"))

        sha = rev.value.strip()
        if not sha:
            return Err(GitError(command="rev-list --tags", message="repository has no tags"))

        described = self._run(["describe", "--tags", sha])
        if isinstance(described, Err):
            return Err(_git_error("describe --tags", described.error, "git describe failed"))

        tag = described.value.strip()
        if not tag:
            return Err(GitError(command="describe --tags", message="empty tag name"))
        return Ok(tag)

    def fetch_tags(self) -> Result[str, GitError]:
        return self._simple(["fetch", "--tags"], "fetch --tags")

    def checkout(self, ref: str) -> Result[str, GitError]:
        """Check out a branch or tag."""
        return self._simple(["checkout", ref], f"checkout {ref}")

    def set_config(self, key: str, value: str) -> Result[str, GitError]:
        """Set a repository-local git config value."""
        return self._simple(["config", key, value], f"config {key}")

    def add_all(self) -> Result[str, GitError]:
        return self._simple(["add", "."], "add .")

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit staged changes.

        A commit with nothing staged fails; check ``error.nothing_to_commit``.
        """
        return self._simple(["commit", "-m", message], "commit")

    def pull(self) -> Result[str, GitError]:
        return self._simple(["pull"], "pull")

    def push(self, remote: str, branch: str) -> Result[str, GitError]:
        return self._simple(["push", remote, branch], f"push {remote} {branch}")

    def _simple(self, args: list[str], command: str) -> Result[str, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(command, e, f"git {command} failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return _run_git(args, self.path, repo=self.path, sudo=self.sudo)
