"""Git operations module.

Usage:
    from portbot.git import Repository, clone

    repo = Repository(Path.cwd())
    tag = repo.latest_tag()
"""

from portbot.git.repository import (
    GitError,
    Repository,
    authenticated_url,
    clone,
    redact,
    set_global_config,
)

__all__ = [
    "GitError",
    "Repository",
    "authenticated_url",
    "clone",
    "redact",
    "set_global_config",
]
