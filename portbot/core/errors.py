"""Process exit codes of ``portbot``.

CI jobs branch on these values, so they must not be renumbered.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1  # missing credentials, unreadable --config
    ENV_ERROR = 2  # source checkout has no tags
    BUILD_ERROR = 3  # vcpkg failed or reported no checksum
    NETWORK_ERROR = 4  # clone, checkout, pull or push failed
    IO_ERROR = 5  # port files could not be written or copied
