"""Publishing services."""

from .errors import BuildOrderError, PublishError
from .publisher import Credentials, ReleasePublisher
from .state import UNBUILT, BuildState, ChecksumKnown, Published, Unbuilt
from .version import version_from_tag

__all__ = [
    "BuildOrderError",
    "BuildState",
    "ChecksumKnown",
    "Credentials",
    "PublishError",
    "Published",
    "ReleasePublisher",
    "UNBUILT",
    "Unbuilt",
    "version_from_tag",
]
