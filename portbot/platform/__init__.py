"""Platform abstraction layer."""

from .files import atomic_write_text, temporary_text_file
from .paths import clear_caches, home
from .process import ProcessError, privileged, run, run_silent

__all__ = [
    # files
    "atomic_write_text",
    "temporary_text_file",
    # paths
    "clear_caches",
    "home",
    # process
    "ProcessError",
    "privileged",
    "run",
    "run_silent",
]
