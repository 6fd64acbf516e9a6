"""portbot - publish vcpkg port updates for tagged releases."""

__version__ = "0.1.0"
