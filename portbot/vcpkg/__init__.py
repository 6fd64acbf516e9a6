"""vcpkg port generation and tool wrapper."""

from .manifest import Dependency, PortManifest, build_manifest
from .portfile import PLACEHOLDER_SHA512, PortfileParams, render_portfile
from .tool import Vcpkg, extract_actual_hash, version_file_relpath

__all__ = [
    # manifest
    "Dependency",
    "PortManifest",
    "build_manifest",
    # portfile
    "PLACEHOLDER_SHA512",
    "PortfileParams",
    "render_portfile",
    # tool
    "Vcpkg",
    "extract_actual_hash",
    "version_file_relpath",
]
