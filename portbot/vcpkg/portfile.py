"""Port recipe (``portfile.cmake``) generation.

The recipe fetches the tagged release from GitHub, configures and installs
it with vcpkg's CMake helpers, then removes debug duplicates. Only the
package name, repository, tag and SHA512 vary between releases.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["PLACEHOLDER_SHA512", "PortfileParams", "render_portfile"]

# vcpkg rejects this and reports the real hash of the downloaded archive
PLACEHOLDER_SHA512 = "0"


@dataclass(frozen=True, slots=True)
class PortfileParams:
    package: str
    repo_slug: str  # owner/name
    version: str
    sha512: str = PLACEHOLDER_SHA512

    @property
    def ref(self) -> str:
        return f"v{self.version}"


def render_portfile(params: PortfileParams) -> str:
    """Render the portfile for a release.

    Args:
        params: Package, repository, version and archive checksum

    Returns:
        Recipe text with LF line endings
    """
    lines = [
        "vcpkg_from_github(",
        "    OUT_SOURCE_PATH SOURCE_PATH",
        f"    REPO {params.repo_slug}",
        f'    REF "{params.ref}"',
        f"    SHA512 {params.sha512}",
        ")",
        "",
        "vcpkg_cmake_configure(",
        '    SOURCE_PATH "${SOURCE_PATH}"',
        "    DISABLE_PARALLEL_CONFIGURE",
        ")",
        "",
        "vcpkg_cmake_install()",
        "",
        "vcpkg_cmake_config_fixup(NO_PREFIX_CORRECTION)",
        "",
        f'file(REMOVE_RECURSE "${{CURRENT_PACKAGES_DIR}}/debug/share/{params.package}")',
        'file(REMOVE_RECURSE "${CURRENT_PACKAGES_DIR}/debug/include")',
        "",
        'if(VCPKG_LIBRARY_LINKAGE STREQUAL "static")',
        '    file(REMOVE_RECURSE "${CURRENT_PACKAGES_DIR}/bin" "${CURRENT_PACKAGES_DIR}/debug/bin")',
        "endif()",
        "",
        "file(",
        '    INSTALL "${SOURCE_PATH}/LICENSE"',
        '    DESTINATION "${CURRENT_PACKAGES_DIR}/share/${PORT}"',
        "    RENAME copyright",
        ")",
        "",
        'file(COPY "${CMAKE_CURRENT_LIST_DIR}/usage" DESTINATION "${CURRENT_PACKAGES_DIR}/share/${PORT}")',
    ]
    return "\n".join(lines) + "\n"
