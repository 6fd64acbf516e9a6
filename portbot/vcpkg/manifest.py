"""Typed vcpkg manifest (``vcpkg.json``) builder.

The manifest is built from a dataclass and serialized with ``json`` so the
output is always well-formed, whatever the package metadata contains.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from portbot.core.config import PackageConfig

__all__ = ["Dependency", "PortManifest", "build_manifest"]


@dataclass(frozen=True, slots=True)
class Dependency:
    """A manifest dependency; host tools are built for the host triplet."""

    name: str
    host: bool = False

    def to_json_value(self) -> str | dict[str, object]:
        if self.host:
            return {"name": self.name, "host": True}
        return self.name


@dataclass(frozen=True, slots=True)
class PortManifest:
    name: str
    version: str
    description: str
    homepage: str
    license: str
    supports: str
    dependencies: tuple[Dependency, ...]

    def to_dict(self) -> dict[str, object]:
        # Key order matches what `vcpkg format-manifest` produces
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "homepage": self.homepage,
            "license": self.license,
            "supports": self.supports,
            "dependencies": [d.to_json_value() for d in self.dependencies],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"


def build_manifest(package: PackageConfig, version: str) -> PortManifest:
    """Build the manifest for one released version of the package."""
    deps = tuple(Dependency(name) for name in package.dependencies) + tuple(
        Dependency(name, host=True) for name in package.host_dependencies
    )
    return PortManifest(
        name=package.name,
        version=version,
        description=package.description,
        homepage=package.homepage,
        license=package.license,
        supports=package.supports,
        dependencies=deps,
    )
