"""Typed configuration loading and access.

This module provides dataclasses for the ``portbot.toml`` structure. Every
key is optional; missing keys fall back to the D++ defaults below, so a
checkout without any config file publishes the ``dpp`` port.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitIdentityConfig",
    "PackageConfig",
    "PathsConfig",
    "UpstreamConfig",
    "VcpkgConfig",
    "CONFIG_FILENAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "portbot.toml"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_DEPENDENCIES = ("libsodium", "nlohmann-json", "openssl", "opus", "zlib")
DEFAULT_HOST_DEPENDENCIES = ("vcpkg-cmake", "vcpkg-cmake-config")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PackageConfig:
    """Fixed manifest fields for the published port."""

    name: str = "dpp"
    description: str = "D++ Extremely Lightweight C++ Discord Library."
    homepage: str = "https://dpp.dev/"
    license: str = "Apache-2.0"
    supports: str = "((windows & !static & !uwp) | linux | osx)"
    dependencies: tuple[str, ...] = DEFAULT_DEPENDENCIES
    host_dependencies: tuple[str, ...] = DEFAULT_HOST_DEPENDENCIES


@dataclass(frozen=True, slots=True)
class UpstreamConfig:
    """Source repository on GitHub."""

    slug: str = "brainboxdotcc/DPP"  # owner/name
    default_branch: str = "master"


@dataclass(frozen=True, slots=True)
class VcpkgConfig:
    """Location of the system-wide vcpkg checkout."""

    root: str = "/usr/local/share/vcpkg"
    triplet: str = "x64-linux"
    # Prefix privileged commands with sudo (off when already running as root)
    sudo: bool = True

    @property
    def root_path(self) -> Path:
        return Path(self.root)


@dataclass(frozen=True, slots=True)
class GitIdentityConfig:
    user_name: str = "DPP VCPKG Bot"
    user_email: str = "noreply@dpp.dev"
    commit_message: str = "[bot] VCPKG info update"


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Relative paths: working copy under $HOME, port tree inside it."""

    workdir_name: str = "dpp"
    port_tree: str = "vcpkg"


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    package: PackageConfig = field(default_factory=PackageConfig)
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    vcpkg: VcpkgConfig = field(default_factory=VcpkgConfig)
    git: GitIdentityConfig = field(default_factory=GitIdentityConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        package: StrDict = get_table(data, "package") or {}
        upstream: StrDict = get_table(data, "upstream") or {}
        vcpkg: StrDict = get_table(data, "vcpkg") or {}
        git: StrDict = get_table(data, "git") or {}
        paths: StrDict = get_table(data, "paths") or {}

        defaults = cls()
        sudo = get_bool(vcpkg, "sudo")

        return cls(
            package=PackageConfig(
                name=get_str(package, "name") or defaults.package.name,
                description=get_str(package, "description") or defaults.package.description,
                homepage=get_str(package, "homepage") or defaults.package.homepage,
                license=get_str(package, "license") or defaults.package.license,
                supports=get_str(package, "supports") or defaults.package.supports,
                dependencies=_str_list(package, "dependencies", DEFAULT_DEPENDENCIES),
                host_dependencies=_str_list(
                    package, "host_dependencies", DEFAULT_HOST_DEPENDENCIES
                ),
            ),
            upstream=UpstreamConfig(
                slug=get_str(upstream, "slug") or defaults.upstream.slug,
                default_branch=get_str(upstream, "default_branch")
                or defaults.upstream.default_branch,
            ),
            vcpkg=VcpkgConfig(
                root=get_str(vcpkg, "root") or defaults.vcpkg.root,
                triplet=get_str(vcpkg, "triplet") or defaults.vcpkg.triplet,
                sudo=defaults.vcpkg.sudo if sudo is None else sudo,
            ),
            git=GitIdentityConfig(
                user_name=get_str(git, "user_name") or defaults.git.user_name,
                user_email=get_str(git, "user_email") or defaults.git.user_email,
                commit_message=get_str(git, "commit_message") or defaults.git.commit_message,
            ),
            paths=PathsConfig(
                workdir_name=get_str(paths, "workdir_name") or defaults.paths.workdir_name,
                port_tree=get_str(paths, "port_tree") or defaults.paths.port_tree,
            ),
        )


def _str_list(table: StrDict, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in table:
        return default
    value = get_str_list(table, key)
    if value is None:
        raise ValueError(f"{key} must be a list of strings")
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to portbot.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
