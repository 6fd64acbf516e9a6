"""Release publisher: regenerate and publish the vcpkg port for a release.

A run goes through these steps, each returning a Result:

1. resolve the latest tag of the source checkout (``from_source``)
2. clone the upstream repository into ``$HOME/<workdir>`` (``checkout_release``)
3. write ``vcpkg.json`` and render ``portfile.cmake`` (``construct_port``)
4. install with a placeholder SHA512 to learn the real one (``first_build``)
5. install with the real SHA512, register the version, commit and push
   (``second_build``)

Steps 4 and 5 work on the system-wide vcpkg checkout, which is root-owned
in CI images; those commands go through sudo unless configured otherwise.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from portbot.core.config import Config
from portbot.core.result import Err, Ok, Result
from portbot.git.repository import (
    GitError,
    Repository,
    authenticated_url,
    clone,
    redact,
    set_global_config,
)
from portbot.output.console import ConsoleProtocol
from portbot.platform.files import atomic_write_text, temporary_text_file
from portbot.platform.paths import home
from portbot.platform.process import ProcessError, privileged
from portbot.platform.process import run as run_process
from portbot.services.errors import BuildOrderError, PublishError, PublishErrorKind
from portbot.services.state import UNBUILT, BuildState, ChecksumKnown, Published
from portbot.services.version import version_from_tag
from portbot.vcpkg.manifest import build_manifest
from portbot.vcpkg.portfile import PLACEHOLDER_SHA512, PortfileParams, render_portfile
from portbot.vcpkg.tool import Vcpkg, extract_actual_hash, version_file_relpath

__all__ = ["Credentials", "ReleasePublisher", "render_port_files"]

_PRIVILEGED_TIMEOUT_SECONDS = 60.0
_BUILD_LOG_TAIL_LINES = 200


@dataclass(frozen=True, slots=True)
class Credentials:
    """GitHub account used to clone and push the working copy."""

    user: str
    token: str

    @property
    def secrets(self) -> tuple[str, ...]:
        return (self.token,)


def render_port_files(config: Config, version: str, sha512: str) -> tuple[str, str]:
    """Render (manifest JSON, portfile text) for a version.

    Pure: identical inputs give byte-identical outputs.
    """
    manifest = build_manifest(config.package, version)
    portfile = render_portfile(
        PortfileParams(
            package=config.package.name,
            repo_slug=config.upstream.slug,
            version=version,
            sha512=sha512,
        )
    )
    return manifest.to_json(), portfile

def _hint(error: GitError | ProcessError) -> str | None:
    if isinstance(error, GitError):
        return error.message or None
    return error.stderr.strip() or error.stdout.strip() or None


class ReleasePublisher:
    """Publishes the vcpkg port of one tagged release.

    Attributes:
        tag: Release tag the port is generated for (e.g. "v10.0.29")
        version: Tag without its leading "v"
        workdir: Working copy of the upstream repository
    """

    def __init__(
        self,
        *,
        config: Config,
        credentials: Credentials,
        tag: str,
        console: ConsoleProtocol,
        dry_run: bool = False,
        home_dir: Path | None = None,
    ) -> None:
        self._config = config
        self._credentials = credentials
        self._console = console
        self._dry_run = dry_run
        self._tag = tag
        self._version = version_from_tag(tag)
        self.workdir = (home_dir or home()) / config.paths.workdir_name
        self.vcpkg = Vcpkg(config.vcpkg)

    @classmethod
    def from_source(
        cls,
        *,
        source: Path,
        config: Config,
        credentials: Credentials,
        console: ConsoleProtocol,
        dry_run: bool = False,
        home_dir: Path | None = None,
    ) -> Result[ReleasePublisher, PublishError]:
        """Create a publisher for the latest tag of the checkout at source."""
        tag = Repository(source).latest_tag()
        if isinstance(tag, Err):
            return Err(
                PublishError(
                    kind="tag_not_found",
                    message=f"cannot resolve latest tag in {source}",
                    hint=tag.error.message,
                )
            )

        publisher = cls(
            config=config,
            credentials=credentials,
            tag=tag.value,
            console=console,
            dry_run=dry_run,
            home_dir=home_dir,
        )
        console.success(f"Latest tag: {publisher.tag} version: {publisher.version}")
        return Ok(publisher)

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def version(self) -> str:
        return self._version

    @property
    def package(self) -> str:
        return self._config.package.name

    @property
    def port_tree(self) -> Path:
        return self.workdir / self._config.paths.port_tree

    @property
    def local_port_dir(self) -> Path:
        return self.port_tree / "ports" / self.package

    @property
    def local_manifest(self) -> Path:
        return self.local_port_dir / "vcpkg.json"

    @property
    def local_portfile(self) -> Path:
        return self.local_port_dir / "portfile.cmake"

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def checkout_release(self, ref: str | None = None) -> Result[Repository, PublishError]:
        """Replace the working copy with a fresh clone checked out at ref.

        Args:
            ref: Branch or tag; defaults to the upstream default branch
        """
        ref = ref or self._config.upstream.default_branch
        self._console.header(f"Check out {self._config.upstream.slug} at {ref}")
        self._console.info(f"user: {self._credentials.user}")

        self._console.command(["rm", "-rf", str(self.workdir)])
        if not self._dry_run and self.workdir.exists():
            try:
                shutil.rmtree(self.workdir)
            except OSError as e:
                return Err(
                    PublishError(
                        kind="checkout_failed",
                        message=f"cannot remove old working copy: {self.workdir}",
                        hint=str(e),
                    )
                )

        identity = self._config.git
        for key, value in (("user.email", identity.user_email), ("user.name", identity.user_name)):
            configured = self._exec(
                ["git", "config", "--global", key, value],
                lambda key=key, value=value: set_global_config(key, value, cwd=self.workdir.parent),
                kind="checkout_failed",
                message=f"cannot set git {key}",
            )
            if isinstance(configured, Err):
                return configured

        url = authenticated_url(
            self._config.upstream.slug, self._credentials.user, self._credentials.token
        )
        repo = Repository(self.workdir)
        cloned = self._exec(
            ["git", "clone", redact(url, self._credentials.secrets), str(self.workdir)],
            lambda: clone(url, self.workdir, depth=1, secrets=self._credentials.secrets),
            kind="checkout_failed",
            message=f"cannot clone {self._config.upstream.slug}",
        )
        if isinstance(cloned, Err):
            return cloned

        for display, action, message in (
            (["git", "fetch", "--tags"], repo.fetch_tags, "cannot fetch tags"),
            (["git", "checkout", ref], lambda: repo.checkout(ref), f"ref not found: {ref}"),
        ):
            step = self._exec(display, action, kind="checkout_failed", message=message)
            if isinstance(step, Err):
                return step

        self._console.success(f"Checked out {ref} in {self.workdir}")
        return Ok(repo)

    # -------------------------------------------------------------------------
    # Port files
    # -------------------------------------------------------------------------

    def render_port(self, sha512: str = PLACEHOLDER_SHA512) -> tuple[str, str]:
        """Render (manifest JSON, portfile text) without touching the disk."""
        return render_port_files(self._config, self.version, sha512)

    def construct_port(self, sha512: str = PLACEHOLDER_SHA512) -> Result[str, PublishError]:
        """Write vcpkg.json into the working copy and return the portfile.

        The portfile is not written here: the first build stages it in the
        vcpkg tree only, the second build writes it into the working copy.

        Args:
            sha512: SHA512 of the release archive, "0" until discovered
        """
        self._console.info(f"Construct port for {self.version}, sha512: {sha512}")
        manifest_json, portfile = self.render_port(sha512)

        self._console.command(["write", str(self.local_manifest)])
        if not self._dry_run:
            try:
                atomic_write_text(self.local_manifest, manifest_json)
            except OSError as e:
                return Err(
                    PublishError(
                        kind="port_write_failed",
                        message=f"cannot write {self.local_manifest}",
                        hint=str(e),
                    )
                )
        return Ok(portfile)

    # -------------------------------------------------------------------------
    # Builds
    # -------------------------------------------------------------------------

    def first_build(self, portfile: str) -> Result[ChecksumKnown, PublishError]:
        """Install with a placeholder checksum and read the real one back.

        The install is expected to fail: vcpkg downloads the archive, finds
        that its hash does not match and prints ``Actual hash: <sha512>``.

        Returns:
            Ok(ChecksumKnown) with the discovered SHA512, or
            Err(PublishError(kind="checksum_not_found")) if vcpkg did not
            report one. The caller must not run the second build then.
        """
        self._console.header("First build (checksum discovery)")
        port_dir = self.vcpkg.port_dir(self.package)

        staged = self._privileged(["mkdir", "-p", str(port_dir)])
        if isinstance(staged, Err):
            return staged
        staged = self._privileged(["cp", str(self.local_manifest), str(port_dir / "vcpkg.json")])
        if isinstance(staged, Err):
            return staged

        if self._dry_run:
            self._console.command(["cp", "<portfile>", str(port_dir / "portfile.cmake")])
        else:
            with temporary_text_file(portfile, prefix="portfile.") as tmp:
                staged = self._privileged(["cp", str(tmp), str(port_dir / "portfile.cmake")])
            if isinstance(staged, Err):
                return staged

        self._console.command(self.vcpkg.install_command(self.package))
        if self._dry_run:
            self._console.warning("dry run: checksum not discovered, using placeholder")
            return Ok(ChecksumKnown(checksum=PLACEHOLDER_SHA512))

        match self.vcpkg.install(self.package):
            case Ok(stdout):
                output = stdout
            case Err(e):
                output = e.output

        checksum = extract_actual_hash(output)
        if checksum is None:
            self._console.warning("No SHA512 found during first build")
            return Err(
                PublishError(
                    kind="checksum_not_found",
                    message="vcpkg did not report the archive SHA512",
                    hint=f"Check that tag {self.tag} exists upstream and the download succeeded.",
                )
            )

        self._console.success(f"Obtained SHA512 for first build: {checksum}")
        return Ok(ChecksumKnown(checksum=checksum))

    def second_build(self, state: BuildState, portfile: str) -> Result[Published, PublishError]:
        """Build with the real checksum, register the version and push it.

        Args:
            state: Result of first_build
            portfile: Portfile rendered with ``state.checksum``

        Raises:
            BuildOrderError: If state is not ChecksumKnown, or the portfile
                does not carry its checksum. Nothing has run at that point.
        """
        if not isinstance(state, ChecksumKnown):
            raise BuildOrderError(
                f"No SHA512 sum is available, first build has not been run (state: {state!r})"
            )
        if f"SHA512 {state.checksum}\n" not in portfile:
            raise BuildOrderError(f"portfile does not carry the discovered SHA512 {state.checksum}")

        self._console.header("Second build (publish)")
        port_dir = self.vcpkg.port_dir(self.package)

        self._console.command(["write", str(self.local_portfile)])
        if not self._dry_run:
            try:
                atomic_write_text(self.local_portfile, portfile)
            except OSError as e:
                return Err(
                    PublishError(
                        kind="port_write_failed",
                        message=f"cannot write {self.local_portfile}",
                        hint=str(e),
                    )
                )

        for cmd in (
            ["cp", str(self.local_manifest), str(port_dir / "vcpkg.json")],
            ["cp", str(self.local_portfile), str(port_dir / "portfile.cmake")],
            ["cp", "-R", f"{self.port_tree / 'ports'}/.", f"{self.vcpkg.ports_dir}/"],
        ):
            copied = self._privileged(cmd)
            if isinstance(copied, Err):
                return copied

        registered = self._register_version()
        if isinstance(registered, Err):
            return registered

        copied_back = self._copy_back()
        if isinstance(copied_back, Err):
            return copied_back

        pushed = self._commit_and_push()
        if isinstance(pushed, Err):
            return pushed

        verified = self._verify()
        if isinstance(verified, Err):
            return verified

        self._console.success(f"Published {self.package} {self.version}")
        return Ok(Published(checksum=state.checksum))

    def publish(self, ref: str | None = None) -> Result[Published, PublishError]:
        """Run checkout, discovery build and confirming build in sequence."""
        checked_out = self.checkout_release(ref)
        if isinstance(checked_out, Err):
            return checked_out

        portfile = self.construct_port()
        if isinstance(portfile, Err):
            return portfile

        state: BuildState = UNBUILT
        discovered = self.first_build(portfile.value)
        if isinstance(discovered, Err):
            return discovered
        state = discovered.value

        portfile = self.construct_port(state.checksum)
        if isinstance(portfile, Err):
            return portfile

        return self.second_build(state, portfile.value)

    # -------------------------------------------------------------------------
    # Second build steps
    # -------------------------------------------------------------------------

    def _register_version(self) -> Result[None, PublishError]:
        """Format the manifest and add the version to vcpkg's index.

        x-add-version reads the port's git-tree, so the port is committed in
        the vcpkg checkout first. That checkout has no writable remote and
        the commit is never pushed.
        """
        formatted = self._exec(
            self.vcpkg.format_manifest_command(self.package),
            lambda: self.vcpkg.format_manifest(self.package),
            kind="vcpkg_failed",
            message="vcpkg format-manifest failed",
        )
        if isinstance(formatted, Err):
            return formatted

        vcpkg_repo = Repository(self.vcpkg.root, sudo=self._config.vcpkg.sudo)
        added = self._exec(
            privileged(["git", "add", "."], sudo=self._config.vcpkg.sudo),
            vcpkg_repo.add_all,
            kind="commit_failed",
            message=f"git add failed in {self.vcpkg.root}",
        )
        if isinstance(added, Err):
            return added

        committed = self._commit(vcpkg_repo, self._config.git.commit_message)
        if isinstance(committed, Err):
            return committed

        registered = self._exec(
            self.vcpkg.add_version_command(self.package),
            lambda: self.vcpkg.add_version(self.package),
            kind="vcpkg_failed",
            message=f"vcpkg x-add-version {self.package} failed",
        )
        if isinstance(registered, Err):
            return registered
        return Ok(None)

    def _copy_back(self) -> Result[None, PublishError]:
        """Copy the formatted manifest and version index into the working copy."""
        pairs = (
            (self.vcpkg.port_dir(self.package) / "vcpkg.json", self.local_manifest),
            (self.vcpkg.baseline_file, self.port_tree / "versions" / "baseline.json"),
            (
                self.vcpkg.version_file(self.package),
                self.port_tree / version_file_relpath(self.package),
            ),
        )
        for src, dst in pairs:
            self._console.command(["cp", str(src), str(dst)])
            if self._dry_run:
                continue
            try:
                dst.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(src, dst)
            except OSError as e:
                return Err(
                    PublishError(
                        kind="port_write_failed",
                        message=f"cannot copy {src} to {dst}",
                        hint=str(e),
                    )
                )
        return Ok(None)

    def _commit_and_push(self) -> Result[None, PublishError]:
        branch = self._config.upstream.default_branch
        repo = Repository(self.workdir)
        self._console.info(f"Commit and push changes to {branch}")

        added = self._exec(
            ["git", "add", "."], repo.add_all, kind="commit_failed", message="git add failed"
        )
        if isinstance(added, Err):
            return added

        committed = self._commit(repo, f"{self._config.git.commit_message} [skip ci]")
        if isinstance(committed, Err):
            return committed

        for display, action, message in (
            (
                ["git", "config", "pull.rebase", "false"],
                lambda: repo.set_config("pull.rebase", "false"),
                "git config pull.rebase failed",
            ),
            (["git", "pull"], repo.pull, "git pull failed"),
            (
                ["git", "push", "origin", branch],
                lambda: repo.push("origin", branch),
                "git push failed",
            ),
        ):
            step = self._exec(display, action, kind="push_failed", message=message)
            if isinstance(step, Err):
                return step
        return Ok(None)

    def _commit(self, repo: Repository, message: str) -> Result[None, PublishError]:
        """Commit, treating an unchanged tree as a warning (reruns)."""
        display = privileged(["git", "commit", "-m", message], sudo=repo.sudo)
        self._console.command(display)
        if self._dry_run:
            return Ok(None)

        committed = repo.commit(message)
        if isinstance(committed, Err):
            if committed.error.nothing_to_commit:
                self._console.warning(f"nothing to commit in {repo.path}")
                return Ok(None)
            return Err(
                PublishError(
                    kind="commit_failed",
                    message=f"git commit failed in {repo.path}",
                    hint=committed.error.message,
                )
            )
        return Ok(None)

    def _verify(self) -> Result[None, PublishError]:
        """Install the published port once more; show the build log on failure."""
        self._console.info("vcpkg install (verification)")
        self._console.command(self.vcpkg.install_command(self.package))
        if self._dry_run:
            return Ok(None)

        installed = self.vcpkg.install_streaming(self.package)
        if isinstance(installed, Ok):
            return Ok(None)

        self._console.error("There were build errors!")
        log = self.vcpkg.build_log(self.package)
        if log.is_file():
            self._console.info(f"Build log: {log}")
            try:
                lines = log.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as e:
                self._console.warning(f"cannot read build log: {e}")
            else:
                self._console.print("\n".join(lines[-_BUILD_LOG_TAIL_LINES:]))
        else:
            self._console.warning(f"build log not found: {log}")

        return Err(
            PublishError(
                kind="verification_failed",
                message=f"vcpkg install {self.vcpkg.spec(self.package)} failed "
                f"(exit {installed.error.returncode})",
                hint=str(log),
            )
        )

    # -------------------------------------------------------------------------
    # Command helpers
    # -------------------------------------------------------------------------

    def _privileged(self, cmd: list[str]) -> Result[None, PublishError]:
        full = privileged(cmd, sudo=self._config.vcpkg.sudo)
        result = self._exec(
            full,
            lambda: run_process(
                full, cwd=self.vcpkg.root.parent, timeout=_PRIVILEGED_TIMEOUT_SECONDS
            ),
            kind="privileged_copy_failed",
            message=f"{' '.join(full[:2])} failed",
        )
        if isinstance(result, Err):
            return result
        return Ok(None)

    def _exec(
        self,
        display: list[str],
        action: Callable[[], Result[object, GitError] | Result[object, ProcessError]],
        *,
        kind: PublishErrorKind,
        message: str,
    ) -> Result[None, PublishError]:
        """Echo display, then run action unless this is a dry run."""
        self._console.command(display)
        if self._dry_run:
            return Ok(None)

        result = action()
        if isinstance(result, Err):
            hint = _hint(result.error)
            return Err(
                PublishError(
                    kind=kind,
                    message=message,
                    hint=redact(hint, self._credentials.secrets) if hint else None,
                )
            )
        return Ok(None)
