"""
Node.js and npm installer.

Makes sure the requested Node.js and npm versions are present under
`<install_directory>/node`, downloading them from the distribution server
when they are missing or the installed versions differ.

Layout produced:
    <install_directory>/node/node          (node.exe on Windows)
    <install_directory>/node/npm/package.json

Usage:
    from nodekit.installer import InstallRequest, NodeInstaller

    request = InstallRequest("v0.10.26", "1.4.4", Path("target"))
    NodeInstaller(request).install()
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from nodekit.core.download import download_file
from nodekit.core.exceptions import (
    BinaryNotFoundError,
    ExtractionError,
    FilesystemError,
    ManifestReadError,
    VersionProbeError,
)
from nodekit.core.filesystem import (
    extract_archive,
    make_executable,
    move_file,
    safe_rmtree,
)
from nodekit.core.platform import Architecture, detect_platform, node_os_name
from nodekit.installer.config import InstallRequest
from nodekit.installer.version import (
    SubprocessVersionProbe,
    VersionProbe,
    read_npm_manifest,
)

logger = logging.getLogger(__name__)

NPM_ARCHIVE_NAME = "npm.tar.gz"
NPM_SCRATCH_DIRECTORY_NAME = "npm_tmp"
SCRATCH_DIRECTORY_NAME = "node_tmp"
NODE_ARCHIVE_NAME = "node.tar.gz"


@dataclass
class InstallStatus:
    """Installed versions compared against an InstallRequest."""

    node_version: Optional[str]
    npm_version: Optional[str]
    node_matches: bool
    npm_matches: bool

    @property
    def satisfied(self) -> bool:
        return self.node_matches and self.npm_matches


class NodeInstaller:
    """
    Install Node.js and npm into a project-local directory.

    Every check re-reads the filesystem; nothing is cached between calls.

    A broken existing installation (unparseable package.json, or a node
    binary that cannot report its version) is treated as "not installed"
    and replaced. Pass strict=True to fail on it instead.
    """

    def __init__(
        self,
        request: InstallRequest,
        version_probe: Optional[VersionProbe] = None,
        strict: bool = False,
        download_timeout: int = 30,
    ):
        """
        Initialize installer.

        Args:
            request: What to install, and where
            version_probe: Capability used to query the installed node binary
            strict: Raise on a corrupt installation instead of reinstalling
            download_timeout: Per-request timeout in seconds
        """
        self.request = request
        self.version_probe = version_probe or SubprocessVersionProbe()
        self.strict = strict
        self.download_timeout = download_timeout

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def install(self, force: bool = False) -> None:
        """
        Install whatever is missing.

        Args:
            force: Reinstall both components without checking versions

        Raises:
            InstallationError: If any step fails
        """
        if force or not self.is_npm_installed():
            self.install_npm()

        if force or not self.is_node_installed():
            if self.request.platform.is_windows():
                self.install_node_windows()
            else:
                self.install_node_default()

    def status(self) -> InstallStatus:
        """Report installed versions without downloading anything."""
        node_version = self._installed_node_version()
        npm_version = self._installed_npm_version()

        return InstallStatus(
            node_version=node_version,
            npm_version=npm_version,
            node_matches=node_version == self.request.node_version,
            npm_matches=npm_version == self.request.npm_version,
        )

    # ------------------------------------------------------------------
    # Version checks
    # ------------------------------------------------------------------

    def is_npm_installed(self) -> bool:
        """Check if npm/package.json records exactly the requested version."""
        found = self._installed_npm_version()
        if found is None:
            return False

        logger.info(f"Found npm version {found}")
        if found == self.request.npm_version:
            return True

        logger.info(
            f"Mismatch between found npm version {found} and required npm "
            f"version {self.request.npm_version}"
        )
        return False

    def is_node_installed(self) -> bool:
        """Check if the node binary reports exactly the requested version."""
        version = self._installed_node_version()
        if version is None:
            return False

        if version == self.request.node_version:
            logger.info(f"Node {version} is already installed.")
            return True

        logger.info(
            f"Node {version} was installed, but we need version "
            f"{self.request.node_version}"
        )
        return False

    def _installed_npm_version(self) -> Optional[str]:
        try:
            manifest = read_npm_manifest(self.request.npm_manifest)
        except ManifestReadError as e:
            if self.strict:
                raise
            logger.warning(f"{e}; npm will be reinstalled")
            return None

        if manifest is None:
            return None

        if manifest.version is None:
            logger.info("Could not read npm version from package.json")
            return None

        return manifest.version

    def _installed_node_version(self) -> Optional[str]:
        binary = self.request.node_binary
        if not binary.exists():
            return None

        try:
            return self.version_probe.get_installed_version(binary)
        except VersionProbeError as e:
            if self.strict:
                raise
            logger.warning(f"{e}; node will be reinstalled")
            return None

    # ------------------------------------------------------------------
    # Download URLs
    # ------------------------------------------------------------------

    def _download_url(self, *parts: str) -> str:
        return "/".join([self.request.download_root.rstrip("/"), *parts])

    def npm_download_url(self) -> str:
        """
        Example:
            >>> installer.npm_download_url()
            'http://nodejs.org/dist/npm/npm-1.4.4.tgz'
        """
        return self._download_url("npm", f"npm-{self.request.npm_version}.tgz")

    def long_node_filename(self) -> str:
        """
        Archive base name, e.g. 'node-v0.10.26-darwin-x64'.
        """
        platform = self.request.platform
        return (
            f"node-{self.request.node_version}-"
            f"{node_os_name(platform.os)}-{platform.arch}"
        )

    def node_download_url(self) -> str:
        version = self.request.node_version

        if self.request.platform.is_windows():
            # Windows builds are a bare executable
            if self.request.platform.arch is Architecture.X64:
                return self._download_url(version, "x64", "node.exe")
            return self._download_url(version, "node.exe")

        return self._download_url(version, f"{self.long_node_filename()}.tar.gz")

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def install_npm(self) -> None:
        """
        Download the npm archive and swap it in for node/npm.

        The archive is unpacked into a scratch directory first, so a failed
        download or a corrupt archive leaves the existing npm untouched.

        Raises:
            ExtractionError: If the archive has no npm/ directory
        """
        logger.info(f"Installing npm version {self.request.npm_version}")

        url = self.npm_download_url()
        scratch = self.request.install_directory / NPM_SCRATCH_DIRECTORY_NAME

        try:
            archive = download_file(
                url, scratch / NPM_ARCHIVE_NAME, timeout=self.download_timeout
            )
            extract_archive(archive, scratch)

            extracted_npm = scratch / "npm"
            if not extracted_npm.is_dir():
                raise ExtractionError(f"{url} does not contain an npm/ directory")

            move_file(extracted_npm, self.request.npm_manifest.parent)
        except BaseException:
            _remove_scratch(scratch, suppress_errors=True)
            raise
        _remove_scratch(scratch)

        logger.info("Installed npm locally.")

    def install_node_default(self) -> None:
        """
        Download the tarball for this platform and keep only bin/node.

        Raises:
            BinaryNotFoundError: If the archive does not have the expected layout
        """
        logger.info(f"Installing node version {self.request.node_version}")

        long_name = self.long_node_filename()
        url = self.node_download_url()
        scratch = self.request.install_directory / SCRATCH_DIRECTORY_NAME

        try:
            archive = download_file(
                url, scratch / NODE_ARCHIVE_NAME, timeout=self.download_timeout
            )
            extract_archive(archive, scratch)

            extracted_binary = scratch / long_name / "bin" / "node"
            if not extracted_binary.is_file():
                raise BinaryNotFoundError(extracted_binary)

            destination = move_file(extracted_binary, self.request.node_binary)
            make_executable(destination)
        except BaseException:
            _remove_scratch(scratch, suppress_errors=True)
            raise
        _remove_scratch(scratch)

        logger.info("Installed node locally.")

    def install_node_windows(self) -> None:
        """Download node.exe straight into the node directory."""
        logger.info(f"Installing node version {self.request.node_version}")

        download_file(
            self.node_download_url(),
            self.request.node_binary,
            timeout=self.download_timeout,
        )

        logger.info("Installed node.exe locally.")


def _remove_scratch(scratch: Path, suppress_errors: bool = False) -> None:
    """
    Delete a scratch directory.

    With suppress_errors a failure is only logged, so it cannot replace an
    exception that is already propagating.
    """
    try:
        safe_rmtree(scratch)
    except FilesystemError as e:
        if not suppress_errors:
            raise
        logger.warning(f"Could not clean up {scratch}: {e}")


def install_node_and_npm(
    node_version: str,
    npm_version: str,
    install_directory: Path,
    force: bool = False,
    **kwargs,
) -> NodeInstaller:
    """
    Convenience function to install Node.js and npm for the current platform.

    Args:
        node_version: Required Node.js version
        npm_version: Required npm version
        install_directory: Directory that receives the node/ tree
        force: Reinstall without checking versions
        **kwargs: Passed through to NodeInstaller

    Returns:
        The installer that performed the installation
    """
    request = InstallRequest(
        node_version=node_version,
        npm_version=npm_version,
        install_directory=Path(install_directory),
        platform=detect_platform(),
    )
    installer = NodeInstaller(request, **kwargs)
    installer.install(force=force)
    return installer


__all__ = [
    "NodeInstaller",
    "InstallStatus",
    "install_node_and_npm",
]
