"""winget package manager gateway and single-package installer."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Sequence

from pc_setup.download import DownloadError
from pc_setup.process import CommandError, CommandResult
from pc_setup.protocols import AuditLog, CommandRunner, Downloader
from pc_setup.types import InstallOutcome, InstallResult, LogLevel, PackageSpec

logger = logging.getLogger(__name__)

WINGET = "winget"

AGREEMENT_FLAGS = ["--accept-package-agreements", "--accept-source-agreements"]

# winget exit codes that mean the package is already present.
ALREADY_INSTALLED_CODES = frozenset(
    {
        0x8A150061,  # APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED
        0x8A15002B,  # APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE
    }
)

BUNDLE_NAME = "Microsoft.DesktopAppInstaller.msixbundle"


def powershell_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def install_command(identifier: str) -> list[str]:
    """Command line installing one package by exact id."""
    return [WINGET, "install", "--id", identifier, "--exact", *AGREEMENT_FLAGS]


def batch_install_command(identifiers: Sequence[str]) -> list[str]:
    """Command line installing several packages in one winget call."""
    return [WINGET, "install", "--exact", *AGREEMENT_FLAGS, *identifiers]


def is_install_success(result: CommandResult) -> bool:
    """True for a clean exit or an "already installed" status."""
    return result.ok or result.unsigned_returncode in ALREADY_INSTALLED_CODES


class WingetGateway:
    """Talks to the winget command-line tool.

    Collaborators come from the application context; the orchestrator builds
    one gateway per run.
    """

    def __init__(
        self,
        runner: CommandRunner,
        log: AuditLog,
        downloader: Downloader,
        installer_url: str,
        download_dir: Path | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            runner: Executes winget and PowerShell.
            log: Audit log receiving every outcome.
            downloader: Fetches the winget bundle for self-install.
            installer_url: Fixed location of the winget bundle.
            download_dir: Where the bundle is saved. Defaults to the temp dir.
        """
        self.runner = runner
        self.log = log
        self.downloader = downloader
        self.installer_url = installer_url
        self.download_dir = download_dir or Path(tempfile.gettempdir())

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def version(self) -> str | None:
        """Installed winget version, or None when winget is unusable."""
        try:
            result = self.runner.run([WINGET, "--version"])
        except CommandError as e:
            logger.debug("winget version query failed: %s", e)
            return None
        if not result.ok or not result.output:
            return None
        return result.output.splitlines()[0].strip()

    def check_available(self) -> bool:
        """Make sure winget can be used, installing it once if needed.

        Returns:
            True when winget answers a version query.
        """
        version = self.version()
        if version:
            self.log.log(f"winget is available (version {version})", LogLevel.SUCCESS)
            return True

        self.log.log(
            "winget not found. Attempting to install App Installer...", LogLevel.WARNING
        )
        try:
            self._self_install()
        except (CommandError, DownloadError) as e:
            self.log.log(f"Failed to install winget: {e}", LogLevel.ERROR)
            return False

        version = self.version()
        if not version:
            self.log.log(
                "winget was installed but still does not respond", LogLevel.ERROR
            )
            return False
        self.log.log(f"winget installed successfully (version {version})", LogLevel.SUCCESS)
        return True

    def _self_install(self) -> None:
        """Download the App Installer bundle and register it.

        Raises:
            DownloadError: If the bundle cannot be fetched.
            CommandError: If registration cannot be started or fails.
        """
        bundle = self.downloader.download(
            self.installer_url, self.download_dir / BUNDLE_NAME
        )
        result = self.runner.run(
            [
                "powershell",
                "-NoProfile",
                "-ExecutionPolicy",
                "Bypass",
                "-Command",
                f"Add-AppxPackage -LiteralPath {powershell_quote(str(bundle))}",
            ]
        )
        if not result.ok:
            raise CommandError(
                f"Add-AppxPackage exited with code {result.returncode}: {result.output}"
            )

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def refresh_sources(self) -> bool:
        """Update winget's package sources. Failure is only a warning."""
        self.log.log("Updating winget sources...")
        try:
            result = self.runner.run([WINGET, "source", "update"])
        except CommandError as e:
            self.log.log(f"Could not update winget sources: {e}", LogLevel.WARNING)
            return False
        if not result.ok:
            self.log.log(
                f"Could not update winget sources (exit code {result.returncode})",
                LogLevel.WARNING,
            )
            return False
        self.log.log("winget sources updated", LogLevel.SUCCESS)
        return True

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install_one(self, identifier: str, display_name: str | None = None) -> InstallResult:
        """Install one package by exact identifier.

        Args:
            identifier: winget package id.
            display_name: Name for log lines. Defaults to the identifier.

        Returns:
            InstallResult classified from the winget exit code.
        """
        package = PackageSpec(identifier=identifier, display_name=display_name)
        name = package.display_name
        self.log.log(f"Installing: {name}")

        try:
            result = self.runner.run(install_command(package.identifier))
        except CommandError as e:
            self.log.log(f"Failed to install {name}: {e}", LogLevel.ERROR)
            return InstallResult(package, InstallOutcome.FAILED, detail=str(e))

        if result.ok:
            self.log.log(f"Installed: {name}", LogLevel.SUCCESS)
            return InstallResult(package, InstallOutcome.SUCCEEDED, exit_code=0)

        if is_install_success(result):
            self.log.log(f"Already installed: {name}", LogLevel.SUCCESS)
            return InstallResult(
                package,
                InstallOutcome.SUCCEEDED,
                exit_code=result.returncode,
                detail="already installed",
            )

        detail = f"exit code {result.returncode}"
        self.log.log(f"Failed to install {name} ({detail})", LogLevel.ERROR)
        return InstallResult(
            package, InstallOutcome.FAILED, exit_code=result.returncode, detail=detail
        )
