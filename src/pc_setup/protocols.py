"""Protocol definitions for the external collaborators.

The orchestrator and its steps only talk to these interfaces. Production
implementations live in process.py, audit_log.py, privileges.py and
download.py and satisfy them structurally.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from pc_setup.process import CommandResult
    from pc_setup.types import InstallResult, LogEntry, LogLevel


@runtime_checkable
class CommandRunner(Protocol):
    """Runs external programs."""

    def run(self, argv: Sequence[str]) -> CommandResult:
        """Run a program to completion.

        Args:
            argv: Program and arguments.

        Returns:
            CommandResult carrying the exit status and captured output.

        Raises:
            CommandError: If the program could not be started.
        """
        ...


@runtime_checkable
class AuditLog(Protocol):
    """Append-only run log."""

    log_path: Path | None
    start_time: datetime | None

    def initialize(self, path: Path | str) -> None:
        """Start a fresh log file with a header block.

        Args:
            path: Log file location.

        Raises:
            LogSinkError: If the file cannot be created.
        """
        ...

    def log(
        self,
        message: str,
        level: LogLevel | str = ...,
        to_console: bool = True,
    ) -> LogEntry:
        """Append one entry.

        Args:
            message: Entry text.
            level: Severity.
            to_console: Mirror the entry to the console.

        Returns:
            The recorded entry.
        """
        ...

    def elapsed(self) -> timedelta:
        """Time since the log was initialized."""
        ...


@runtime_checkable
class PackageInstaller(Protocol):
    """Installs a single package by identifier."""

    def install_one(self, identifier: str, display_name: str | None = None) -> InstallResult:
        """Install one package.

        Args:
            identifier: Package manager id.
            display_name: Name for log lines. Defaults to the identifier.

        Returns:
            InstallResult for the attempt. Never raises for install failures.
        """
        ...


@runtime_checkable
class PrivilegeChecker(Protocol):
    """Answers whether the process is elevated."""

    def is_elevated(self) -> bool:
        ...


@runtime_checkable
class Downloader(Protocol):
    """Fetches a remote file to local disk."""

    def download(self, url: str, destination: Path) -> Path:
        """Download ``url`` into ``destination``.

        Args:
            url: Source URL.
            destination: Target file path.

        Returns:
            Path of the written file.

        Raises:
            DownloadError: If the transfer fails.
        """
        ...
