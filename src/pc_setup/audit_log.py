"""Append-only audit log with a colour-coded console mirror."""

from __future__ import annotations

import getpass
import logging
import platform
import socket
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from rich.console import Console

from pc_setup.types import LogEntry, LogLevel

logger = logging.getLogger(__name__)

RULE = "=" * 80
LOG_TITLE = "PC Setup & Package Installation Log"


class LogSinkError(OSError):
    """The log file or its directory could not be created."""

    pass


def banner(title: str) -> str:
    """Delimiter message used to separate the phases of a run."""
    return f"{'=' * 20} {title} {'=' * 20}"


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class AuditLogger:
    """Writes the run log and mirrors each line to the console.

    Satisfies the AuditLog protocol structurally. ``initialize`` must be
    called once before ``log``; calling it again starts a fresh file.
    """

    def __init__(
        self,
        console: Console | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the logger.

        Args:
            console: Rich console for mirrored output. Defaults to stdout.
            clock: Source of wall-clock time.
        """
        self.console = console or Console(highlight=False)
        self.clock = clock
        self.log_path: Path | None = None
        self.start_time: datetime | None = None
        self.entries: list[LogEntry] = []
        self._sink_failed = False

    def initialize(self, path: Path | str) -> None:
        """Create or truncate the log file and write the header block.

        Args:
            path: Log file location. Missing parent directories are created.

        Raises:
            LogSinkError: If the directory or file cannot be created.
        """
        path = Path(path)
        self.start_time = self.clock().replace(microsecond=0)
        self.entries = []
        self.log_path = None
        self._sink_failed = False

        header = "\n".join(
            [
                RULE,
                LOG_TITLE,
                f"Started: {self.start_time:%Y-%m-%d %H:%M:%S}",
                f"User: {_current_user()}",
                f"Computer: {socket.gethostname()}",
                f"Python Version: {platform.python_version()}",
                RULE,
                "",
                "",
            ]
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(header, encoding="utf-8", errors="backslashreplace")
        except OSError as e:
            raise LogSinkError(f"Cannot create log file {path}: {e}") from e

        self.log_path = path

    def log(
        self,
        message: str,
        level: LogLevel | str = LogLevel.INFO,
        to_console: bool = True,
    ) -> LogEntry:
        """Append a line to the log and optionally echo it.

        Never raises: a failed append is reported once on the console and
        the run carries on.

        Args:
            message: Text of the entry.
            level: Severity. Unknown values get the default console style.
            to_console: Echo the line to the console as well.

        Returns:
            The entry that was recorded.
        """
        if isinstance(level, str) and not isinstance(level, LogLevel):
            level = LogLevel.__members__.get(level.upper(), level)

        entry = LogEntry(timestamp=self.clock(), level=level, message=message)
        self.entries.append(entry)
        line = entry.format()

        self._append(line)
        if to_console:
            self.console.print(line, style=entry.style or None, markup=False)
        return entry

    def elapsed(self) -> timedelta:
        """Time since the last ``initialize``."""
        if self.start_time is None:
            return timedelta(0)
        return self.clock().replace(microsecond=0) - self.start_time

    def _append(self, line: str) -> None:
        if self.log_path is None:
            self._report_sink_failure("log file was never initialized")
            return
        try:
            with self.log_path.open("a", encoding="utf-8", errors="backslashreplace") as fh:
                fh.write(line + "\n")
        except OSError as e:
            self._report_sink_failure(str(e))

    def _report_sink_failure(self, reason: str) -> None:
        logger.debug("Audit log append failed: %s", reason)
        if self._sink_failed:
            return
        self._sink_failed = True
        self.console.print(
            f"Warning: could not write to log file ({reason}); "
            "continuing with console output only",
            style="yellow",
            markup=False,
        )
