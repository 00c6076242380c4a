"""Shared data types for pc-setup."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path

__all__ = [
    "BatchCounts",
    "InstallOutcome",
    "InstallResult",
    "LogEntry",
    "LogLevel",
    "PackageSpec",
    "RunSummary",
    "format_duration",
]


class LogLevel(str, Enum):
    """Severity of an audit log entry."""

    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def style(self) -> str:
        """Rich style used when mirroring the entry to the console."""
        return _LEVEL_STYLES.get(self, "")


_LEVEL_STYLES = {
    LogLevel.SUCCESS: "green",
    LogLevel.INFO: "",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}


@dataclass(frozen=True)
class LogEntry:
    """A single line of the audit log.

    Attributes:
        timestamp: Wall-clock time, truncated to whole seconds.
        level: Severity label. Usually a LogLevel; any other string is
            written verbatim and shown with the default console style.
        message: Free text.
    """

    timestamp: datetime
    level: LogLevel | str
    message: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", self.timestamp.replace(microsecond=0))

    @property
    def level_name(self) -> str:
        """Label written between the brackets."""
        if isinstance(self.level, LogLevel):
            return self.level.value
        return str(self.level)

    @property
    def style(self) -> str:
        """Console style for this entry."""
        if isinstance(self.level, LogLevel):
            return self.level.style
        return ""

    def format(self) -> str:
        """Render as ``HH:MM:SS [LEVEL] message``."""
        return f"{self.timestamp:%H:%M:%S} [{self.level_name}] {self.message}"


@dataclass
class PackageSpec:
    """A package to install.

    Attributes:
        identifier: Opaque id handed to the package manager.
        display_name: Name used in log lines. Resolved to ``identifier`` when
            not given or blank.
    """

    identifier: str
    display_name: str | None = None

    def __post_init__(self) -> None:
        """Validate the identifier and resolve the display name."""
        self.identifier = self.identifier.strip()
        if not self.identifier:
            raise ValueError("identifier cannot be empty")
        name = (self.display_name or "").strip()
        self.display_name = name or self.identifier

    @classmethod
    def parse(cls, entry: str) -> PackageSpec:
        """Build a spec from an ``identifier|displayName`` entry.

        Args:
            entry: Configuration string. The display name part is optional.

        Returns:
            Parsed PackageSpec.

        Raises:
            ValueError: If the identifier part is empty.
        """
        identifier, _, display_name = entry.partition("|")
        return cls(identifier=identifier, display_name=display_name or None)


class InstallOutcome(str, Enum):
    """Outcome of a single package installation."""

    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@dataclass
class InstallResult:
    """Result of installing one package.

    Attributes:
        package: The package that was attempted.
        outcome: Succeeded or Failed.
        exit_code: Exit status of the package manager, or None when the
            invocation itself faulted.
        detail: Human readable reason, mainly for failures.
    """

    package: PackageSpec
    outcome: InstallOutcome
    exit_code: int | None = None
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.outcome is InstallOutcome.SUCCEEDED


@dataclass
class BatchCounts:
    """Counters accumulated by a batch install."""

    installed: int = 0
    failed: int = 0
    results: list[InstallResult] = field(default_factory=list)

    def record(self, result: InstallResult) -> None:
        """Append a result and bump the matching counter."""
        self.results.append(result)
        if result.succeeded:
            self.installed += 1
        else:
            self.failed += 1

    @property
    def total(self) -> int:
        return self.installed + self.failed


@dataclass
class RunSummary:
    """Final figures of a provisioning run.

    The auxiliary step outcomes are reported on their own and are never
    folded into ``installed_count`` or ``failed_count``.
    """

    installed_count: int
    failed_count: int
    start_time: datetime
    elapsed: timedelta
    log_path: Path
    redistributables_ok: bool = False
    feature_ok: bool = False

    @property
    def elapsed_text(self) -> str:
        """Elapsed duration as ``HH:MM:SS``."""
        return format_duration(self.elapsed)


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``HH:MM:SS`` (hours may exceed 24)."""
    total = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
