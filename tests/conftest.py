"""Shared test fixtures."""

from __future__ import annotations

import io
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Sequence
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from pc_setup.audit_log import AuditLogger
from pc_setup.config import SetupConfig
from pc_setup.context import AppContext
from pc_setup.process import CommandResult


class FakeClock:
    """Clock that advances a fixed step on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


def make_result(argv: Sequence[str] = (), returncode: int = 0, stdout: str = "") -> CommandResult:
    """Build a CommandResult for a mocked runner."""
    return CommandResult(argv=list(argv), returncode=returncode, stdout=stdout)


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def console_buffer() -> io.StringIO:
    """Buffer capturing mirrored console output."""
    return io.StringIO()


@pytest.fixture
def test_console(console_buffer: io.StringIO) -> Console:
    """Plain console writing into console_buffer."""
    return Console(file=console_buffer, width=200, color_system=None, highlight=False)


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock starting at 2024-03-01 09:00:00."""
    return FakeClock(datetime(2024, 3, 1, 9, 0, 0))


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Log file location inside a not yet existing directory."""
    return tmp_path / "logs" / "setup.log"


@pytest.fixture
def audit_log(test_console: Console, clock: FakeClock, log_path: Path) -> AuditLogger:
    """An initialized AuditLogger writing to log_path."""
    logger = AuditLogger(console=test_console, clock=clock)
    logger.initialize(log_path)
    return logger


@pytest.fixture
def mock_runner() -> MagicMock:
    """Command runner double; every command succeeds by default."""
    runner = MagicMock()
    runner.run.side_effect = lambda argv: make_result(argv)
    return runner


@pytest.fixture
def mock_downloader() -> MagicMock:
    """Downloader double returning the requested destination."""
    downloader = MagicMock()
    downloader.download.side_effect = lambda url, destination: destination
    return downloader


@pytest.fixture
def small_config() -> SetupConfig:
    """Configuration with a two-package list and fast pacing."""
    return SetupConfig(
        packages=["a.id|A", "b.id|B"],
        redistributables=["Microsoft.VCRedist.2015+.x64", "Microsoft.VCRedist.2015+.x86"],
        virtualization_feature="Microsoft-Hyper-V-All",
        install_delay=0.5,
    )


@pytest.fixture
def make_context(
    small_config: SetupConfig,
    test_console: Console,
    clock: FakeClock,
    mock_downloader: MagicMock,
) -> Callable[..., AppContext]:
    """Factory for an AppContext wired with test doubles."""

    def _make(
        run: Callable[[Sequence[str]], CommandResult] | None = None,
        elevated: bool = True,
        config: SetupConfig | None = None,
    ) -> AppContext:
        runner = MagicMock()
        runner.run.side_effect = run or (lambda argv: make_result(argv, stdout="v1.7.0"))
        privileges = MagicMock()
        privileges.is_elevated.return_value = elevated
        return AppContext(
            config=config or small_config,
            log=AuditLogger(console=test_console, clock=clock),
            runner=runner,
            privileges=privileges,
            downloader=mock_downloader,
            sleep=MagicMock(),
        )

    return _make


def read_entries(path: Path) -> list[str]:
    """Log lines written after the header block."""
    lines = path.read_text(encoding="utf-8").splitlines()
    # Header: rule, title, 4 info lines, rule, blank
    return lines[8:]
