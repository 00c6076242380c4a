"""Tests for the command-line entry point.

``execute`` accepts an injected context so the whole run can be driven with
test doubles; the Typer command itself is exercised through CliRunner.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest
from rich.console import Console
from typer.testing import CliRunner

from conftest import make_result
from pc_setup import cli
from pc_setup.audit_log import AuditLogger
from pc_setup.console import ConsoleUI
from pc_setup.context import AppContext
from pc_setup.process import CommandError

ContextFactory = Callable[..., AppContext]


@pytest.fixture
def ui_buffer(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    """Capture the CLI's own console output."""
    buffer = io.StringIO()
    monkeypatch.setattr(
        cli, "ui", ConsoleUI(Console(file=buffer, width=300, color_system=None))
    )
    return buffer


def _winget_ok(argv: list[str]):
    if argv[0] == "winget" and argv[1:2] == ["--version"]:
        return make_result(argv, stdout="v1.7.0")
    return make_result(argv)


class TestExecute:
    """Tests for cli.execute."""

    def test_success_returns_zero(
        self, make_context: ContextFactory, log_path: Path, ui_buffer: io.StringIO
    ) -> None:
        ctx = make_context(run=_winget_ok)

        code = cli.execute(log_path, _context=ctx)

        assert code == 0
        output = ui_buffer.getvalue()
        assert "Setup Summary" in output
        assert str(log_path) in output

    def test_package_failures_still_return_zero(
        self, make_context: ContextFactory, log_path: Path, ui_buffer: io.StringIO
    ) -> None:
        def run(argv: list[str]):
            if argv[1:3] == ["install", "--id"]:
                return make_result(argv, returncode=1)
            return _winget_ok(argv)

        assert cli.execute(log_path, _context=make_context(run=run)) == 0

    def test_not_elevated_returns_one(
        self, make_context: ContextFactory, log_path: Path, ui_buffer: io.StringIO
    ) -> None:
        ctx = make_context(run=_winget_ok, elevated=False)

        code = cli.execute(log_path, _context=ctx)

        assert code == 1
        assert "Setup aborted" in ui_buffer.getvalue()
        assert str(log_path) in ui_buffer.getvalue()
        ctx.runner.run.assert_not_called()

    def test_winget_unavailable_returns_one(
        self, make_context: ContextFactory, log_path: Path, ui_buffer: io.StringIO
    ) -> None:
        def run(argv: list[str]):
            if argv[0] == "winget":
                raise CommandError("winget not found")
            return make_result(argv, returncode=1)

        assert cli.execute(log_path, _context=make_context(run=run)) == 1

    def test_unwritable_log_returns_one(
        self, make_context: ContextFactory, tmp_path: Path, ui_buffer: io.StringIO
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not directory")
        ctx = make_context(run=_winget_ok)

        assert cli.execute(blocker / "setup.log", _context=ctx) == 1
        ctx.runner.run.assert_not_called()

    def test_default_log_path(
        self,
        make_context: ContextFactory,
        temp_home: Path,
        ui_buffer: io.StringIO,
    ) -> None:
        ctx = make_context(run=_winget_ok)

        assert cli.execute(None, _context=ctx) == 0

        assert isinstance(ctx.log, AuditLogger)
        assert ctx.log.log_path is not None
        assert ctx.log.log_path.parent == temp_home / "Desktop"
        assert ctx.log.log_path.name.startswith("PC_Setup_Log_")


class TestCommand:
    """Tests for the Typer command."""

    def test_log_path_option(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        execute = MagicMock(return_value=0)
        monkeypatch.setattr(cli, "execute", execute)

        result = CliRunner().invoke(cli.app, ["--log-path", str(tmp_path / "x.log")])

        assert result.exit_code == 0
        execute.assert_called_once_with(tmp_path / "x.log")

    def test_no_arguments(self, monkeypatch: pytest.MonkeyPatch) -> None:
        execute = MagicMock(return_value=0)
        monkeypatch.setattr(cli, "execute", execute)

        result = CliRunner().invoke(cli.app, [])

        assert result.exit_code == 0
        execute.assert_called_once_with(None)

    def test_exit_code_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cli, "execute", MagicMock(return_value=1))

        result = CliRunner().invoke(cli.app, [])

        assert result.exit_code == 1

    def test_unknown_flag_rejected(self) -> None:
        result = CliRunner().invoke(cli.app, ["--dry-run"])
        assert result.exit_code != 0

    def test_help_lists_only_user_options(self) -> None:
        result = CliRunner().invoke(cli.app, ["--help"])

        assert result.exit_code == 0
        assert "--log-path" in result.output
        assert "context" not in result.output.lower()
