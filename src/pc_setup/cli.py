"""CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from pc_setup.audit_log import LogSinkError
from pc_setup.config import default_log_path
from pc_setup.console import ConsoleUI
from pc_setup.context import create_context
from pc_setup.orchestrator import SetupAborted, run_setup

if TYPE_CHECKING:
    from pc_setup.context import AppContext

app = typer.Typer(
    name="pc-setup",
    help="Provision a fresh Windows machine with winget",
    add_completion=False,
)

ui = ConsoleUI()


def execute(log_path: Path | None = None, _context: AppContext | None = None) -> int:
    """Run the provisioning and return the process exit code.

    Args:
        log_path: Log file location. Defaults to a timestamped file on the desktop.
        _context: Injected application context (for testing).

    Returns:
        0 on completion, 1 when a fatal step stopped the run.
    """
    ctx = _context or create_context()
    path = log_path or default_log_path()

    ui.show_welcome(len(ctx.config.packages))
    try:
        summary = run_setup(ctx, path)
    except LogSinkError as e:
        ui.show_error(str(e))
        return 1
    except SetupAborted as e:
        ui.show_error(f"Setup aborted: {e}")
        ui.show_log_location(path)
        return e.exit_code

    ui.show_summary(summary)
    ui.show_success("Setup finished")
    ui.show_log_location(path)
    return 0


@app.command()
def main(
    log_path: Annotated[
        Path | None,
        typer.Option(
            "--log-path",
            "-l",
            help="Log file path (default: timestamped file on the desktop)",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """Install the configured applications and system components."""
    code = execute(log_path)
    if code:
        raise typer.Exit(code)


if __name__ == "__main__":
    app()
