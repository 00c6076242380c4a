"""Console output outside the audit log."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pc_setup.types import RunSummary


class ConsoleUI:
    """Status messages printed directly to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_welcome(self, package_count: int) -> None:
        """Display the start banner."""
        self.console.print(
            Panel(
                "[bold blue]PC Setup[/bold blue]\n"
                f"Installing {package_count} packages with winget",
                title="Welcome",
                border_style="blue",
            )
        )

    def show_summary(self, summary: RunSummary) -> None:
        """Display the final run summary table.

        Args:
            summary: Figures of the finished run.
        """
        table = Table(title="Setup Summary")
        table.add_column("Item", style="cyan")
        table.add_column("Result")

        table.add_row("Packages installed", f"[green]{summary.installed_count}[/green]")
        failed_style = "red" if summary.failed_count else "green"
        table.add_row(
            "Packages failed", f"[{failed_style}]{summary.failed_count}[/{failed_style}]"
        )
        table.add_row("Redistributables", _status(summary.redistributables_ok))
        table.add_row("Virtualization feature", _status(summary.feature_ok))
        table.add_row("Elapsed", summary.elapsed_text)

        self.console.print(table)

    def show_log_location(self, path: Path) -> None:
        """Tell the user where the log file is."""
        self.console.print(f"\n[bold]Log file saved to:[/bold] {escape(str(path))}")

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]\u2713[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]\u2717[/red] {escape(message)}")


def _status(ok: bool) -> str:
    return "[green]\u2713 done[/green]" if ok else "[red]\u2717 failed[/red]"
