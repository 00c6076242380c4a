"""External command execution.

Every interaction with the package manager and the operating system goes
through a CommandRunner so the rest of the package can be exercised with a
test double. SubprocessRunner is the production implementation.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """The command could not be run at all (missing executable, OS refusal)."""

    pass


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a command that ran to completion.

    Attributes:
        argv: The command line that was executed.
        returncode: Exit status as reported by the OS.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def unsigned_returncode(self) -> int:
        """Exit status as an unsigned 32-bit value (HRESULT style codes)."""
        return self.returncode & 0xFFFFFFFF

    @property
    def output(self) -> str:
        """Stripped stdout, falling back to stderr when stdout is empty."""
        return (self.stdout or self.stderr or "").strip()


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class SubprocessRunner:
    """Production command runner backed by subprocess.

    Satisfies the CommandRunner protocol structurally. No timeout is applied:
    a command that never returns blocks the caller.
    """

    def run(self, argv: Sequence[str]) -> CommandResult:
        """Run a command and capture its output.

        Args:
            argv: Program and arguments.

        Returns:
            CommandResult for any command that started, whatever its exit code.

        Raises:
            CommandError: If the program could not be started.
        """
        argv_list = list(argv)
        logger.debug("CMD %s", format_argv(argv_list))
        try:
            proc = subprocess.run(
                argv_list,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise CommandError(f"Could not run {argv_list[0]}: {e}") from e

        if proc.stdout:
            logger.debug("STDOUT %s", proc.stdout.strip())
        if proc.stderr:
            logger.debug("STDERR %s", proc.stderr.strip())

        return CommandResult(
            argv=argv_list,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
