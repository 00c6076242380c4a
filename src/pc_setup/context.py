"""Application context for dependency injection.

Holds everything a run needs (configuration, the audit log and the external
collaborators) so no component reaches for module-level state. Production
code builds it with ``create_context``; tests construct AppContext directly
with test doubles.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from pc_setup.config import SetupConfig
from pc_setup.protocols import AuditLog, CommandRunner, Downloader, PrivilegeChecker


@dataclass
class AppContext:
    """Container for application dependencies.

    All collaborators are typed using Protocol interfaces, not concrete
    classes, so test doubles can be injected without inheritance.
    """

    config: SetupConfig
    log: AuditLog
    runner: CommandRunner
    privileges: PrivilegeChecker
    downloader: Downloader
    sleep: Callable[[float], None] = field(default=time.sleep)


def create_context(config: SetupConfig | None = None) -> AppContext:
    """Factory for application dependencies.

    Args:
        config: Override the compiled-in configuration (for testing).

    Returns:
        Configured AppContext with all dependencies.
    """
    from pc_setup.audit_log import AuditLogger
    from pc_setup.download import UrlDownloader
    from pc_setup.privileges import OsPrivilegeChecker
    from pc_setup.process import SubprocessRunner

    return AppContext(
        config=config or SetupConfig(),
        log=AuditLogger(),
        runner=SubprocessRunner(),
        privileges=OsPrivilegeChecker(),
        downloader=UrlDownloader(),
    )
