"""Sequential installation of the configured package list."""

from __future__ import annotations

import time
from typing import Callable, Sequence

from pc_setup.audit_log import banner
from pc_setup.config import INSTALL_DELAY_SECONDS
from pc_setup.protocols import AuditLog, PackageInstaller
from pc_setup.types import BatchCounts, PackageSpec


class BatchInstaller:
    """Drives a package installer over an ordered list.

    Items are installed strictly in order with a fixed pause after each one,
    the last included. A failure never skips the items that follow.
    """

    def __init__(
        self,
        installer: PackageInstaller,
        log: AuditLog,
        delay: float = INSTALL_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.installer = installer
        self.log = log
        self.delay = delay
        self.sleep = sleep

    def install_all(self, packages: Sequence[PackageSpec | str]) -> BatchCounts:
        """Install every package in order.

        Args:
            packages: PackageSpec objects or ``identifier|displayName`` strings.

        Returns:
            Counters and per-package results in input order.
        """
        specs = [p if isinstance(p, PackageSpec) else PackageSpec.parse(p) for p in packages]
        counts = BatchCounts()

        self.log.log(banner(f"Installing {len(specs)} packages"))
        for spec in specs:
            counts.record(self.installer.install_one(spec.identifier, spec.display_name))
            self.sleep(self.delay)

        self.log.log(
            banner(
                f"Package installation finished: {counts.installed} installed, "
                f"{counts.failed} failed"
            )
        )
        return counts
