"""One-shot system setup steps run after the package batch."""

from __future__ import annotations

from typing import Sequence

from pc_setup.audit_log import banner
from pc_setup.process import CommandError
from pc_setup.protocols import AuditLog, CommandRunner
from pc_setup.types import LogLevel
from pc_setup.winget import batch_install_command, is_install_success

# DISM exit status when the change needs a reboot to complete.
ERROR_SUCCESS_REBOOT_REQUIRED = 3010


def install_redistributables(
    runner: CommandRunner, log: AuditLog, identifiers: Sequence[str]
) -> bool:
    """Install all runtime redistributables with a single winget call.

    Returns:
        True if winget reported success.
    """
    log.log(banner("Installing runtime redistributables"))
    if not identifiers:
        log.log("No redistributables configured", LogLevel.WARNING)
        return True

    log.log(f"Installing {len(identifiers)} redistributable packages...")
    try:
        result = runner.run(batch_install_command(identifiers))
    except CommandError as e:
        log.log(f"Failed to install redistributables: {e}", LogLevel.ERROR)
        return False

    if not is_install_success(result):
        log.log(
            f"Failed to install redistributables (exit code {result.returncode})",
            LogLevel.ERROR,
        )
        return False
    log.log("Runtime redistributables installed", LogLevel.SUCCESS)
    return True


def enable_virtualization(runner: CommandRunner, log: AuditLog, feature: str) -> bool:
    """Enable a Windows optional feature and its sub-features without rebooting.

    Returns:
        True if the feature was enabled, whether or not a restart is pending.
    """
    log.log(banner(f"Enabling Windows feature {feature}"))
    argv = [
        "dism.exe",
        "/Online",
        "/Enable-Feature",
        f"/FeatureName:{feature}",
        "/All",
        "/NoRestart",
    ]
    try:
        result = runner.run(argv)
    except CommandError as e:
        log.log(f"Failed to enable {feature}: {e}", LogLevel.ERROR)
        return False

    if result.returncode == ERROR_SUCCESS_REBOOT_REQUIRED:
        log.log(f"{feature} enabled", LogLevel.SUCCESS)
        log.log(
            f"A restart is required to finish enabling {feature}", LogLevel.WARNING
        )
        return True
    if result.ok:
        log.log(f"{feature} enabled", LogLevel.SUCCESS)
        return True

    log.log(
        f"Failed to enable {feature} (exit code {result.returncode})", LogLevel.ERROR
    )
    return False
