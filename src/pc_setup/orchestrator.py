"""End-to-end provisioning run."""

from __future__ import annotations

from pathlib import Path

from pc_setup.audit_log import banner
from pc_setup.batch import BatchInstaller
from pc_setup.context import AppContext
from pc_setup.system_steps import enable_virtualization, install_redistributables
from pc_setup.types import LogLevel, RunSummary, format_duration
from pc_setup.winget import WingetGateway


class SetupAborted(Exception):
    """A fatal step failed and the run must stop."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def run_setup(ctx: AppContext, log_path: Path) -> RunSummary:
    """Provision the machine.

    Steps run in a fixed order: privilege check, winget availability, source
    refresh, package batch, redistributables, virtualization feature and the
    final summary. Only the first two can stop the run.

    Args:
        ctx: Application context.
        log_path: Where the audit log is written.

    Returns:
        RunSummary of the run.

    Raises:
        LogSinkError: If the log file cannot be created.
        SetupAborted: If not elevated or winget cannot be made available.
    """
    log = ctx.log
    config = ctx.config
    log.initialize(log_path)
    log.log(banner("PC setup started"))

    if not ctx.privileges.is_elevated():
        log.log("This script must be run as Administrator", LogLevel.ERROR)
        raise SetupAborted("Administrator privileges are required")
    log.log("Running with administrator privileges", LogLevel.SUCCESS)

    gateway = WingetGateway(
        runner=ctx.runner,
        log=log,
        downloader=ctx.downloader,
        installer_url=config.winget_installer_url,
    )
    if not gateway.check_available():
        log.log("winget is not available. Aborting.", LogLevel.ERROR)
        raise SetupAborted("winget is not available")

    gateway.refresh_sources()

    batch = BatchInstaller(
        installer=gateway, log=log, delay=config.install_delay, sleep=ctx.sleep
    )
    counts = batch.install_all(config.package_specs())

    redist_ok = install_redistributables(ctx.runner, log, config.redistributables)
    feature_ok = enable_virtualization(ctx.runner, log, config.virtualization_feature)

    elapsed = log.elapsed()
    log.log(banner("Setup complete"))
    log.log(f"Installed: {counts.installed}", LogLevel.SUCCESS)
    log.log(
        f"Failed: {counts.failed}",
        LogLevel.ERROR if counts.failed else LogLevel.INFO,
    )
    log.log(f"Log file: {log_path}")
    log.log(f"Elapsed time: {format_duration(elapsed)}")

    return RunSummary(
        installed_count=counts.installed,
        failed_count=counts.failed,
        start_time=log.start_time,
        elapsed=elapsed,
        log_path=log_path,
        redistributables_ok=redist_ok,
        feature_ok=feature_ok,
    )
