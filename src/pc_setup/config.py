"""Compiled-in provisioning configuration."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from pc_setup.types import PackageSpec

# Applications installed by the batch installer, in installation order.
DEFAULT_PACKAGES: tuple[str, ...] = (
    "Google.Chrome|Google Chrome",
    "Mozilla.Firefox|Mozilla Firefox",
    "7zip.7zip|7-Zip",
    "VideoLAN.VLC|VLC Media Player",
    "Notepad++.Notepad++|Notepad++",
    "Microsoft.VisualStudioCode|Visual Studio Code",
    "Git.Git|Git",
    "Python.Python.3.12|Python 3.12",
    "OpenJS.NodeJS.LTS|Node.js LTS",
    "Microsoft.PowerToys|PowerToys",
    "Microsoft.WindowsTerminal|Windows Terminal",
    "Docker.DockerDesktop|Docker Desktop",
    "Discord.Discord|Discord",
    "Valve.Steam|Steam",
    "Spotify.Spotify|Spotify",
    "OBSProject.OBSStudio|OBS Studio",
)

# Runtime libraries installed together in a single winget call.
DEFAULT_REDISTRIBUTABLES: tuple[str, ...] = (
    "Microsoft.VCRedist.2005.x86",
    "Microsoft.VCRedist.2005.x64",
    "Microsoft.VCRedist.2008.x86",
    "Microsoft.VCRedist.2008.x64",
    "Microsoft.VCRedist.2010.x86",
    "Microsoft.VCRedist.2010.x64",
    "Microsoft.VCRedist.2012.x86",
    "Microsoft.VCRedist.2012.x64",
    "Microsoft.VCRedist.2013.x86",
    "Microsoft.VCRedist.2013.x64",
    "Microsoft.VCRedist.2015+.x86",
    "Microsoft.VCRedist.2015+.x64",
    "Microsoft.DirectX",
    "Microsoft.DotNet.DesktopRuntime.8",
)

VIRTUALIZATION_FEATURE = "Microsoft-Hyper-V-All"

WINGET_INSTALLER_URL = "https://aka.ms/getwinget"

# Pause between two package installs, in seconds.
INSTALL_DELAY_SECONDS = 0.5


def default_log_dir() -> Path:
    """Directory holding the log file when none is given on the command line."""
    return Path.home() / "Desktop"


def default_log_path(now: datetime | None = None) -> Path:
    """Timestamped log file under the user's desktop."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return default_log_dir() / f"PC_Setup_Log_{stamp}.txt"


class SetupConfig(BaseModel):
    """Fixed configuration for one provisioning run.

    Built once before the run and shared through the application context.
    """

    model_config = ConfigDict(frozen=True)

    packages: tuple[str, ...] = DEFAULT_PACKAGES
    redistributables: tuple[str, ...] = DEFAULT_REDISTRIBUTABLES
    virtualization_feature: str = VIRTUALIZATION_FEATURE
    winget_installer_url: str = WINGET_INSTALLER_URL
    install_delay: float = INSTALL_DELAY_SECONDS

    @field_validator("packages", "redistributables")
    @classmethod
    def _reject_blank_entries(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for entry in value:
            if not entry.partition("|")[0].strip():
                raise ValueError(f"Invalid package entry: {entry!r}")
        return value

    @field_validator("install_delay")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("install_delay cannot be negative")
        return value

    def package_specs(self) -> list[PackageSpec]:
        """Parse the configured package entries, preserving order."""
        return [PackageSpec.parse(entry) for entry in self.packages]
