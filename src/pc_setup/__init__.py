"""Provision a freshly installed Windows machine with winget."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from pc_setup.protocols import (
    AuditLog,
    CommandRunner,
    Downloader,
    PackageInstaller,
    PrivilegeChecker,
)

__all__ = [
    "__version__",
    "AuditLog",
    "CommandRunner",
    "Downloader",
    "PackageInstaller",
    "PrivilegeChecker",
]
