"""Administrator privilege detection."""

from __future__ import annotations

import ctypes
import logging
import os
import sys

logger = logging.getLogger(__name__)


def has_elevated_privileges() -> bool:
    """Check whether the current process runs with administrator rights.

    Uses ``IsUserAnAdmin`` on Windows and the effective uid elsewhere. A
    failing query counts as not elevated.
    """
    try:
        if sys.platform == "win32":
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        return os.geteuid() == 0
    except (AttributeError, OSError) as e:
        logger.debug("Privilege query failed: %s", e)
        return False


class OsPrivilegeChecker:
    """Production privilege checker. Satisfies the PrivilegeChecker protocol."""

    def is_elevated(self) -> bool:
        return has_elevated_privileges()
