"""HTTP download for the package manager self-install."""

from __future__ import annotations

import logging
import shutil
import ssl
import urllib.request
from pathlib import Path

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    """Error while downloading a file."""

    pass


class UrlDownloader:
    """Downloads files with urllib. Satisfies the Downloader protocol."""

    def __init__(self, timeout: float = 60) -> None:
        self.timeout = timeout

    def download(self, url: str, destination: Path) -> Path:
        """Download ``url`` into ``destination``, following redirects.

        Raises:
            DownloadError: On any network or filesystem failure.
        """
        logger.debug("Downloading %s to %s", url, destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            request = urllib.request.Request(url, headers={"User-Agent": "pc-setup"})
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=ssl.create_default_context()
            ) as response, destination.open("wb") as fh:
                shutil.copyfileobj(response, fh)
        except (OSError, ValueError) as e:
            raise DownloadError(f"Download of {url} failed: {e}") from e
        return destination
