"""
HTTP transfer adapter — plain ``urllib.request`` GETs.

Redirects are followed (GitHub release assets redirect to a CDN).
Every failure becomes a ``FetchError``; nothing is retried.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path

from get_cmake import __version__
from get_cmake.adapters.base import ProgressCallback, Transfer
from get_cmake.core.errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = f"get-cmake/{__version__}"
_CHUNK = 64 * 1024


class HttpTransfer(Transfer):
    """Synchronous downloads over HTTP(S)."""

    def __init__(self, user_agent: str = USER_AGENT):
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return "http"

    def _request(self, url: str, headers: dict[str, str] | None) -> urllib.request.Request:
        merged = {"User-Agent": self._user_agent}
        if headers:
            merged.update(headers)
        return urllib.request.Request(url, headers=merged)

    def fetch_bytes(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 300,
    ) -> bytes:
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(self._request(url, headers), timeout=timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as e:
            raise FetchError(f"GET {url} failed: HTTP {e.code} {e.reason}") from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise FetchError(f"GET {url} failed: {e}") from e

    def download(
        self,
        url: str,
        dest: Path,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 300,
        progress: ProgressCallback | None = None,
    ) -> Path:
        logger.debug("Downloading %s -> %s", url, dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            with urllib.request.urlopen(self._request(url, headers), timeout=timeout) as resp:
                total = int(resp.headers.get("Content-Length", 0) or 0)
                downloaded = 0
                with open(dest, "wb") as f:
                    while True:
                        chunk = resp.read(_CHUNK)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress is not None:
                            progress(downloaded, total)
        except urllib.error.HTTPError as e:
            dest.unlink(missing_ok=True)
            raise FetchError(f"Download of {url} failed: HTTP {e.code} {e.reason}") from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            dest.unlink(missing_ok=True)
            raise FetchError(f"Download of {url} failed: {e}") from e

        logger.info("Downloaded %s (%d bytes)", dest.name, downloaded)
        return dest
