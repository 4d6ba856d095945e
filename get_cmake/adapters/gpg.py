"""
GnuPG signature adapter — shells out to ``gpg --batch``.

Keyrings built here are exported with ``--import-options import-export``
so nothing is written to the user's own GnuPG home.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from get_cmake.adapters.base import SignatureTool
from get_cmake.core.errors import UntrustedSignature
from get_cmake.core.services.release.execution.subprocess_runner import _run_subprocess

logger = logging.getLogger(__name__)


class GpgSignatureTool(SignatureTool):
    """Verify detached signatures with the ``gpg`` CLI."""

    def __init__(self, executable: str = "gpg", timeout: int = 120):
        self._executable = executable
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "gpg"

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def import_keys(self, key_files: Sequence[Path], keyring: Path) -> None:
        cmd = [
            self._executable, "--batch",
            "--trust-model", "always",
            "--import-options", "import-export",
            "--import", *[str(k) for k in key_files],
        ]
        result = _run_subprocess(cmd, timeout=self._timeout, stdout_path=keyring)
        if not result["ok"]:
            keyring.unlink(missing_ok=True)
            raise UntrustedSignature(
                f"Could not build keyring {keyring}: {result['error']}",
                details=result.get("stderr", "").splitlines()[-5:],
            )

    def verify_command(self, signature: Path, content: Path, keyring: Path | None) -> list[str]:
        cmd = [self._executable, "--batch"]
        if keyring is not None:
            # Trust only what the caller imported, not the user's keys.
            cmd += ["--no-default-keyring", "--keyring", str(keyring.resolve())]
        cmd += ["--verify", str(signature), str(content)]
        return cmd

    def verify(
        self,
        signature: Path,
        content: Path,
        *,
        keyring: Path | None = None,
        verbose: bool = False,
    ) -> bool:
        result = _run_subprocess(
            self.verify_command(signature, content, keyring),
            timeout=self._timeout,
        )
        if verbose:
            # gpg reports on stderr, success or not
            for line in result.get("stderr", "").splitlines():
                logger.info("gpg: %s", line)
        if not result["ok"]:
            logger.debug("gpg rejected %s: %s", signature.name, result["error"])
        return bool(result["ok"])
