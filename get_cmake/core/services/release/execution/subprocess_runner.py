"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for external
tools (gpg).  Logging and error capture are centralised here.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _run_subprocess(
    cmd: list[str],
    *,
    timeout: int = 120,
    stdout_path: Path | None = None,
) -> dict[str, Any]:
    """Run an external command and capture its output.

    Args:
        cmd: Command list for ``subprocess.run()``.
        timeout: Seconds before ``TimeoutExpired``.
        stdout_path: Write binary stdout to this file instead of
            capturing it (used for keyring exports).

    Returns:
        ``{"ok": True, "stdout": "...", "stderr": "...", "elapsed_ms": N}``
        on success, ``{"ok": False, "error": "...", ...}`` on failure.
    """
    logger.debug("Running: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        if stdout_path is not None:
            with open(stdout_path, "wb") as out:
                result = subprocess.run(
                    cmd,
                    stdout=out,
                    stderr=subprocess.PIPE,
                    timeout=timeout,
                )
            stdout = ""
            stderr = result.stderr.decode("utf-8", errors="replace")
        else:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
            stdout = result.stdout or ""
            stderr = result.stderr or ""
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode == 0:
            return {
                "ok": True,
                "stdout": stdout[-2000:],
                "stderr": stderr[-2000:],
                "elapsed_ms": elapsed_ms,
            }

        return {
            "ok": False,
            "error": f"Command failed (exit {result.returncode})",
            "returncode": result.returncode,
            "stderr": stderr[-2000:],
            "stdout": stdout[-2000:],
            "elapsed_ms": elapsed_ms,
        }

    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "error": str(e)}
