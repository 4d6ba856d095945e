"""
Fetch context — everything one invocation of the pipeline works with.

Built once by the use case and passed explicitly to every stage:
the output directory, the host platform, the channel, verbosity, and
the adapters for transfers and signatures.  No stage looks these up
from the environment on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from get_cmake.core.services.release.data.constants import DEFAULT_REPO, TRANSFER_TIMEOUT
from get_cmake.core.services.release.detection.host import HostPlatform

if TYPE_CHECKING:
    from get_cmake.adapters.base import ProgressCallback, SignatureTool, Transfer

logger = logging.getLogger(__name__)


@dataclass
class FetchContext:
    """Per-invocation state shared by the pipeline stages."""

    output_dir: Path
    host: HostPlatform
    transfer: Transfer
    signatures: SignatureTool
    repo: str = DEFAULT_REPO
    trusted_keys_dir: Path | None = None
    timeout: int = TRANSFER_TIMEOUT
    verbose: bool = False
    progress: ProgressCallback | None = None
    warnings: list[str] = field(default_factory=list)

    def path(self, filename: str) -> Path:
        """Location of a downloaded or generated file."""
        return self.output_dir / filename

    def warn(self, message: str) -> None:
        """Record a non-fatal notice (e.g. a deprecation message).

        The CLI prints collected notices itself, so they are only logged
        at INFO here.
        """
        logger.info("Notice: %s", message)
        self.warnings.append(message)

    def ensure_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir
