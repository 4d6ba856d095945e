"""
L4 Execution — Artifact download and checksum verification.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from get_cmake.core.context import FetchContext
from get_cmake.core.errors import ChecksumMismatch
from get_cmake.core.models.hashes import HashRecord
from get_cmake.core.models.manifest import FileEntry
from get_cmake.core.services.release.resolver.version_resolution import ReleaseLocation

logger = logging.getLogger(__name__)


def sha256_of(path: Path) -> str:
    """Hex SHA-256 of a file, read in chunks."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def matches_record(path: Path, record: HashRecord) -> bool:
    """Whether ``path`` exists and its digest is the one listed for its name."""
    expected = record.expected(path.name)
    if expected is None or not path.is_file():
        return False
    return sha256_of(path) == expected


def verify_artifact(path: Path, record: HashRecord) -> str:
    """Check a downloaded artifact against the trusted hash record.

    Returns:
        The verified digest.

    Raises:
        ChecksumMismatch: digest differs, or the file is not listed.
    """
    expected = record.expected(path.name)
    if expected is None:
        raise ChecksumMismatch(f"{path.name} is not listed in the trusted hash file")

    actual = sha256_of(path)
    if actual != expected:
        raise ChecksumMismatch(
            f"Checksum mismatch for {path.name}",
            details=[f"Expected: {expected}", f"Got:      {actual}"],
        )
    return actual


def ensure_artifact(
    artifact: FileEntry,
    record: HashRecord,
    location: ReleaseLocation,
    ctx: FetchContext,
) -> tuple[Path, bool]:
    """Make a verified copy of ``artifact`` present in the output directory.

    An existing file whose checksum already matches is reused without
    downloading.

    Returns:
        ``(path, downloaded)``.
    """
    dest = ctx.path(artifact.name)
    if matches_record(dest, record):
        logger.info("Reusing previously downloaded %s (checksum matches)", artifact.name)
        return dest, False

    logger.info("Downloading package file: %s", artifact.name)
    ctx.transfer.download(
        location.url(artifact.name), dest, timeout=ctx.timeout, progress=ctx.progress,
    )

    logger.info("Verifying downloaded file")
    verify_artifact(dest, record)
    return dest, True
