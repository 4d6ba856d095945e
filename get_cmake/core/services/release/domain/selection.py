"""
L1 Domain — Hash-file and artifact selection (pure).

No I/O, no subprocess.
"""

from __future__ import annotations

import logging

from get_cmake.core.errors import NoHashFile, UnsupportedPlatform
from get_cmake.core.models.manifest import SHA256, FileEntry, HashFile, ReleaseManifest

logger = logging.getLogger(__name__)


def select_hash_file(manifest: ReleaseManifest, algorithm: str = SHA256) -> HashFile:
    """The hash-list descriptor covering ``algorithm``.

    Raises:
        NoHashFile: if the manifest lists none.
    """
    hash_file = manifest.hash_file_for(algorithm)
    if hash_file is None:
        raise NoHashFile(f"Release manifest lists no {algorithm} hash file")
    return hash_file


def select_artifact(manifest: ReleaseManifest, os_name: str, arch: str) -> FileEntry:
    """The archive for this host.

    When several entries qualify the first one in manifest order wins
    and the rest are logged, so the choice is visible.

    Raises:
        UnsupportedPlatform: if no archive matches ``os_name``/``arch``.
    """
    matches = manifest.candidates(os_name, arch)
    if not matches:
        raise UnsupportedPlatform(
            f"No CMake archive available for platform {os_name}/{arch}",
            details=sorted({f"{'/'.join(f.os)} {'/'.join(f.architecture)}"
                            for f in manifest.files if f.kind == "archive"}),
        )
    if len(matches) > 1:
        logger.warning(
            "Several archives match %s/%s; using %s (ignoring %s)",
            os_name, arch, matches[0].name, ", ".join(m.name for m in matches[1:]),
        )
    return matches[0]
