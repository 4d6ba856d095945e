"""
L4 Execution — Archive extraction.

Behaves like ``tar zxf <archive> --strip-components 1``: the release's
top-level directory is dropped so its contents land directly in the
output directory.
"""

from __future__ import annotations

import logging
import tarfile
import zlib
from pathlib import Path, PurePosixPath

from get_cmake.core.errors import ExtractionError
from get_cmake.core.services.release.data.constants import BIN_SUBPATHS, DEFAULT_BIN_SUBPATH

logger = logging.getLogger(__name__)


def _strip(name: str, count: int) -> str | None:
    """Drop ``count`` leading components; None if nothing remains."""
    parts = [p for p in PurePosixPath(name).parts if p not in ("", ".")]
    if parts and parts[0] == "/":
        raise ExtractionError(f"Refusing absolute archive entry: {name}")
    if ".." in parts:
        raise ExtractionError(f"Refusing archive entry outside the output directory: {name}")
    rest = parts[count:]
    return "/".join(rest) if rest else None


def _stripped_members(tf: tarfile.TarFile, count: int) -> list[tarfile.TarInfo]:
    members: list[tarfile.TarInfo] = []
    for member in tf.getmembers():
        new_name = _strip(member.name, count)
        if new_name is None:
            continue
        member.name = new_name
        if member.islnk():
            link = _strip(member.linkname, count)
            if link is None:
                continue
            member.linkname = link
        members.append(member)
    return members


def unpack_archive(archive: Path, dest: Path, strip_components: int = 1) -> int:
    """Extract a ``.tar.gz`` into ``dest``, stripping leading components.

    Returns:
        Number of entries written.

    Raises:
        ExtractionError: corrupt or unsupported archive, unsafe entry,
            or a filesystem error.
    """
    logger.info("Extracting package to %s", dest)
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tf:
            members = _stripped_members(tf, strip_components)
            tf.extractall(dest, members=members, filter="data")
    except ExtractionError:
        raise
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive.name}: {e}") from e

    logger.debug("Extracted %d entries from %s", len(members), archive.name)
    return len(members)


def bin_dir(output_dir: Path, os_name: str) -> Path:
    """Directory to prepend to PATH for an unpacked release.

    macOS releases are an app bundle, so the tools sit deeper.
    """
    return output_dir / BIN_SUBPATHS.get(os_name, DEFAULT_BIN_SUBPATH)
