"""
L1 Domain — Hash-list parsing (pure).

CMake publishes ``cmake-<version>-SHA-256.txt`` in ``sha256sum``
format: ``<hex digest><space><space or *><file name>`` per line.
"""

from __future__ import annotations

import re

from get_cmake.core.models.hashes import HashRecord

_LINE_RE = re.compile(r"^([0-9a-fA-F]+)\s[ *]?(.+)$")


def parse_hash_list(text: str, algorithm: str = "SHA-256") -> HashRecord:
    """Parse a checksum list into a :class:`HashRecord`.

    Blank lines and ``#`` comments are skipped; malformed lines are
    ignored rather than fatal, since only the artifact's own line
    matters and its absence is caught later.
    """
    digests: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _LINE_RE.match(line)
        if not m:
            continue
        digest, name = m.groups()
        digests[name.strip()] = digest.lower()
    return HashRecord(algorithm=algorithm, digests=digests)
