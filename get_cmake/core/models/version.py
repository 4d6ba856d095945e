"""
Version model — CMake release identifiers.

A release is ``MAJOR.MINOR.PATCH`` with an optional ``-rcN`` suffix.
Release candidates sort *below* the final release of the same
numeric triple, which plain tuple or string sorting gets wrong.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from get_cmake.core.errors import InvalidVersion

VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)(?:-rc([0-9]+))?")


@total_ordering
@dataclass(frozen=True)
class Version:
    """A concrete CMake release version."""

    major: int
    minor: int
    patch: int
    rc: int | None = None

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``text`` or raise :class:`InvalidVersion`."""
        m = VERSION_RE.fullmatch(text) if text else None
        if not m:
            raise InvalidVersion(
                f"Invalid version '{text}': expected MAJOR.MINOR.PATCH "
                "or MAJOR.MINOR.PATCH-rcN"
            )
        major, minor, patch, rc = m.groups()
        return cls(int(major), int(minor), int(patch), int(rc) if rc is not None else None)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return bool(text) and VERSION_RE.fullmatch(text) is not None

    @property
    def is_release_candidate(self) -> bool:
        return self.rc is not None

    @property
    def feature_line(self) -> str:
        """``MAJOR.MINOR`` — the directory key used by cmake.org/files."""
        return f"{self.major}.{self.minor}"

    def sort_key(self) -> tuple[int, int, int, int, int]:
        # Finals get (1, 0) so they outrank every (0, rc) of the same triple.
        if self.rc is None:
            return (self.major, self.minor, self.patch, 1, 0)
        return (self.major, self.minor, self.patch, 0, self.rc)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-rc{self.rc}" if self.rc is not None else base
