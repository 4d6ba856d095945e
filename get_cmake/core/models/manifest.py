"""
Release manifest model — the ``files-v1`` JSON document.

Each CMake release publishes ``cmake-<version>-files-v1.json`` listing
every downloadable file with the platforms it applies to, plus the
hash lists and their detached signatures.  The schema is versioned in
the file name; we model the version explicitly and refuse documents
that claim a major version we do not understand.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_NAME = "files"
SCHEMA_MAJOR = 1
SCHEMA_TAG = f"{SCHEMA_NAME}-v{SCHEMA_MAJOR}"

_SCHEMA_TAG_RE = re.compile(r"-files-v(\d+)\.json$")

SHA256 = "SHA-256"
ARCHIVE_CLASS = "archive"


def schema_major_from_name(filename: str) -> int | None:
    """Extract the schema major version from a manifest file name."""
    m = _SCHEMA_TAG_RE.search(filename)
    return int(m.group(1)) if m else None


def bare_file_name(name: str) -> str:
    """Reject anything but a plain file name.

    Manifest names are joined onto the output directory before any
    signature has been checked, so they must not carry a path.
    """
    if name in ("", ".", "..") or "\\" in name or PurePosixPath(name).name != name:
        raise ValueError(f"not a plain file name: {name!r}")
    return name


class _ManifestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class ManifestVersion(_ManifestModel):
    """The ``version`` block describing which release this manifest is for."""

    major: int
    minor: int
    patch: int
    suffix: str = ""
    string: str
    is_dirty: bool = Field(default=False, alias="isDirty")


class HashFile(_ManifestModel):
    """A hash-list file and the detached signatures covering it."""

    algorithm: list[str]
    name: str
    signature: list[str] = Field(default_factory=list)
    deprecated: str | None = None

    @field_validator("name")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        return bare_file_name(value)

    @field_validator("signature")
    @classmethod
    def _plain_signatures(cls, value: list[str]) -> list[str]:
        return [bare_file_name(v) for v in value]

    def supports(self, algorithm: str) -> bool:
        return algorithm in self.algorithm


class FileEntry(_ManifestModel):
    """One downloadable release asset."""

    name: str
    os: list[str] = Field(default_factory=list)
    architecture: list[str] = Field(default_factory=list)
    kind: str = Field(alias="class")
    deprecated: str | None = None

    @field_validator("name")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        return bare_file_name(value)

    def matches(self, os_name: str, arch: str, kind: str = ARCHIVE_CLASS) -> bool:
        return os_name in self.os and arch in self.architecture and self.kind == kind


class ReleaseManifest(_ManifestModel):
    """Parsed ``files-v1`` manifest.  Immutable once fetched."""

    version: ManifestVersion | None = None
    files: list[FileEntry] = Field(default_factory=list)
    hash_files: list[HashFile] = Field(default_factory=list, alias="hashFiles")

    def hash_file_for(self, algorithm: str = SHA256) -> HashFile | None:
        """Return the first hash-list descriptor offering ``algorithm``."""
        for hf in self.hash_files:
            if hf.supports(algorithm):
                return hf
        return None

    def candidates(self, os_name: str, arch: str) -> list[FileEntry]:
        """All archive entries applicable to the given host, in manifest order."""
        return [f for f in self.files if f.matches(os_name, arch)]
