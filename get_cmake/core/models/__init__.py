"""
Domain models for the fetch pipeline.

    from get_cmake.core.models import Version, ReleaseManifest, HashRecord
"""

from get_cmake.core.models.hashes import HashRecord, TrustResult
from get_cmake.core.models.manifest import (
    FileEntry,
    HashFile,
    ManifestVersion,
    ReleaseManifest,
)
from get_cmake.core.models.version import Version

__all__ = [
    # manifest.py
    "FileEntry",
    "HashFile",
    # hashes.py
    "HashRecord",
    "ManifestVersion",
    "ReleaseManifest",
    "TrustResult",
    # version.py
    "Version",
]
