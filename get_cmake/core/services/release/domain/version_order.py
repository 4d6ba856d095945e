"""
L1 Domain — Version parsing and "latest" selection (pure).

No I/O, no subprocess.
"""

from __future__ import annotations

from collections.abc import Iterable

from get_cmake.core.errors import FetchError
from get_cmake.core.models.version import Version


def version_from_tag(tag: str) -> Version | None:
    """Turn a release tag like ``v3.20.0`` into a Version, or None."""
    text = tag[1:] if tag.startswith("v") else tag
    if not Version.is_valid(text):
        return None
    return Version.parse(text)


def latest_version(versions: Iterable[Version]) -> Version | None:
    """Highest version under release ordering (rc < final)."""
    return max(versions, default=None)


def select_latest_release(releases: list[dict]) -> Version:
    """Pick the newest published release from a GitHub releases listing.

    Drafts are discarded, as are tags that are not CMake versions.
    Pre-releases (``-rcN``) take part but lose to their own final.

    Args:
        releases: Items of ``GET /repos/{owner}/{repo}/releases``.

    Raises:
        FetchError: when nothing usable is listed.
    """
    candidates: list[Version] = []
    for release in releases:
        if not isinstance(release, dict) or release.get("draft"):
            continue
        version = version_from_tag(str(release.get("tag_name", "")))
        if version is not None:
            candidates.append(version)

    latest = latest_version(candidates)
    if latest is None:
        raise FetchError("No published CMake releases found in the release listing")
    return latest
