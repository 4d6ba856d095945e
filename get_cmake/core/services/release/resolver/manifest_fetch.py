"""
L2 Resolver — Fetch the release manifest.
"""

from __future__ import annotations

import logging

from get_cmake.adapters.base import Transfer
from get_cmake.core.context import FetchContext
from get_cmake.core.errors import ManifestParseError
from get_cmake.core.models.manifest import ReleaseManifest
from get_cmake.core.models.version import Version
from get_cmake.core.services.release.domain.manifest_parse import parse_manifest
from get_cmake.core.services.release.resolver.version_resolution import ReleaseLocation

logger = logging.getLogger(__name__)


def fetch_manifest(
    location: ReleaseLocation,
    ctx: FetchContext,
) -> tuple[ReleaseManifest, ReleaseLocation]:
    """Download and parse the ``files-v1`` manifest into the output directory.

    When the location has no version yet (the direct channel's
    ``latest`` pointer), the manifest's own ``version.string`` fills it.

    Returns:
        The manifest and the (possibly completed) location.

    Raises:
        FetchError: transfer failure.
        ManifestParseError: invalid content, with the response tail.
    """
    dest = ctx.path(location.manifest_name)
    logger.info("Downloading JSON package descriptions file: %s", location.manifest_name)
    ctx.transfer.download(location.url(location.manifest_name), dest, timeout=ctx.timeout)

    manifest = parse_manifest(dest.read_bytes(), location.manifest_name)
    return manifest, _complete_location(location, manifest)


def peek_manifest(location: ReleaseLocation, transfer: Transfer, *, timeout: int) -> ReleaseLocation:
    """Complete a versionless location without writing anything to disk."""
    if location.version is not None:
        return location
    body = transfer.fetch_bytes(location.url(location.manifest_name), timeout=timeout)
    return _complete_location(location, parse_manifest(body, location.manifest_name))


def _complete_location(location: ReleaseLocation, manifest: ReleaseManifest) -> ReleaseLocation:
    if location.version is not None:
        return location
    if manifest.version is None:
        raise ManifestParseError(
            f"{location.manifest_name} does not say which release it describes"
        )
    location = location.with_version(Version.parse(manifest.version.string))
    logger.info("Latest release on %s: %s", location.repo, location.version)
    return location
