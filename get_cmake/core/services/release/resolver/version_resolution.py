"""
L2 Resolver — Which release, and where to download it from.

Turns the user's version request into a :class:`ReleaseLocation`.
Explicit versions are validated before any network activity.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace

from get_cmake.adapters.base import Transfer
from get_cmake.core.errors import FetchError, UnsupportedRepo
from get_cmake.core.models.version import Version
from get_cmake.core.services.release.data.constants import (
    GITHUB_API_HEADERS,
    GITHUB_DOWNLOAD_BASE,
    GITHUB_PAGE_SIZE,
    GITHUB_RELEASES_API,
    GITHUB_TOKEN_ENV,
    KITWARE_DOWNLOAD_BASE,
    KITWARE_LATEST_BASE,
    LATEST,
    MANIFEST_NAME,
    PRODUCT,
    REPO_GITHUB,
    REPO_KITWARE,
    SUPPORTED_REPOS,
    TRANSFER_TIMEOUT,
)
from get_cmake.core.services.release.domain.version_order import select_latest_release

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseLocation:
    """Where a release's files live.

    ``version`` is None only for the direct channel's ``latest``
    pointer, until the manifest says which release it is.
    """

    repo: str
    base_url: str
    manifest_name: str
    version: Version | None = None

    def url(self, filename: str) -> str:
        return f"{self.base_url}/{filename}"

    def with_version(self, version: Version) -> ReleaseLocation:
        return replace(self, version=version)

    def to_dict(self) -> dict:
        return {
            "repo": self.repo,
            "version": str(self.version) if self.version else None,
            "base_url": self.base_url,
            "manifest": self.url(self.manifest_name),
        }


def check_repo(repo: str) -> str:
    """Validate a channel name.

    Raises:
        UnsupportedRepo: for anything but github / kitware.
    """
    if repo not in SUPPORTED_REPOS:
        raise UnsupportedRepo(
            f"Unsupported repo '{repo}'. Choose one of: {', '.join(SUPPORTED_REPOS)}"
        )
    return repo


def parse_request(requested: str | None) -> Version | None:
    """``None``/``"latest"`` → None, otherwise a validated Version.

    Raises:
        InvalidVersion: for anything not ``MAJOR.MINOR.PATCH[-rcN]``.
    """
    if requested is None or requested == LATEST:
        return None
    return Version.parse(requested)


def github_api_headers(env: dict[str, str] | None = None) -> dict[str, str]:
    """Headers for api.github.com, with a token when one is configured."""
    env = os.environ if env is None else env
    headers = dict(GITHUB_API_HEADERS)
    token = env.get(GITHUB_TOKEN_ENV, "")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def fetch_latest_github(transfer: Transfer, *, timeout: int = TRANSFER_TIMEOUT) -> Version:
    """Newest non-draft release according to the GitHub releases API."""
    url = f"{GITHUB_RELEASES_API}?per_page={GITHUB_PAGE_SIZE}"
    body = transfer.fetch_bytes(url, headers=github_api_headers(), timeout=timeout)
    try:
        releases = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FetchError(f"GitHub release listing is not valid JSON: {e}") from e
    if not isinstance(releases, list):
        message = releases.get("message", "") if isinstance(releases, dict) else ""
        raise FetchError(f"Unexpected GitHub release listing{': ' + message if message else ''}")

    version = select_latest_release(releases)
    logger.info("Latest release on GitHub: %s", version)
    return version


def location_for(version: Version, repo: str) -> ReleaseLocation:
    """Download base URL and manifest name for a concrete version."""
    if repo == REPO_GITHUB:
        base = GITHUB_DOWNLOAD_BASE.format(version=version)
    else:
        base = KITWARE_DOWNLOAD_BASE.format(feature_line=version.feature_line)
    return ReleaseLocation(
        repo=repo,
        base_url=base,
        manifest_name=MANIFEST_NAME.format(product=PRODUCT, version=version),
        version=version,
    )


def resolve_release(
    requested: str | None,
    repo: str,
    transfer: Transfer,
    *,
    timeout: int = TRANSFER_TIMEOUT,
) -> ReleaseLocation:
    """Resolve a version request against a distribution channel.

    Args:
        requested: ``"3.20.0"``, ``"3.21.0-rc2"``, ``"latest"`` or None.
        repo: ``"github"`` or ``"kitware"``.
        transfer: Used only for ``latest`` on github.

    Raises:
        UnsupportedRepo, InvalidVersion: before any network call.
        FetchError: if the release listing cannot be read.
    """
    check_repo(repo)
    version = parse_request(requested)

    if version is None:
        if repo == REPO_KITWARE:
            # cmake.org's own pointer; the manifest names the version.
            return ReleaseLocation(
                repo=repo,
                base_url=KITWARE_LATEST_BASE,
                manifest_name=MANIFEST_NAME.format(product=PRODUCT, version=LATEST),
            )
        version = fetch_latest_github(transfer, timeout=timeout)

    return location_for(version, repo)
