"""
Fetch use case — resolve, download, verify and unpack one release.

Builds the FetchContext from settings and CLI overrides, runs the
pipeline, and folds any pipeline error into the result so callers
only ever inspect ``result.error``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from get_cmake.adapters.base import ProgressCallback, SignatureTool, Transfer
from get_cmake.adapters.gpg import GpgSignatureTool
from get_cmake.adapters.http import HttpTransfer
from get_cmake.core.config.loader import ConfigError, load_settings
from get_cmake.core.context import FetchContext
from get_cmake.core.errors import GetCMakeError
from get_cmake.core.models.hashes import TrustResult
from get_cmake.core.services.release.data.constants import LATEST, PRODUCT
from get_cmake.core.services.release.detection.host import HostPlatform, detect_host
from get_cmake.core.services.release.orchestration.pipeline import run_pipeline
from get_cmake.core.services.release.resolver.manifest_fetch import peek_manifest
from get_cmake.core.services.release.resolver.version_resolution import (
    ReleaseLocation,
    resolve_release,
)

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Result of a fetch."""

    requested: str
    repo: str = ""
    version: str | None = None
    output_dir: Path | None = None
    archive: Path | None = None
    bin_dir: Path | None = None
    downloaded: bool = False
    signature: str | None = None
    trust: TrustResult | None = None
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None
    error_details: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def fail(self, exc: Exception, kind: str) -> FetchResult:
        self.error = str(exc)
        self.error_kind = kind
        self.error_details = list(getattr(exc, "details", []))
        return self

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "requested": self.requested,
            "repo": self.repo,
            "version": self.version,
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "archive": str(self.archive) if self.archive else None,
            "bin_dir": str(self.bin_dir) if self.bin_dir else None,
            "downloaded": self.downloaded,
            "signature": self.signature,
            "trust": self.trust.to_dict() if self.trust else None,
            "warnings": self.warnings,
            "error": self.error,
            "error_kind": self.error_kind,
            "error_details": self.error_details,
        }


@dataclass
class ResolveResult:
    """Result of resolving a version request without downloading."""

    requested: str
    location: ReleaseLocation | None = None
    error: str | None = None
    error_kind: str | None = None

    def to_dict(self) -> dict:
        data: dict = {"requested": self.requested, "error": self.error}
        if self.location is not None:
            data.update(self.location.to_dict())
        if self.error_kind:
            data["error_kind"] = self.error_kind
        return data


def default_output_dir(location: ReleaseLocation, base: Path | None = None) -> Path:
    """``./cmake-<version>`` (or ``./cmake-latest`` before the version is known)."""
    name = f"{PRODUCT}-{location.version or LATEST}"
    return (base or Path.cwd()) / name


def fetch_release(
    requested: str = LATEST,
    *,
    repo: str | None = None,
    output_dir: Path | None = None,
    trusted_keys_dir: Path | None = None,
    config_path: Path | None = None,
    verbose: bool = False,
    progress: ProgressCallback | None = None,
    transfer: Transfer | None = None,
    signatures: SignatureTool | None = None,
    host: HostPlatform | None = None,
) -> FetchResult:
    """Download, verify and unpack a CMake release.

    Args:
        requested: Version string or ``"latest"``.
        repo: Channel override; defaults to the config file's, then github.
        output_dir: Where everything goes; default ``./cmake-<version>``.
        trusted_keys_dir: Directory of ``*.asc`` public keys.
        config_path: Explicit get-cmake.yml.
        verbose: Surface signature tool output.
        progress: Transfer progress callback for the archive download.
        transfer, signatures, host: Overrides for tests and embedding.

    Returns:
        FetchResult; ``result.error`` is set on any failure.
    """
    result = FetchResult(requested=requested)

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        return result.fail(e, "config_error")

    result.repo = repo or settings.repo
    transfer = transfer or HttpTransfer()
    signatures = signatures or GpgSignatureTool()
    ctx: FetchContext | None = None

    try:
        location = resolve_release(requested, result.repo, transfer, timeout=settings.timeout)
        host = host or detect_host()
        logger.info("Host platform: %s", host)

        ctx = FetchContext(
            output_dir=(output_dir or settings.output_dir or default_output_dir(location)).resolve(),
            host=host,
            transfer=transfer,
            signatures=signatures,
            repo=result.repo,
            trusted_keys_dir=trusted_keys_dir or settings.trusted_keys_dir,
            timeout=settings.timeout,
            verbose=verbose,
            progress=progress,
        )
        result.output_dir = ctx.output_dir

        outcome = run_pipeline(location, ctx)
    except GetCMakeError as e:
        if ctx is not None:
            result.warnings = list(ctx.warnings)
        logger.debug("Fetch failed", exc_info=True)
        return result.fail(e, e.kind)

    result.version = str(outcome.location.version) if outcome.location.version else None
    result.archive = outcome.archive
    result.bin_dir = outcome.bin_dir
    result.downloaded = outcome.downloaded
    result.signature = outcome.trust.accepted_signature
    result.trust = outcome.trust
    result.warnings = outcome.warnings
    return result


def resolve_version(
    requested: str = LATEST,
    *,
    repo: str | None = None,
    config_path: Path | None = None,
    transfer: Transfer | None = None,
) -> ResolveResult:
    """Resolve a version request to a concrete release and its URLs."""
    result = ResolveResult(requested=requested)

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        result.error, result.error_kind = str(e), "config_error"
        return result

    transfer = transfer or HttpTransfer()
    try:
        location = resolve_release(requested, repo or settings.repo, transfer,
                                   timeout=settings.timeout)
        result.location = peek_manifest(location, transfer, timeout=settings.timeout)
    except GetCMakeError as e:
        result.error, result.error_kind = str(e), e.kind
    return result
