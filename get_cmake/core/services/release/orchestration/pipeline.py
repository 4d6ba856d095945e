"""
L5 Orchestration — The fetch pipeline.

Resolver → Fetcher → Verifier → Selector → Checker → Unpacker.
Strictly forward; any stage raising a GetCMakeError ends the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from get_cmake.core.context import FetchContext
from get_cmake.core.models.hashes import TrustResult
from get_cmake.core.models.manifest import FileEntry
from get_cmake.core.services.release.domain.selection import select_artifact
from get_cmake.core.services.release.execution.integrity import ensure_artifact
from get_cmake.core.services.release.execution.trust import establish_trust
from get_cmake.core.services.release.execution.unpack import bin_dir, unpack_archive
from get_cmake.core.services.release.resolver.manifest_fetch import fetch_manifest
from get_cmake.core.services.release.resolver.version_resolution import ReleaseLocation

logger = logging.getLogger(__name__)


@dataclass
class PipelineOutcome:
    """What a completed run produced."""

    location: ReleaseLocation
    artifact: FileEntry
    archive: Path
    downloaded: bool
    trust: TrustResult
    bin_dir: Path
    warnings: list[str] = field(default_factory=list)


def run_pipeline(location: ReleaseLocation, ctx: FetchContext) -> PipelineOutcome:
    """Run every stage after version resolution.

    Args:
        location: Output of the Version Resolver.
        ctx: The invocation's context; ``output_dir`` is created here.
    """
    ctx.ensure_output_dir()

    manifest, location = fetch_manifest(location, ctx)
    record, trust = establish_trust(manifest, location, ctx)

    artifact = select_artifact(manifest, ctx.host.os_name, ctx.host.arch)
    if artifact.deprecated:
        ctx.warn(
            "The CMake package provides the following deprecation message: "
            f"{artifact.deprecated}"
        )

    archive, downloaded = ensure_artifact(artifact, record, location, ctx)
    unpack_archive(archive, ctx.output_dir, strip_components=1)

    return PipelineOutcome(
        location=location,
        artifact=artifact,
        archive=archive,
        downloaded=downloaded,
        trust=trust,
        bin_dir=bin_dir(ctx.output_dir, ctx.host.os_name),
        warnings=list(ctx.warnings),
    )
