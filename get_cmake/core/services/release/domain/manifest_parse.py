"""
L1 Domain — Manifest parsing and schema check (pure).
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from get_cmake.core.errors import ManifestParseError
from get_cmake.core.models.manifest import (
    SCHEMA_MAJOR,
    SCHEMA_TAG,
    ReleaseManifest,
    schema_major_from_name,
)
from get_cmake.core.services.release.data.constants import MANIFEST_ERROR_TAIL


def _tail(raw: bytes, lines: int = MANIFEST_ERROR_TAIL) -> list[str]:
    return raw.decode("utf-8", errors="replace").splitlines()[-lines:]


def check_schema(filename: str) -> None:
    """Reject manifests whose file name advertises another major schema."""
    major = schema_major_from_name(filename)
    if major is not None and major != SCHEMA_MAJOR:
        raise ManifestParseError(
            f"{filename} uses manifest schema files-v{major}; "
            f"only {SCHEMA_TAG} is supported"
        )


def parse_manifest(raw: bytes, filename: str = "") -> ReleaseManifest:
    """Parse and validate a ``files-v1`` manifest.

    Raises:
        ManifestParseError: with the last lines of the response in
            ``details`` (API errors are short HTML/JSON bodies).
    """
    if filename:
        check_schema(filename)

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(
            f"Release manifest {filename or '(unnamed)'} is not valid JSON: {e}",
            details=_tail(raw),
        ) from e

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Expected a JSON object in release manifest, got {type(data).__name__}",
            details=_tail(raw),
        )

    try:
        return ReleaseManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestParseError(
            f"Release manifest does not match {SCHEMA_TAG}: {e.error_count()} error(s)",
            details=_tail(raw),
        ) from e
