"""
Error taxonomy for the fetch pipeline.

Every error here is fatal for the invocation.  Stages raise them;
the use case layer turns them into a ``FetchResult.error`` and the
CLI exits with status 1.
"""

from __future__ import annotations


class GetCMakeError(Exception):
    """Base class for all pipeline failures."""

    kind = "error"

    def __init__(self, message: str, *, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class InvalidVersion(GetCMakeError):
    """Version argument is not ``MAJOR.MINOR.PATCH[-rcN]``."""

    kind = "invalid_version"


class TooManyArguments(GetCMakeError):
    kind = "too_many_arguments"


class UnknownOption(GetCMakeError):
    kind = "unknown_option"


class UnsupportedRepo(GetCMakeError):
    """Distribution channel name is not one we know how to download from."""

    kind = "unsupported_repo"


class FetchError(GetCMakeError):
    """A transfer failed (network, HTTP status, timeout)."""

    kind = "fetch_error"


class ManifestParseError(GetCMakeError):
    """The release manifest is not a valid ``files-v1`` document.

    ``details`` holds the tail of the raw response for diagnostics.
    """

    kind = "manifest_parse_error"


class NoHashFile(GetCMakeError):
    kind = "no_hash_file"


class UntrustedSignature(GetCMakeError):
    """None of the detached signatures verified against the keyring."""

    kind = "untrusted_signature"


class UnsupportedPlatform(GetCMakeError):
    kind = "unsupported_platform"


class ChecksumMismatch(GetCMakeError):
    kind = "checksum_mismatch"


class ExtractionError(GetCMakeError):
    kind = "extraction_error"
