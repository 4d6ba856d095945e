"""
L4 Execution — Hash-list trust verification.

Before any checksum is relied upon, the SHA-256 hash list must carry
a detached signature that verifies against the configured keyring.
Signatures are tried in manifest order and the first good one wins.
"""

from __future__ import annotations

import logging
from pathlib import Path

from get_cmake.core.context import FetchContext
from get_cmake.core.errors import UntrustedSignature
from get_cmake.core.models.hashes import HashRecord, TrustResult
from get_cmake.core.models.manifest import ReleaseManifest
from get_cmake.core.services.release.data.constants import KEYRING_FILENAME, PUBKEY_GLOB
from get_cmake.core.services.release.domain.hash_list import parse_hash_list
from get_cmake.core.services.release.domain.selection import select_hash_file
from get_cmake.core.services.release.resolver.version_resolution import ReleaseLocation

logger = logging.getLogger(__name__)


def trusted_key_files(keys_dir: Path | None) -> list[Path]:
    """ASCII-armored public keys in ``keys_dir``, sorted by name."""
    if keys_dir is None or not keys_dir.is_dir():
        return []
    return sorted(p for p in keys_dir.glob(PUBKEY_GLOB) if p.is_file())


def build_keyring(ctx: FetchContext) -> Path | None:
    """Build the per-invocation keyring, or None for the default keyring.

    The keyring is written under the output directory and only lives
    as long as that directory does.
    """
    keys = trusted_key_files(ctx.trusted_keys_dir)
    if not keys:
        if ctx.trusted_keys_dir is not None:
            logger.info("No %s files in %s; using the default keyring",
                        PUBKEY_GLOB, ctx.trusted_keys_dir)
        return None

    keyring = ctx.path(KEYRING_FILENAME)
    logger.info("Creating local keyring %s for trusted keys in %s",
                keyring, ctx.trusted_keys_dir)
    ctx.signatures.import_keys(keys, keyring)
    return keyring


def check_signatures(
    signatures: list[str],
    hash_path: Path,
    location: ReleaseLocation,
    ctx: FetchContext,
    keyring: Path | None,
) -> TrustResult:
    """Download and try each signature until one verifies."""
    attempted: list[str] = []
    for sig_name in signatures:
        attempted.append(sig_name)
        logger.info("Downloading and checking signature file: %s", sig_name)
        sig_path = ctx.transfer.download(
            location.url(sig_name), ctx.path(sig_name), timeout=ctx.timeout,
        )
        if ctx.signatures.verify(sig_path, hash_path, keyring=keyring, verbose=ctx.verbose):
            logger.info("Signature %s verified %s", sig_name, hash_path.name)
            return TrustResult(
                ok=True,
                hash_file=hash_path.name,
                accepted_signature=sig_name,
                attempted=attempted,
            )
        logger.info("Signature %s did not verify", sig_name)

    return TrustResult(ok=False, hash_file=hash_path.name, attempted=attempted)


def establish_trust(
    manifest: ReleaseManifest,
    location: ReleaseLocation,
    ctx: FetchContext,
) -> tuple[HashRecord, TrustResult]:
    """Fetch the SHA-256 hash list and prove it authentic.

    Returns:
        The parsed hash record and the verification outcome.

    Raises:
        NoHashFile: the manifest has no SHA-256 hash list.
        FetchError: a transfer failed.
        UntrustedSignature: no signature verified.  Not retryable;
            a new public key probably needs importing.
            Also raised when the signature tool is not installed.
    """
    if not ctx.signatures.is_available():
        raise UntrustedSignature(
            f"Signature tool '{ctx.signatures.name}' is not available",
            details=["Install GnuPG so release signatures can be checked."],
        )

    hash_file = select_hash_file(manifest)
    if hash_file.deprecated:
        ctx.warn(
            "The CMake hash file provides the following deprecation message: "
            f"{hash_file.deprecated}"
        )

    logger.info("Downloading hash file: %s", hash_file.name)
    hash_path = ctx.transfer.download(
        location.url(hash_file.name), ctx.path(hash_file.name), timeout=ctx.timeout,
    )

    keyring = build_keyring(ctx)
    result = check_signatures(hash_file.signature, hash_path, location, ctx, keyring)
    if not result.ok:
        raise UntrustedSignature(
            "Unable to verify hashes with provided signature(s).",
            details=[
                "Check if a new public key is now being used.",
                "This may require updating your project with new public key files.",
            ],
        )

    record = parse_hash_list(hash_path.read_text(encoding="utf-8", errors="replace"))
    return record, result
