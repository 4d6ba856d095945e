"""
Mock adapters — in-memory test doubles for transfers and signatures.

``MockTransfer`` serves canned bodies per URL and records every call.
``MockSignatureTool`` implements a toy signature scheme: a signature
is ``<key-id>:<sha256 of content>`` and a keyring is a list of key ids,
which is enough to exercise every trust decision without gpg.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from pathlib import Path

from get_cmake.adapters.base import ProgressCallback, Transfer, SignatureTool
from get_cmake.core.errors import FetchError, UntrustedSignature


class MockTransfer(Transfer):
    """Serve registered URLs from memory.  Unknown URLs fail like a 404."""

    def __init__(self, responses: dict[str, bytes] | None = None):
        self._responses: dict[str, bytes] = dict(responses or {})
        self._call_log: list[str] = []
        self._header_log: list[dict[str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[str]:
        """Every URL requested, in order."""
        return self._call_log

    @property
    def header_log(self) -> list[dict[str, str]]:
        return self._header_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def add(self, url: str, body: bytes | str) -> None:
        self._responses[url] = body.encode() if isinstance(body, str) else body

    def _get(self, url: str, headers: dict[str, str] | None) -> bytes:
        self._call_log.append(url)
        self._header_log.append(dict(headers or {}))
        if url not in self._responses:
            raise FetchError(f"GET {url} failed: HTTP 404 Not Found")
        return self._responses[url]

    def fetch_bytes(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 300,
    ) -> bytes:
        return self._get(url, headers)

    def download(
        self,
        url: str,
        dest: Path,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 300,
        progress: ProgressCallback | None = None,
    ) -> Path:
        body = self._get(url, headers)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(body)
        if progress is not None:
            progress(len(body), len(body))
        return dest


class MockSignatureTool(SignatureTool):
    """Toy signature checker keyed on key ids.

    Args:
        default_keys: Key ids trusted when no keyring is given.
    """

    def __init__(self, default_keys: Sequence[str] = (), available: bool = True):
        self._default_keys = set(default_keys)
        self._available = available
        self.verify_log: list[tuple[str, str | None]] = []

    @property
    def name(self) -> str:
        return "mock"

    def is_available(self) -> bool:
        return self._available

    @staticmethod
    def sign(key_id: str, content: bytes) -> bytes:
        """Produce a detached signature over ``content``."""
        return f"{key_id}:{hashlib.sha256(content).hexdigest()}\n".encode()

    def import_keys(self, key_files: Sequence[Path], keyring: Path) -> None:
        ids: list[str] = []
        for key_file in key_files:
            text = key_file.read_text(encoding="utf-8").strip()
            if not text:
                raise UntrustedSignature(f"Could not build keyring {keyring}: empty key {key_file}")
            ids.extend(line.strip() for line in text.splitlines() if line.strip())
        keyring.write_text("\n".join(ids) + "\n", encoding="utf-8")

    def verify(
        self,
        signature: Path,
        content: Path,
        *,
        keyring: Path | None = None,
        verbose: bool = False,
    ) -> bool:
        self.verify_log.append((signature.name, str(keyring) if keyring else None))
        if keyring is not None:
            trusted = set(keyring.read_text(encoding="utf-8").split())
        else:
            trusted = self._default_keys

        key_id, _, digest = signature.read_text(encoding="utf-8").strip().partition(":")
        actual = hashlib.sha256(content.read_bytes()).hexdigest()
        return key_id in trusted and digest == actual
