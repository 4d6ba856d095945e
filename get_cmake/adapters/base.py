"""
Adapter base — the contract between the pipeline and external tools.

The pipeline never talks to the network or to gpg directly.  It goes
through these two interfaces so that tests (and mock mode) can swap
in in-memory doubles.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from pathlib import Path

# (bytes_done, bytes_total) — total is 0 when the server sends no length
ProgressCallback = Callable[[int, int], None]


class Transfer(ABC):
    """Synchronous GET transfers.

    Implementations raise :class:`~get_cmake.core.errors.FetchError`
    on any failure.  There is no retry.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'http', 'mock')."""

    @abstractmethod
    def fetch_bytes(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 300,
    ) -> bytes:
        """GET ``url`` and return the body."""

    @abstractmethod
    def download(
        self,
        url: str,
        dest: Path,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 300,
        progress: ProgressCallback | None = None,
    ) -> Path:
        """GET ``url`` into ``dest`` (overwriting) and return ``dest``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class SignatureTool(ABC):
    """Detached-signature verification against a keyring."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'gpg', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be used.  Never raises."""

    @abstractmethod
    def import_keys(self, key_files: Sequence[Path], keyring: Path) -> None:
        """Build a keyring file from ASCII-armored public keys.

        Raises:
            UntrustedSignature: if the keys cannot be imported.
        """

    @abstractmethod
    def verify(
        self,
        signature: Path,
        content: Path,
        *,
        keyring: Path | None = None,
        verbose: bool = False,
    ) -> bool:
        """Check ``signature`` over ``content``.

        ``keyring=None`` means the tool's default keyring.  Output is
        only surfaced when ``verbose``; the return value never depends
        on it.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
