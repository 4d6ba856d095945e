"""
Hash record and trust result types.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HashRecord:
    """Artifact file name → expected hex digest, from a trusted hash list."""

    algorithm: str
    digests: dict[str, str] = field(default_factory=dict)

    def expected(self, filename: str) -> str | None:
        return self.digests.get(filename)

    def __contains__(self, filename: object) -> bool:
        return filename in self.digests

    def __len__(self) -> int:
        return len(self.digests)


@dataclass
class TrustResult:
    """Outcome of trying each detached signature in turn."""

    ok: bool
    hash_file: str
    accepted_signature: str | None = None
    attempted: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "hash_file": self.hash_file,
            "accepted_signature": self.accepted_signature,
            "attempted": self.attempted,
        }
