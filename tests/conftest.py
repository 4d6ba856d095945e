"""
Shared test fixtures — fake CMake releases served from memory.
"""

from __future__ import annotations

import hashlib
import io
import json
import tarfile
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from get_cmake.adapters.mock import MockSignatureTool, MockTransfer
from get_cmake.core.context import FetchContext
from get_cmake.core.services.release.detection.host import HostPlatform

TRUSTED_KEY = "kitware-release-key"
OLD_KEY = "retired-release-key"

LINUX_X86 = HostPlatform(os_name="linux", arch="x86_64")


def make_tarball(top: str, files: dict[str, bytes]) -> bytes:
    """A gzip tarball with every file under a single ``top`` directory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        info = tarfile.TarInfo(top)
        info.type = tarfile.DIRTYPE
        info.mode = 0o755
        tf.addfile(info)
        for rel, data in files.items():
            info = tarfile.TarInfo(f"{top}/{rel}")
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@dataclass
class FakeRelease:
    """A release published under ``base_url`` on a MockTransfer."""

    version: str
    base_url: str
    transfer: MockTransfer
    signatures: MockSignatureTool
    manifest: dict
    archive_name: str
    archive_bytes: bytes
    hash_name: str
    signature_names: list[str] = field(default_factory=list)

    @property
    def manifest_name(self) -> str:
        return f"cmake-{self.version}-files-v1.json"

    def url(self, name: str) -> str:
        return f"{self.base_url}/{name}"


def build_fake_release(
    version: str = "3.20.0",
    *,
    base_url: str | None = None,
    signing_keys: tuple[str, ...] = (OLD_KEY, TRUSTED_KEY),
    default_keys: tuple[str, ...] = (TRUSTED_KEY,),
    hash_deprecated: str | None = None,
    artifact_deprecated: str | None = None,
    listed_digest: str | None = None,
    manifest_name: str | None = None,
) -> FakeRelease:
    """Publish a linux/x86_64 + macOS release on a fresh MockTransfer.

    ``signing_keys`` gives one detached signature per key, in order.
    ``listed_digest`` overrides the hash listed for the linux archive.
    """
    base_url = base_url or f"https://github.com/Kitware/CMake/releases/download/v{version}"
    top = f"cmake-{version}-linux-x86_64"
    archive_name = f"{top}.tar.gz"
    archive = make_tarball(top, {
        "bin/cmake": b"#!/bin/sh\necho cmake\n",
        "bin/ctest": b"#!/bin/sh\necho ctest\n",
        "share/cmake/Modules/README": b"modules\n",
    })
    mac_name = f"cmake-{version}-macos-universal.tar.gz"
    installer_name = f"{top}.sh"

    hash_name = f"cmake-{version}-SHA-256.txt"
    hash_text = (
        f"{listed_digest or sha256_hex(archive)}  {archive_name}\n"
        f"{sha256_hex(b'installer')}  {installer_name}\n"
        f"{sha256_hex(b'mac')}  {mac_name}\n"
    ).encode()

    sig_names = [f"{hash_name}.{i}.asc" for i in range(len(signing_keys))]

    major, minor, rest = version.split(".", 2)
    patch, _, suffix = rest.partition("-")
    artifact = {
        "os": ["linux", "Linux"],
        "architecture": ["x86_64"],
        "class": "archive",
        "name": archive_name,
    }
    if artifact_deprecated:
        artifact["deprecated"] = artifact_deprecated
    hash_entry = {"algorithm": ["SHA-256"], "name": hash_name, "signature": sig_names}
    if hash_deprecated:
        hash_entry["deprecated"] = hash_deprecated
    manifest = {
        "version": {
            "major": int(major), "minor": int(minor), "patch": int(patch),
            "suffix": suffix, "string": version, "isDirty": False,
        },
        "files": [
            {"os": ["linux", "Linux"], "architecture": ["x86_64"],
             "class": "installer", "name": installer_name},
            artifact,
            {"os": ["macos", "macOS"], "architecture": ["arm64", "x86_64"],
             "class": "archive", "name": mac_name},
        ],
        "hashFiles": [hash_entry],
    }

    transfer = MockTransfer()
    transfer.add(f"{base_url}/{manifest_name or f'cmake-{version}-files-v1.json'}",
                 json.dumps(manifest))
    transfer.add(f"{base_url}/{hash_name}", hash_text)
    for key, sig_name in zip(signing_keys, sig_names):
        transfer.add(f"{base_url}/{sig_name}", MockSignatureTool.sign(key, hash_text))
    transfer.add(f"{base_url}/{archive_name}", archive)

    return FakeRelease(
        version=version,
        base_url=base_url,
        transfer=transfer,
        signatures=MockSignatureTool(default_keys=default_keys),
        manifest=manifest,
        archive_name=archive_name,
        archive_bytes=archive,
        hash_name=hash_name,
        signature_names=sig_names,
    )


@pytest.fixture
def fake_release() -> FakeRelease:
    """A 3.20.0 release on the GitHub channel."""
    return build_fake_release()


@pytest.fixture
def make_context(tmp_path: Path):
    """Build a FetchContext around a FakeRelease."""

    def _make(release: FakeRelease, **overrides) -> FetchContext:
        params = {
            "output_dir": tmp_path / "out",
            "host": LINUX_X86,
            "transfer": release.transfer,
            "signatures": release.signatures,
        }
        params.update(overrides)
        ctx = FetchContext(**params)
        ctx.ensure_output_dir()
        return ctx

    return _make


@pytest.fixture
def trusted_keys_dir(tmp_path: Path) -> Path:
    """A trusted_pubkeys directory holding the release key."""
    keys = tmp_path / "trusted_pubkeys"
    keys.mkdir()
    (keys / "kitware.asc").write_text(TRUSTED_KEY + "\n")
    return keys
