"""
Tests for the fetch pipeline and the fetch / resolve use cases.
"""

import json

import pytest

from conftest import LINUX_X86, OLD_KEY, TRUSTED_KEY, build_fake_release

from get_cmake.adapters.mock import MockTransfer
from get_cmake.core.errors import UnsupportedPlatform, UntrustedSignature
from get_cmake.core.services.release.detection.host import HostPlatform
from get_cmake.core.services.release.orchestration.pipeline import run_pipeline
from get_cmake.core.services.release.resolver.version_resolution import resolve_release
from get_cmake.core.use_cases.fetch import default_output_dir, fetch_release, resolve_version

KITWARE_LATEST = "https://cmake.org/files/LatestRelease"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """No stray get-cmake.yml or trusted_pubkeys from the real cwd."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


def _fetch(release, **kwargs):
    kwargs.setdefault("transfer", release.transfer)
    kwargs.setdefault("signatures", release.signatures)
    kwargs.setdefault("host", LINUX_X86)
    return fetch_release(**kwargs)


# ── Pipeline ─────────────────────────────────────────────────────────


class TestRunPipeline:
    def test_happy_path(self, fake_release, make_context):
        ctx = make_context(fake_release)
        outcome = run_pipeline(resolve_release("3.20.0", "github", fake_release.transfer), ctx)
        assert outcome.downloaded
        assert outcome.trust.accepted_signature == fake_release.signature_names[1]
        assert outcome.bin_dir == ctx.output_dir / "bin"
        assert (ctx.output_dir / "bin" / "cmake").is_file()
        assert (ctx.output_dir / "share" / "cmake" / "Modules" / "README").is_file()

    def test_unsupported_arch_never_downloads_archive(self, fake_release, make_context):
        ctx = make_context(fake_release, host=HostPlatform("linux", "riscv64"))
        with pytest.raises(UnsupportedPlatform):
            run_pipeline(resolve_release("3.20.0", "github", fake_release.transfer), ctx)
        assert fake_release.url(fake_release.archive_name) not in fake_release.transfer.call_log

    def test_untrusted_never_downloads_archive(self, make_context):
        release = build_fake_release(signing_keys=(OLD_KEY,))
        ctx = make_context(release)
        with pytest.raises(UntrustedSignature):
            run_pipeline(resolve_release("3.20.0", "github", release.transfer), ctx)
        assert release.url(release.archive_name) not in release.transfer.call_log

    def test_artifact_deprecation_warns(self, make_context):
        release = build_fake_release(artifact_deprecated="use the new naming scheme")
        ctx = make_context(release)
        outcome = run_pipeline(resolve_release("3.20.0", "github", release.transfer), ctx)
        assert any("new naming scheme" in w for w in outcome.warnings)


# ── fetch_release ────────────────────────────────────────────────────


class TestFetchRelease:
    def test_success(self, fake_release, tmp_path):
        result = _fetch(fake_release, requested="3.20.0", output_dir=tmp_path / "cmake")
        assert result.ok, result.error
        assert result.version == "3.20.0"
        assert result.bin_dir == (tmp_path / "cmake" / "bin").resolve()
        assert result.signature == fake_release.signature_names[1]
        assert result.to_dict()["ok"] is True

    def test_default_output_dir(self, fake_release, _isolated_cwd):
        result = _fetch(fake_release, requested="3.20.0")
        assert result.ok, result.error
        assert result.output_dir == (_isolated_cwd / "cmake-3.20.0").resolve()
        assert (result.output_dir / "bin" / "cmake").is_file()

    def test_idempotent(self, fake_release, tmp_path):
        out = tmp_path / "cmake"
        first = _fetch(fake_release, requested="3.20.0", output_dir=out)
        assert first.downloaded
        archive_url = fake_release.url(fake_release.archive_name)
        before = fake_release.transfer.call_log.count(archive_url)

        second = _fetch(fake_release, requested="3.20.0", output_dir=out)
        assert second.ok
        assert not second.downloaded
        assert fake_release.transfer.call_log.count(archive_url) == before
        assert (out / "bin" / "cmake").is_file()

    def test_invalid_version_no_network(self, fake_release):
        result = _fetch(fake_release, requested="3.20")
        assert not result.ok
        assert result.error_kind == "invalid_version"
        assert fake_release.transfer.call_count == 0

    def test_unsupported_repo(self, fake_release):
        result = _fetch(fake_release, requested="3.20.0", repo="mirror")
        assert result.error_kind == "unsupported_repo"

    def test_checksum_mismatch(self, tmp_path):
        release = build_fake_release(listed_digest="f" * 64)
        result = _fetch(release, requested="3.20.0", output_dir=tmp_path / "cmake")
        assert result.error_kind == "checksum_mismatch"
        assert len(result.error_details) == 2

    def test_untrusted_details_surface(self, tmp_path):
        release = build_fake_release(signing_keys=(OLD_KEY,))
        result = _fetch(release, requested="3.20.0", output_dir=tmp_path / "cmake")
        assert result.error_kind == "untrusted_signature"
        assert result.error_details

    def test_fetch_error(self, tmp_path):
        release = build_fake_release()
        result = _fetch(release, requested="3.21.0", output_dir=tmp_path / "cmake")
        assert result.error_kind == "fetch_error"

    def test_kitware_latest(self, tmp_path):
        release = build_fake_release(
            "3.29.3",
            base_url=KITWARE_LATEST,
            manifest_name="cmake-latest-files-v1.json",
        )
        result = _fetch(release, requested="latest", repo="kitware", output_dir=tmp_path / "cmake")
        assert result.ok, result.error
        assert result.version == "3.29.3"
        assert f"{KITWARE_LATEST}/{release.archive_name}" in release.transfer.call_log

    def test_github_latest(self, tmp_path):
        release = build_fake_release("3.29.3")
        release.transfer.add(
            "https://api.github.com/repos/Kitware/CMake/releases?per_page=100",
            json.dumps([{"tag_name": "v3.29.3", "draft": False},
                        {"tag_name": "v3.30.0", "draft": True}]),
        )
        result = _fetch(release, requested="latest", output_dir=tmp_path / "cmake")
        assert result.ok, result.error
        assert result.version == "3.29.3"

    def test_trusted_pubkeys_autodetected(self, _isolated_cwd, tmp_path):
        release = build_fake_release(signing_keys=(TRUSTED_KEY,), default_keys=())
        keys = _isolated_cwd / "trusted_pubkeys"
        keys.mkdir()
        (keys / "kitware.asc").write_text(TRUSTED_KEY + "\n")
        result = _fetch(release, requested="3.20.0", output_dir=tmp_path / "cmake")
        assert result.ok, result.error
        assert (tmp_path / "cmake" / "trusted_pubkeys_keyring.gpg").is_file()

    def test_settings_from_config(self, tmp_path):
        release = build_fake_release("3.21.1", base_url="https://cmake.org/files/v3.21")
        config = tmp_path / "get-cmake.yml"
        config.write_text("repo: kitware\noutput_dir: opt/cmake\n")
        result = _fetch(release, requested="3.21.1", config_path=config)
        assert result.ok, result.error
        assert result.repo == "kitware"
        assert result.output_dir == (tmp_path / "opt" / "cmake").resolve()

    def test_bad_config(self, fake_release, tmp_path):
        config = tmp_path / "get-cmake.yml"
        config.write_text("repo: sourceforge\n")
        result = _fetch(fake_release, requested="3.20.0", config_path=config)
        assert result.error_kind == "config_error"
        assert fake_release.transfer.call_count == 0


# ── resolve_version ──────────────────────────────────────────────────


class TestResolveVersion:
    def test_explicit(self):
        transfer = MockTransfer()
        result = resolve_version("3.20.0", transfer=transfer)
        assert result.error is None
        assert result.to_dict()["version"] == "3.20.0"
        assert transfer.call_count == 0

    def test_kitware_latest_reads_manifest(self):
        release = build_fake_release("3.29.3")
        transfer = MockTransfer()
        transfer.add(f"{KITWARE_LATEST}/cmake-latest-files-v1.json", json.dumps(release.manifest))
        result = resolve_version("latest", repo="kitware", transfer=transfer)
        assert str(result.location.version) == "3.29.3"

    def test_invalid(self):
        result = resolve_version("three", transfer=MockTransfer())
        assert result.error_kind == "invalid_version"


def test_default_output_dir_for_pointer(tmp_path):
    location = resolve_release("latest", "kitware", MockTransfer())
    assert default_output_dir(location, tmp_path) == tmp_path / "cmake-latest"
