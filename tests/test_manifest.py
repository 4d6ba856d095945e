"""
Tests for manifest parsing, schema checks, and artifact selection.
"""

import json

import pytest

from conftest import build_fake_release

from get_cmake.core.errors import ManifestParseError, NoHashFile, UnsupportedPlatform
from get_cmake.core.models.manifest import ReleaseManifest, schema_major_from_name
from get_cmake.core.services.release.domain.manifest_parse import check_schema, parse_manifest
from get_cmake.core.services.release.domain.selection import select_artifact, select_hash_file


@pytest.fixture
def manifest_dict() -> dict:
    return build_fake_release().manifest


class TestParseManifest:
    def test_parses_fields(self, manifest_dict):
        m = parse_manifest(json.dumps(manifest_dict).encode(), "cmake-3.20.0-files-v1.json")
        assert m.version.string == "3.20.0"
        assert len(m.files) == 3
        assert m.files[1].kind == "archive"
        assert m.hash_files[0].name == "cmake-3.20.0-SHA-256.txt"
        assert m.hash_files[0].deprecated is None

    def test_unknown_fields_ignored(self, manifest_dict):
        manifest_dict["somethingNew"] = {"x": 1}
        m = parse_manifest(json.dumps(manifest_dict).encode())
        assert m.files

    def test_immutable(self, manifest_dict):
        m = ReleaseManifest.model_validate(manifest_dict)
        with pytest.raises(Exception):
            m.files = []

    def test_invalid_json_keeps_last_13_lines(self):
        body = "\n".join(f"<p>line {i}</p>" for i in range(30)).encode()
        with pytest.raises(ManifestParseError) as exc:
            parse_manifest(body, "cmake-3.20.0-files-v1.json")
        assert len(exc.value.details) == 13
        assert exc.value.details[-1] == "<p>line 29</p>"
        assert exc.value.details[0] == "<p>line 17</p>"

    def test_short_error_body_kept_whole(self):
        body = b'{"message": "Not Found"'
        with pytest.raises(ManifestParseError) as exc:
            parse_manifest(body)
        assert exc.value.details == ['{"message": "Not Found"']

    def test_not_an_object(self):
        with pytest.raises(ManifestParseError):
            parse_manifest(b"[1, 2, 3]")

    def test_schema_violation(self):
        body = json.dumps({"files": [{"name": "x.tar.gz"}]}).encode()
        with pytest.raises(ManifestParseError, match="files-v1"):
            parse_manifest(body)


class TestFileNames:
    @pytest.mark.parametrize("bad", ["../../escaped.asc", "/etc/passwd", "sub/x.tar.gz", "..", "", "a\\b.asc"])
    def test_signature_must_be_plain_name(self, manifest_dict, bad):
        manifest_dict["hashFiles"][0]["signature"] = [bad]
        with pytest.raises(ManifestParseError):
            parse_manifest(json.dumps(manifest_dict).encode())

    def test_hash_file_name(self, manifest_dict):
        manifest_dict["hashFiles"][0]["name"] = "../SHA-256.txt"
        with pytest.raises(ManifestParseError):
            parse_manifest(json.dumps(manifest_dict).encode())

    def test_artifact_name(self, manifest_dict):
        manifest_dict["files"][1]["name"] = "../../cmake.tar.gz"
        with pytest.raises(ManifestParseError):
            parse_manifest(json.dumps(manifest_dict).encode())

    def test_dotted_plain_names_allowed(self, manifest_dict):
        manifest_dict["hashFiles"][0]["signature"] = ["cmake-3.20.0-SHA-256.txt.asc", "..asc"]
        m = parse_manifest(json.dumps(manifest_dict).encode())
        assert m.hash_files[0].signature[1] == "..asc"


class TestSchemaVersion:
    def test_major_from_name(self):
        assert schema_major_from_name("cmake-3.20.0-files-v1.json") == 1
        assert schema_major_from_name("cmake-latest-files-v2.json") == 2
        assert schema_major_from_name("other.json") is None

    def test_future_major_rejected(self, manifest_dict):
        with pytest.raises(ManifestParseError, match="files-v2"):
            parse_manifest(json.dumps(manifest_dict).encode(), "cmake-4.0.0-files-v2.json")

    def test_current_major_accepted(self):
        check_schema("cmake-latest-files-v1.json")


class TestSelection:
    def test_hash_file_sha256(self, manifest_dict):
        m = ReleaseManifest.model_validate(manifest_dict)
        assert select_hash_file(m).name == "cmake-3.20.0-SHA-256.txt"

    def test_no_sha256_hash_file(self, manifest_dict):
        manifest_dict["hashFiles"][0]["algorithm"] = ["SHA-512"]
        m = ReleaseManifest.model_validate(manifest_dict)
        with pytest.raises(NoHashFile):
            select_hash_file(m)

    def test_selects_archive_not_installer(self, manifest_dict):
        m = ReleaseManifest.model_validate(manifest_dict)
        entry = select_artifact(m, "linux", "x86_64")
        assert entry.name == "cmake-3.20.0-linux-x86_64.tar.gz"

    def test_macos_universal(self, manifest_dict):
        m = ReleaseManifest.model_validate(manifest_dict)
        assert select_artifact(m, "macOS", "arm64").name.endswith("macos-universal.tar.gz")

    def test_unsupported_arch_fails(self, manifest_dict):
        m = ReleaseManifest.model_validate(manifest_dict)
        with pytest.raises(UnsupportedPlatform):
            select_artifact(m, "linux", "riscv64")

    def test_os_must_match_too(self, manifest_dict):
        m = ReleaseManifest.model_validate(manifest_dict)
        with pytest.raises(UnsupportedPlatform):
            select_artifact(m, "windows", "x86_64")

    def test_multiple_matches_take_first(self, manifest_dict, caplog):
        dup = dict(manifest_dict["files"][1], name="cmake-3.20.0-linux-x86_64-alt.tar.gz")
        manifest_dict["files"].append(dup)
        m = ReleaseManifest.model_validate(manifest_dict)
        with caplog.at_level("WARNING"):
            entry = select_artifact(m, "linux", "x86_64")
        assert entry.name == "cmake-3.20.0-linux-x86_64.tar.gz"
        assert "alt.tar.gz" in caplog.text
