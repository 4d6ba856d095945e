"""
L0 Data — Distribution channels, URL templates, platform names.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

PRODUCT = "cmake"

# Distribution channels ("--repo")
REPO_GITHUB = "github"
REPO_KITWARE = "kitware"
SUPPORTED_REPOS: tuple[str, ...] = (REPO_GITHUB, REPO_KITWARE)
DEFAULT_REPO = REPO_GITHUB

GITHUB_RELEASES_API = "https://api.github.com/repos/Kitware/CMake/releases"
GITHUB_DOWNLOAD_BASE = "https://github.com/Kitware/CMake/releases/download/v{version}"
GITHUB_API_HEADERS: dict[str, str] = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
GITHUB_PAGE_SIZE = 100

# cmake.org keys directories by feature line (MAJOR.MINOR) only.
KITWARE_DOWNLOAD_BASE = "https://cmake.org/files/v{feature_line}"
KITWARE_LATEST_BASE = "https://cmake.org/files/LatestRelease"

MANIFEST_NAME = "{product}-{version}-files-v1.json"
LATEST = "latest"

# Per-transfer upper bound, seconds.  No retries.
TRANSFER_TIMEOUT = 300

# Lines of a bad manifest response shown in the error.
MANIFEST_ERROR_TAIL = 13

KEYRING_FILENAME = "trusted_pubkeys_keyring.gpg"
TRUSTED_KEYS_DIRNAME = "trusted_pubkeys"
PUBKEY_GLOB = "*.asc"

# platform.system() -> manifest "os" value
OS_NAMES: dict[str, str] = {
    "Linux": "linux",
    "Darwin": "macOS",
}

# Where the executables land inside the unpacked tree, per manifest OS.
BIN_SUBPATHS: dict[str, str] = {
    "macOS": "CMake.app/Contents/bin",
}
DEFAULT_BIN_SUBPATH = "bin"
