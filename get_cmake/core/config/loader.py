"""
Configuration loader — reads get-cmake.yml into FetchSettings.

The file is optional.  When present it supplies defaults for the
``fetch`` command; command line options always win.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from get_cmake.core.services.release.data.constants import (
    DEFAULT_REPO,
    SUPPORTED_REPOS,
    TRANSFER_TIMEOUT,
    TRUSTED_KEYS_DIRNAME,
)

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "get-cmake.yml"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


class FetchSettings(BaseModel):
    """Settings for a fetch, from get-cmake.yml."""

    model_config = ConfigDict(extra="forbid")

    repo: str = DEFAULT_REPO
    output_dir: Path | None = None
    trusted_keys_dir: Path | None = None
    timeout: int = Field(default=TRANSFER_TIMEOUT, gt=0)

    @field_validator("repo")
    @classmethod
    def _known_repo(cls, value: str) -> str:
        if value not in SUPPORTED_REPOS:
            raise ValueError(f"repo must be one of {', '.join(SUPPORTED_REPOS)}")
        return value

    def resolved(self, base_dir: Path) -> FetchSettings:
        """Copy with relative paths anchored at ``base_dir``."""
        updates: dict[str, Path] = {}
        for name in ("output_dir", "trusted_keys_dir"):
            value = getattr(self, name)
            if value is not None and not value.is_absolute():
                updates[name] = (base_dir / value).resolve()
        if self.trusted_keys_dir is None and (base_dir / TRUSTED_KEYS_DIRNAME).is_dir():
            updates["trusted_keys_dir"] = (base_dir / TRUSTED_KEYS_DIRNAME).resolve()
        return self.model_copy(update=updates)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for get-cmake.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to get-cmake.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None, *, search: bool = True) -> FetchSettings:
    """Load fetch settings.

    Args:
        path: Explicit config path.  Must exist if given.
        search: Look upward from the cwd when ``path`` is None.

    Returns:
        Validated settings; defaults (anchored at the cwd) when no file
        is found.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None and search:
        path = find_config_file()

    if path is None:
        return FetchSettings().resolved(Path.cwd())

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow the settings to sit under a "get-cmake" key or at top level
    settings_data = data.get("get-cmake", data)

    try:
        settings = FetchSettings.model_validate(settings_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    return settings.resolved(path.parent.resolve())
