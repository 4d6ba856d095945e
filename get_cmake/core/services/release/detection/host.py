"""
L3 Detection — Host platform.

Detected once per invocation and stored on the FetchContext; no other
layer calls ``platform`` directly.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass

from get_cmake.core.errors import UnsupportedPlatform
from get_cmake.core.services.release.data.constants import OS_NAMES


@dataclass(frozen=True)
class HostPlatform:
    """OS and CPU architecture as the release manifest spells them."""

    os_name: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os_name}/{self.arch}"


def detect_host() -> HostPlatform:
    """Map ``uname -s`` / ``uname -m`` to manifest names.

    Raises:
        UnsupportedPlatform: for systems CMake publishes no archive for.
    """
    system = platform.system()
    os_name = OS_NAMES.get(system)
    if os_name is None:
        raise UnsupportedPlatform(f"Unrecognized platform {system}")
    return HostPlatform(os_name=os_name, arch=platform.machine())
