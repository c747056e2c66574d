"""Host platform detection."""

from __future__ import annotations

import platform
import sys
from enum import StrEnum


class HostPlatform(StrEnum):
    WINDOWS = "windows"
    UNIX = "unix"


_OS_NAMES: dict[str, str] = {
    "Windows": "Windows",
    "Darwin": "Mac OS X",
    "Linux": "Linux",
}

_RID_PREFIXES: dict[str, str] = {
    "Windows": "win",
    "Mac OS X": "osx",
    "Linux": "linux",
}

_ARCHITECTURES: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "arm": "arm",
}


def current_platform() -> HostPlatform:
    """Return the platform family of the running interpreter."""
    return HostPlatform.WINDOWS if sys.platform == "win32" else HostPlatform.UNIX


def operating_system() -> str:
    system = platform.system()
    return _OS_NAMES.get(system, system)


def architecture() -> str:
    machine = platform.machine().lower()
    return _ARCHITECTURES.get(machine, machine)


def runtime_identifier(os_name: str, arch: str) -> str:
    """Build a portable runtime identifier such as 'linux-x64'."""
    prefix = _RID_PREFIXES.get(os_name, os_name.lower().replace(" ", ""))
    return f"{prefix}-{arch}"
