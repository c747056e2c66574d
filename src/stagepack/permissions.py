"""Permission fix-up for layout directories."""

from __future__ import annotations

import logging
import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path

from .platforms import HostPlatform

logger = logging.getLogger(__name__)

BASELINE_MODE = 0o644
EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

EXECUTABLE_SUFFIXES = frozenset({".sh", ".so", ".dylib"})

EXECUTABLE_MAGICS = (
    b"\x7fELF",
    b"#!",
    b"\xfe\xed\xfa\xce",
    b"\xce\xfa\xed\xfe",
    b"\xfe\xed\xfa\xcf",
    b"\xcf\xfa\xed\xfe",
    b"\xca\xfe\xba\xbe",
    b"\xbe\xba\xfe\xca",
)


def _has_executable_magic(path: Path) -> bool:
    with path.open("rb") as fh:
        head = fh.read(4)
    return any(head.startswith(magic) for magic in EXECUTABLE_MAGICS)


def is_executable(path: Path) -> bool:
    """Native binaries, shared libraries and scripts keep their execute bits."""
    if path.suffix in EXECUTABLE_SUFFIXES:
        return True
    return _has_executable_magic(path)


class PermissionFixer(ABC):
    """Normalizes file modes of a layout directory."""

    @abstractmethod
    def fix(self, directory: Path) -> None: ...


class PosixPermissionFixer(PermissionFixer):
    """Reset files to 644, then restore execute bits on executables."""

    def fix(self, directory: Path) -> None:
        logger.debug("Fixing permissions under '%s'", directory)
        for root, _dirs, files in os.walk(directory):
            for name in files:
                path = Path(root, name)
                st = path.lstat()
                if not stat.S_ISREG(st.st_mode):
                    continue
                os.chmod(path, BASELINE_MODE)
                if is_executable(path):
                    os.chmod(path, BASELINE_MODE | EXECUTE_BITS)


class NoopPermissionFixer(PermissionFixer):
    """For platforms without a POSIX permission model."""

    def fix(self, directory: Path) -> None:
        logger.debug("Skipping permission fix-up for '%s'", directory)


def select_permission_fixer(host: HostPlatform) -> PermissionFixer:
    if host is HostPlatform.WINDOWS:
        return NoopPermissionFixer()
    return PosixPermissionFixer()
