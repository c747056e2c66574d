"""Archive formats for compressed layout artifacts."""

from __future__ import annotations

import logging
import os
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from . import keys, tools
from .errors import MissingInputError
from .platforms import HostPlatform

logger = logging.getLogger(__name__)


class Archiver(ABC):
    """Compresses a directory into a single artifact file."""

    extension: ClassVar[str]

    # (context key of the directory, context key of the output file)
    artifacts: ClassVar[tuple[tuple[str, str], ...]]

    def archive(self, directory: Path, artifact: Path) -> Path:
        if not directory.is_dir():
            raise MissingInputError(directory, "directory to archive")
        if artifact.exists():
            artifact.unlink()
        artifact.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Compressing '%s' -> '%s'", directory, artifact)
        self._write(directory, artifact)
        return artifact

    @abstractmethod
    def _write(self, directory: Path, artifact: Path) -> None: ...


class ZipArchiver(Archiver):
    """Deflate zip with entries relative to the archived directory."""

    extension = ".zip"
    artifacts = (
        (keys.COMBINED_HOST_ROOT, keys.COMBINED_HOST_ARCHIVE),
        (keys.COMBINED_ROOT, keys.COMBINED_ARCHIVE),
        (keys.SDK_SYMBOLS_ROOT, keys.SDK_SYMBOLS_ARCHIVE),
    )

    def _write(self, directory: Path, artifact: Path) -> None:
        with zipfile.ZipFile(artifact, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
            for root, dirs, files in os.walk(directory):
                dirs.sort()
                rel_root = Path(root).relative_to(directory)
                if not dirs and not files and rel_root != Path("."):
                    zf.write(root, f"{rel_root.as_posix()}/")
                for name in sorted(files):
                    zf.write(Path(root, name), (rel_root / name).as_posix())


class TarGzArchiver(Archiver):
    """Gzip tarball produced by the system tar."""

    extension = ".tar.gz"
    artifacts = (
        (keys.COMBINED_HOST_ROOT, keys.COMBINED_HOST_ARCHIVE),
        (keys.SDK_SYMBOLS_ROOT, keys.SDK_SYMBOLS_ARCHIVE),
    )

    def _write(self, directory: Path, artifact: Path) -> None:
        tools.run("tar", "-czf", artifact, "-C", directory, ".")


def select_archiver(host: HostPlatform) -> Archiver:
    if host is HostPlatform.WINDOWS:
        return ZipArchiver()
    return TarGzArchiver()
