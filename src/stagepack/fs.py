"""Filesystem helpers for building layout directories."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from .errors import MissingInputError

logger = logging.getLogger(__name__)


def reset_directory(path: Path) -> Path:
    """Delete path if it exists and recreate it empty."""
    if path.exists():
        logger.debug("Removing '%s'", path)
        shutil.rmtree(path)
    path.mkdir(parents=True)
    return path


def _remove(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def _merge_tree(source: Path, dest: Path) -> None:
    dest.mkdir(parents=True, exist_ok=True)
    for entry in sorted(source.iterdir()):
        target = dest / entry.name
        if entry.is_symlink():
            _remove(target)
            target.symlink_to(entry.readlink())
        elif entry.is_dir():
            if target.is_symlink() or (target.exists() and not target.is_dir()):
                _remove(target)
            _merge_tree(entry, target)
        else:
            # never write through a link left by an earlier root
            _remove(target)
            shutil.copy2(entry, target)
    shutil.copystat(source, dest)


def copy_tree(source: Path, dest: Path) -> None:
    """Recursively copy source into dest.

    Anything already present in dest at a copied path is replaced, so copying
    several roots into one destination lets the last copied root win on
    collisions. Symlinks are copied as links.
    """
    if not source.is_dir():
        raise MissingInputError(source, "source directory")
    logger.debug("Copying '%s' -> '%s'", source, dest)
    _merge_tree(source, dest)


def copy_files(source: Path, dest: Path) -> None:
    """Copy only the top-level files of source into dest."""
    if not source.is_dir():
        raise MissingInputError(source, "source directory")
    dest.mkdir(parents=True, exist_ok=True)
    for entry in sorted(source.iterdir()):
        if entry.is_file():
            logger.debug("Copying '%s' -> '%s'", entry, dest)
            _remove(dest / entry.name)
            shutil.copy2(entry, dest / entry.name)


def compose_layout(dest: Path, roots: Iterable[Path]) -> Path:
    """Create dest fresh and copy each root into it in order."""
    reset_directory(dest)
    for root in roots:
        copy_tree(root, dest)
    return dest
