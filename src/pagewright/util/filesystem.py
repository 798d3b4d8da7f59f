"""
Filesystem helpers shared by the walker and asset resolver.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import AbstractSet, Iterator, List

from filelock import FileLock

logger = logging.getLogger(__name__)


def ensure_directory(path: Path | str) -> bool:
    """
    Ensure a directory exists.

    Returns:
        True if the directory was created by this call.
    """
    target = Path(path)
    if target.is_dir():
        return False
    target.mkdir(parents=True, exist_ok=True)
    return True


def _ensure_parent(target: Path) -> None:
    """Ensure the parent directory for target exists."""
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)


def is_relative_to(path: Path, base: Path) -> bool:
    """Return True if path is under base."""
    try:
        path.relative_to(base)
    except ValueError:
        return False
    return True


def _lock_path_for(root: Path) -> Path:
    digest = hashlib.sha256(str(root).encode("utf-8")).hexdigest()[:16]
    return Path(tempfile.gettempdir()) / f"pagewright-{digest}.lock"


@contextmanager
def build_lock(output_root: Path | str) -> Iterator[None]:
    """
    Hold an exclusive lock for builds writing into output_root.

    The lock file lives in the system temp directory so nothing extra appears
    in the output tree.
    """
    root = Path(output_root).expanduser().resolve()
    lock_path = _lock_path_for(root)
    logger.debug("Acquiring build lock %s for %s", lock_path, root)
    with FileLock(str(lock_path)):
        yield


def _atomic_write_text(target: Path, content: str, encoding: str) -> None:
    """Write text atomically by staging a temp file and renaming."""
    _ensure_parent(target)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError:
            pass


def write_text_file(path: Path | str, content: str, encoding: str = "utf-8") -> Path:
    """
    Write text to a file, creating parent directories as needed.
    """
    target = Path(path)
    _atomic_write_text(target, content, encoding=encoding)
    return target


def copy_path(source: Path, destination: Path, *, protected: AbstractSet[Path] = frozenset()) -> bool:
    """
    Copy a file, or a directory recursively, to destination.

    Existing files at the destination are overwritten and existing directories
    are merged, except for files in protected, which are left untouched.

    Returns:
        False if destination itself is protected and nothing was copied.
    """
    if destination in protected:
        logger.debug("Not overwriting %s", destination)
        return False
    if source.is_dir():
        def _ignore(directory: str, names: List[str]) -> List[str]:
            target = destination / Path(directory).relative_to(source)
            return [name for name in names if target / name in protected]

        shutil.copytree(source, destination, dirs_exist_ok=True, ignore=_ignore if protected else None)
    else:
        _ensure_parent(destination)
        shutil.copy2(source, destination)
    return True
