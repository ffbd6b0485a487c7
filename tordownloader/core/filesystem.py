"""
Filesystem helpers for tordownloader.

This module wraps the small set of filesystem primitives the retrieval
pipeline relies on:
- Idempotent directory creation (an existing directory is not an error)
- Execute permission grants
- Renames within or across directories
- Safe recursive deletion and a self-cleaning temporary directory
"""

import logging
import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

TEMP_PREFIX = "tordownloader-"


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Args:
        path: Path to check
        parent: Parent directory

    Returns:
        True if path is under parent directory
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def make_directory(path: Union[str, Path], parents: bool = False) -> Path:
    """
    Create a directory, treating "already exists" as success.

    Any other OSError (permissions, a file in the way of a parent, ...)
    propagates.

    Args:
        path: Directory to create
        parents: Also create missing parent directories

    Returns:
        Path object of the directory
    """
    path = Path(path)
    try:
        path.mkdir(parents=parents)
    except FileExistsError:
        logger.debug(f"Directory already exists: {path}")
    return path


def add_execute_permission(path: Union[str, Path]) -> None:
    """
    Add execute permission for user, group and others.

    Args:
        path: File to make executable

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def rename(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Move a file or directory to a new path.

    Args:
        source: Existing path
        destination: New path
    """
    logger.debug(f"Renaming {source} -> {destination}")
    destination = Path(destination)

    # Windows cannot replace a directory, even an empty one
    if IS_WINDOWS and Path(source).is_dir() and destination.is_dir():
        destination.rmdir()

    os.replace(source, destination)


def remove_file(path: Union[str, Path]) -> None:
    """Remove a single file."""
    Path(path).unlink()


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree, tolerating a directory that is already gone.

    Args:
        path: Directory to remove
    """
    path = Path(path)

    if not path.exists():
        return  # Already gone, nothing to do

    if IS_WINDOWS:

        def handle_remove_readonly(func, target, exc):
            """Error handler for Windows read-only files."""
            if not os.access(target, os.W_OK):
                os.chmod(target, 0o777)
                func(target)
            else:
                raise exc[1]

        shutil.rmtree(path, onerror=handle_remove_readonly)
    else:
        shutil.rmtree(path)


@contextmanager
def temporary_directory(prefix: str = TEMP_PREFIX) -> Iterator[Path]:
    """
    Context manager for a fresh, uniquely named temporary directory.

    The directory is removed on exit whether the block succeeds or raises,
    and the original exception (if any) propagates unchanged.

    Args:
        prefix: Prefix for temp directory name

    Yields:
        Path to temporary directory

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug(f"Created operation directory: {temp_dir}")

    try:
        yield temp_dir
    finally:
        safe_rmtree(temp_dir)
        logger.debug(f"Removed operation directory: {temp_dir}")


__all__ = [
    "is_relative_to",
    "make_directory",
    "add_execute_permission",
    "rename",
    "remove_file",
    "safe_rmtree",
    "temporary_directory",
]
