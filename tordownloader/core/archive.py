"""
Archive utilities: zip extraction and xz stream decompression.

Tor Browser ships the mar tools as a zip archive, and every file inside an
unpacked MAR bundle is individually xz compressed. This module handles both.
"""

import logging
import lzma
import shutil
import zipfile
from pathlib import Path
from typing import Union

from tordownloader.core.exceptions import ArchiveExtractionError, InsecureArchiveError
from tordownloader.core.filesystem import is_relative_to

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Args:
        path: Member path from archive
        destination: Extraction destination

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def unzip(zip_path: Union[str, Path], to_directory: Union[str, Path]) -> None:
    """
    Extract the whole content of a zip archive into a directory.

    Args:
        zip_path: Path to the zip archive
        to_directory: Directory to extract to

    Raises:
        ArchiveExtractionError: If the archive is missing or corrupt
        InsecureArchiveError: If a member would land outside to_directory
    """
    zip_path = Path(zip_path)
    to_directory = Path(to_directory)

    if not zip_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {zip_path}")

    logger.debug(f"Extracting {zip_path.name} to {to_directory}")

    try:
        with zipfile.ZipFile(zip_path, "r") as zf:
            members = zf.namelist()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member, to_directory)

            zf.extractall(to_directory)
    except zipfile.BadZipFile as e:
        raise ArchiveExtractionError(f"Failed to extract {zip_path}: {e}") from e


def decompress_xz(
    file_path: Union[str, Path], decompressed_file_path: Union[str, Path]
) -> None:
    """
    Decompress an xz file into a new sibling file.

    Reading, decompression and writing are streamed; the first failing stage
    aborts the whole operation and its error propagates. A partially written
    output file is removed on failure.

    Args:
        file_path: xz compressed input file
        decompressed_file_path: Output file to create

    Raises:
        lzma.LZMAError: If the input is not valid xz data
        OSError: If the input cannot be read or the output cannot be written
    """
    decompressed_file_path = Path(decompressed_file_path)

    try:
        with lzma.open(file_path, "rb") as source, open(
            decompressed_file_path, "wb"
        ) as destination:
            shutil.copyfileobj(source, destination, CHUNK_SIZE)
    except (lzma.LZMAError, EOFError, OSError):
        decompressed_file_path.unlink(missing_ok=True)
        raise


__all__ = [
    "unzip",
    "decompress_xz",
]
