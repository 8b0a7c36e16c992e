"""
Archive extraction for toolchain distributions.

Go distributions are rooted one level deep (``go/bin/go``, ``go/src/...``).
Extraction here reads straight from a byte stream, drops the leading path
component(s), and writes into the install directory:

- .tar.gz is decompressed with gzip and read in tarfile stream mode (no
  seeking, no temporary archive); the gzip body is read to its end so a
  truncated download fails instead of installing part of the tree
- .zip needs random access, so the stream is spooled to a temporary file

Every member path is validated against directory traversal before it is
written. A failed extraction leaves the destination as it was at the point
of failure; nothing is rolled back.
"""

import gzip
import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterator, Optional, Union

from gotoolchain.core.exceptions import (
    ArchiveExtractionError,
    DownloadError,
    ExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("tar.gz", "zip")

# Spooled zip archives stay in memory below this size
_SPOOL_MAX_SIZE = 16 * 1024 * 1024

_DRAIN_CHUNK_SIZE = 64 * 1024


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create a directory (and parents) if it doesn't exist.

    Args:
        path: Directory to create

    Returns:
        The directory path
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def strip_path(name: str, strip_components: int) -> Optional[str]:
    """
    Drop leading components from an archive member name.

    Returns None when nothing is left (the stripped directory itself).

    Example:
        >>> strip_path("go/bin/go", 1)
        'bin/go'
        >>> strip_path("go/", 1) is None
        True
    """
    parts = [p for p in PurePosixPath(name.replace("\\", "/")).parts if p not in ("", ".")]
    if len(parts) <= strip_components:
        return None
    return "/".join(parts[strip_components:])


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    if PurePosixPath(path).is_absolute() or os.path.isabs(path):
        raise InsecureArchiveError(
            f"Archive member '{path}' is an absolute path. "
            "This is a security risk and extraction has been blocked."
        )

    member_path = (destination / path).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


# ============================================================================
# Archive Extraction
# ============================================================================


def extract_stream(
    stream: BinaryIO,
    destination: Union[str, Path],
    archive_format: str,
    strip_components: int = 1,
) -> int:
    """
    Extract an archive read from a byte stream.

    Args:
        stream: Readable binary file-like object positioned at the archive start
        destination: Directory to extract into (created if missing)
        archive_format: 'tar.gz' or 'zip'
        strip_components: Leading path components dropped from every member

    Returns:
        Number of members written

    Raises:
        UnsupportedArchiveFormat: If archive_format is not recognized
        InsecureArchiveError: If archive contains malicious paths
        ExtractionError: If reading or writing fails part-way

    Example:
        >>> with open("go1.12.linux-amd64.tar.gz", "rb") as f:
        ...     extract_stream(f, "/opt/go", "tar.gz")
    """
    destination = ensure_directory(destination)

    if archive_format not in SUPPORTED_FORMATS:
        raise UnsupportedArchiveFormat(
            f"Unsupported archive format: {archive_format}. "
            f"Supported: {', '.join(SUPPORTED_FORMATS)}"
        )

    logger.debug(
        f"Extracting {archive_format} stream to {destination} "
        f"(strip {strip_components})"
    )

    try:
        if archive_format == "zip":
            count = _extract_zip_stream(stream, destination, strip_components)
        else:
            count = _extract_tar_stream(stream, destination, strip_components)
    except (InsecureArchiveError, UnsupportedArchiveFormat, DownloadError):
        raise
    except Exception as e:
        logger.error(f"Extraction into {destination} failed: {e}")
        raise ExtractionError(f"Failed to extract {archive_format} archive: {e}") from e

    logger.debug(f"Extracted {count} members to {destination}")
    return count


def _stripped_tar_members(
    tar: tarfile.TarFile, destination: Path, strip_components: int
) -> Iterator[tarfile.TarInfo]:
    """Yield tar members renamed with leading components dropped."""
    for member in tar:
        name = strip_path(member.name, strip_components)
        if name is None:
            continue
        _validate_archive_path(name, destination)
        member.name = name

        if member.islnk():
            linkname = strip_path(member.linkname, strip_components)
            if linkname is None:
                raise InsecureArchiveError(
                    f"Archive member '{name}' links outside the stripped root"
                )
            _validate_archive_path(linkname, destination)
            member.linkname = linkname
        yield member


def _extract_tar_stream(stream: BinaryIO, destination: Path, strip_components: int) -> int:
    """Extract a gzip-compressed tar stream."""
    count = 0
    # tarfile's own r|gz reader never checks the gzip trailer, so a cut-off
    # body would end the member loop early without an error
    with gzip.GzipFile(fileobj=stream, mode="rb") as gz:
        with tarfile.open(fileobj=gz, mode="r|") as tar:

            def counted() -> Iterator[tarfile.TarInfo]:
                nonlocal count
                for member in _stripped_tar_members(tar, destination, strip_components):
                    count += 1
                    yield member

            # Extract with filter for security (Python 3.12+)
            # For older Python, paths have already been validated above
            if sys.version_info >= (3, 12):
                tar.extractall(destination, members=counted(), filter="data")
            else:
                tar.extractall(destination, members=counted())

        # Raises EOFError on a missing end marker, BadGzipFile on a CRC mismatch
        while gz.read(_DRAIN_CHUNK_SIZE):
            pass
    return count


def _extract_zip_stream(stream: BinaryIO, destination: Path, strip_components: int) -> int:
    """Spool a zip stream to a temporary file and extract it."""
    with tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_SIZE) as spool:
        shutil.copyfileobj(stream, spool)
        spool.seek(0)

        with zipfile.ZipFile(spool) as zf:
            entries = []
            for info in zf.infolist():
                name = strip_path(info.filename, strip_components)
                if name is None:
                    continue
                _validate_archive_path(name, destination)
                entries.append((info, name))

            for info, name in entries:
                target = destination / name
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)

                mode = (info.external_attr >> 16) & 0o777
                if mode and os.name != "nt":
                    target.chmod(mode | stat.S_IRUSR)
    return len(entries)


__all__ = [
    "SUPPORTED_FORMATS",
    "ArchiveExtractionError",
    "ExtractionError",
    "InsecureArchiveError",
    "UnsupportedArchiveFormat",
    "ensure_directory",
    "extract_stream",
    "is_relative_to",
    "strip_path",
]
