# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Streaming extraction of gzip-compressed tar archives.

The archive is read once, front to back, straight from the network stream.
Each member is checked before anything is written and is unpacked into a
staging directory next to the destination. Only an archive that extracts
completely is merged into place; on any failure the staging directory is
discarded, so a rejected archive leaves nothing behind.
"""

import errno
import gzip
import logging
import os
import shutil
import tarfile
import tempfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import BinaryIO

from ..core.exceptions import (
    ArchiveFormatError,
    DatasetDirUnavailableError,
    DecompressionFailedError,
    InvalidDatasetNameError,
    UnsafeArchiveEntryError,
)
from .paths import check_dataset_name

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Summary of one extracted archive."""

    destination: Path
    files_extracted: int
    members: int


class GzipStream:
    """Decompressing reader that reports gzip framing errors as DecompressionFailedError."""

    def __init__(self, fileobj: BinaryIO, name: str):
        self.name = name
        self._gzip = gzip.GzipFile(fileobj=fileobj, mode="rb")

    def read(self, size: int = -1) -> bytes:
        try:
            return self._gzip.read(size)
        except (OSError, EOFError, zlib.error) as e:
            raise DecompressionFailedError(self.name, e) from e

    def close(self) -> None:
        self._gzip.close()


def _is_within(path: Path, root: Path) -> bool:
    return path == root or path.is_relative_to(root)


def check_member(member: tarfile.TarInfo, root: Path, name: str) -> None:
    """
    Reject archive members that could write outside ``root``.

    ``root`` must already be resolved. Resolution of the member path follows
    symlinks extracted earlier in the same archive, so a link to ``..``
    followed by a file beneath it is caught as well.

    Raises:
        UnsafeArchiveEntryError: For absolute paths, ``..`` escapes, links
            leaving the destination and device or FIFO entries.
    """
    entry = member.name
    if not entry:
        raise UnsafeArchiveEntryError(name, entry, "empty member name")
    if PurePosixPath(entry).is_absolute() or PureWindowsPath(entry).is_absolute() or PureWindowsPath(entry).drive:
        raise UnsafeArchiveEntryError(name, entry, "absolute path")

    target = (root / entry).resolve()
    if not _is_within(target, root):
        raise UnsafeArchiveEntryError(name, entry, "path escapes the destination directory")

    if member.issym():
        if PurePosixPath(member.linkname).is_absolute():
            raise UnsafeArchiveEntryError(name, entry, f"absolute symlink target {member.linkname!r}")
        link_target = ((root / entry).parent / member.linkname).resolve()
        if not _is_within(link_target, root):
            raise UnsafeArchiveEntryError(name, entry, f"symlink target {member.linkname!r} escapes")
    elif member.islnk():
        link_target = (root / member.linkname).resolve()
        if not _is_within(link_target, root):
            raise UnsafeArchiveEntryError(name, entry, f"hard link target {member.linkname!r} escapes")
    elif member.ischr() or member.isblk() or member.isfifo():
        raise UnsafeArchiveEntryError(name, entry, "device or FIFO entries are not allowed")


def _default_mode_filter(member: tarfile.TarInfo, path: str) -> tarfile.TarInfo:
    """Drop recorded mode bits so files and directories get the filesystem default."""
    return member.replace(mode=None, deep=False)


# errno values that point at the filesystem rather than the archive content
_ENVIRONMENT_ERRNOS = frozenset({
    errno.ENOSPC, errno.EDQUOT, errno.EACCES, errno.EPERM, errno.EROFS, errno.EMFILE, errno.EIO,
})


def _extraction_error(error: OSError, staging: Path, name: str) -> Exception:
    if error.errno in _ENVIRONMENT_ERRNOS:
        return DatasetDirUnavailableError(staging.parent, error)
    return ArchiveFormatError(name, error)


def _extract_members(fileobj: BinaryIO, staging: Path, name: str) -> ExtractionResult:
    files = 0
    members = 0
    try:
        with tarfile.open(fileobj=fileobj, mode="r|", errorlevel=1) as tar:
            for member in tar:
                check_member(member, staging, name)
                try:
                    tar.extract(member, path=staging, set_attrs=False, filter=_default_mode_filter)
                except OSError as e:
                    raise _extraction_error(e, staging, name) from e
                members += 1
                if member.isfile():
                    files += 1
    except tarfile.TarError as e:
        raise ArchiveFormatError(name, e) from e
    return ExtractionResult(destination=staging, files_extracted=files, members=members)


def _drain(stream: GzipStream, chunk_size: int = 1 << 16) -> None:
    """Read past the tar end marker so the gzip trailer (CRC, size) is verified."""
    while stream.read(chunk_size):
        pass


def _content_root(staging: Path, name: str) -> Path:
    """
    Pick the directory whose contents become ``<dest>/<name>``.

    LHAPDF tarballs wrap everything in a top-level directory named after the
    set; archives without that wrapper are taken as-is.
    """
    entries = list(staging.iterdir())
    if len(entries) == 1:
        only = entries[0]
        if only.name == name and only.is_dir() and not only.is_symlink():
            return only
    return staging


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def merge_tree(source: Path, destination: Path) -> None:
    """Move the contents of ``source`` into ``destination``, replacing clashing entries."""
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        target = destination / entry.name
        is_real_dir = entry.is_dir() and not entry.is_symlink()
        if is_real_dir and target.is_dir() and not target.is_symlink():
            merge_tree(entry, target)
            continue
        if target.exists() or target.is_symlink():
            _remove(target)
        os.replace(entry, target)


def extract_archive_stream(fileobj: BinaryIO, dataset_dir: Path, name: str) -> ExtractionResult:
    """
    Decompress and extract a .tar.gz stream into ``dataset_dir/name``.

    Args:
        fileobj: Readable stream of the compressed archive
        dataset_dir: The PDF directory the set is installed into
        name: PDF set name, used for the destination and error messages

    Returns:
        ExtractionResult pointing at the installed set

    Raises:
        InvalidDatasetNameError: ``name`` is not a plain directory name
        DecompressionFailedError: Invalid gzip framing
        ArchiveFormatError: Invalid tar structure or an entry that cannot be created
        UnsafeArchiveEntryError: A member would escape the destination
        DatasetDirUnavailableError: The PDF directory cannot be written
    """
    check_dataset_name(name)
    dataset_dir = Path(dataset_dir).resolve()
    destination = (dataset_dir / name).resolve()
    if destination.parent != dataset_dir:
        raise InvalidDatasetNameError(name, f"resolves outside {dataset_dir}")

    try:
        staging_dir = tempfile.TemporaryDirectory(
            prefix=f".{name}.", suffix=".partial", dir=dataset_dir, ignore_cleanup_errors=True
        )
    except OSError as e:
        raise DatasetDirUnavailableError(dataset_dir, e) from e

    gz = GzipStream(fileobj, name)
    with staging_dir as tmp:
        staging = Path(tmp).resolve()
        try:
            result = _extract_members(gz, staging, name)
            _drain(gz)
        finally:
            gz.close()

        logger.debug(f"Extracted {result.members} entries for {name} into staging {staging}")
        try:
            merge_tree(_content_root(staging, name), destination)
        except OSError as e:
            raise DatasetDirUnavailableError(destination, e) from e

    return ExtractionResult(
        destination=destination,
        files_extracted=result.files_extracted,
        members=result.members,
    )
