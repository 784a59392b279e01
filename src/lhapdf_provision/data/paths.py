# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Data root resolution.

A data root is either supplied by the user (absolute, must already exist,
never created) or defaults to a directory under the project root that is
created on demand. Both come back as a canonical absolute path so that the
same string can be used for child-path operations and for the compile-time
define.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional, Union

from ..core.exceptions import DefaultDirUnavailableError, InvalidDataDirError, InvalidDatasetNameError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataRoot:
    """Absolute, existing top-level data directory."""

    path: Path
    is_default: bool = False

    def __str__(self) -> str:
        return str(self.path)

    def child(self, name: str) -> Path:
        return self.path / name


@dataclass(frozen=True)
class DatasetDir:
    """The fixed-name PDF directory inside a data root."""

    path: Path
    root: DataRoot

    def __str__(self) -> str:
        return str(self.path)

    def child(self, name: str) -> Path:
        return self.path / name


def _open_user_dir(path: Path) -> Path:
    """Check that a user-supplied directory is absolute and usable."""
    if not path.is_absolute():
        raise InvalidDataDirError(path, ValueError("path is not absolute"))
    try:
        # Listing proves the directory exists and is readable.
        with os.scandir(path):
            pass
    except OSError as e:
        raise InvalidDataDirError(path, e) from e
    if not os.access(path, os.W_OK):
        raise InvalidDataDirError(path, PermissionError("directory is not writable"))
    return path.resolve()


def resolve_data_root(
    user_path: Optional[Union[str, Path]],
    default_relative: Union[str, Path],
    invocation_root: Union[str, Path],
) -> DataRoot:
    """
    Resolve the data root directory.

    Args:
        user_path: Optional user override; must be an absolute existing directory
        default_relative: Default location relative to ``invocation_root``
        invocation_root: Project root the default is anchored at

    Returns:
        DataRoot with a canonical absolute path

    Raises:
        InvalidDataDirError: If the override is relative, missing or unusable
        DefaultDirUnavailableError: If the default directory cannot be created
    """
    if user_path is not None and str(user_path) != "":
        resolved = _open_user_dir(Path(user_path).expanduser())
        logger.info(f"Using data directory {resolved}")
        return DataRoot(path=resolved, is_default=False)

    default_path = Path(invocation_root) / default_relative
    try:
        default_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DefaultDirUnavailableError(default_path, e) from e
    if not default_path.is_dir():
        raise DefaultDirUnavailableError(default_path, NotADirectoryError("not a directory"))

    resolved = default_path.resolve()
    logger.info(f"Using default data directory {resolved}")
    return DataRoot(path=resolved, is_default=True)


def check_dataset_name(name: str) -> str:
    """
    Ensure a PDF set name is a single plain path component.

    The name becomes ``<pdf-dir>/<name>``, so separators, ``.``/``..`` and
    absolute or drive-qualified names are refused.

    Raises:
        InvalidDatasetNameError: If the name cannot be used as a directory name
    """
    if not name or not name.strip():
        raise InvalidDatasetNameError(name, "name is empty")
    if name in (".", ".."):
        raise InvalidDatasetNameError(name, "name refers to a parent or current directory")
    if "/" in name or "\\" in name or "\0" in name:
        raise InvalidDatasetNameError(name, "name contains a path separator")
    if PurePosixPath(name).is_absolute() or PureWindowsPath(name).drive:
        raise InvalidDatasetNameError(name, "name is an absolute path")
    return name
