# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Source set assembly and the data-prefix define.

Sources come either from a non-recursive scan of the source directory or
from a hand-maintained manifest. The scan is sorted so two runs over the same
tree agree; a manifest is used in exactly the order it is written.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import yaml

from ..core.constants import BuildDefaults
from ..core.exceptions import SourceSetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFileSet:
    """Absolute paths of the translation units to compile."""

    src_dir: Path
    files: Tuple[Path, ...]
    from_manifest: bool = False

    def __iter__(self):
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class BuildDefine:
    """A single ``KEY="VALUE"`` preprocessor definition."""

    key: str
    value: str

    def __str__(self) -> str:
        return f'{self.key}="{self.value}"'

    def as_flag(self) -> str:
        return f"-D{self}"


def make_build_define(data_root: Union[str, Path], key: str = BuildDefaults.DATA_PREFIX_DEFINE) -> BuildDefine:
    """Embed the resolved data root into the compiled library."""
    value = str(data_root)
    if '"' in value or '\n' in value:
        raise SourceSetError(f"Data directory path cannot be embedded in a C string literal: {value!r}")
    return BuildDefine(key=key, value=value)


def _scan_sources(src_dir: Path, extension: str) -> List[Path]:
    try:
        entries = sorted(src_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise SourceSetError(f"Cannot list source directory {src_dir}: {e}") from e
    return [p.resolve() for p in entries if p.name.endswith(extension) and p.is_file()]


def _manifest_sources(src_dir: Path, manifest: Iterable[str]) -> List[Path]:
    files = []
    missing = []
    for entry in manifest:
        path = (src_dir / entry)
        if path.is_file():
            files.append(path.resolve())
        else:
            missing.append(entry)
    if missing:
        raise SourceSetError(
            f"Source manifest lists files missing from {src_dir}: {', '.join(missing)}"
        )
    return files


def load_manifest(path: Union[str, Path]) -> Tuple[str, ...]:
    """
    Read a source manifest file.

    Either a YAML list or plain text with one file per line; blank lines and
    ``#`` comments are ignored in the text form.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SourceSetError(f"Cannot read source manifest {path}: {e}") from e

    if path.suffix in ('.yaml', '.yml'):
        try:
            data = yaml.safe_load(text) or []
        except yaml.YAMLError as e:
            raise SourceSetError(f"Invalid YAML in source manifest {path}: {e}") from e
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise SourceSetError(f"Source manifest {path} must be a list of file names")
        return tuple(data)

    lines = (line.split('#', 1)[0].strip() for line in text.splitlines())
    return tuple(line for line in lines if line)


def assemble_sources(
    src_dir: Union[str, Path],
    extension: str = BuildDefaults.SOURCE_EXTENSION,
    manifest: Optional[Iterable[str]] = None,
) -> SourceFileSet:
    """
    Collect the sources for the static library.

    Args:
        src_dir: Directory containing the sources
        extension: Suffix a scanned file must end with
        manifest: Explicit file names relative to ``src_dir``; disables scanning

    Returns:
        SourceFileSet with absolute paths

    Raises:
        SourceSetError: Missing directory, unreadable listing or manifest
            entries that do not exist
    """
    src_dir = Path(src_dir)
    if not src_dir.is_dir():
        raise SourceSetError(f"Source directory not found: {src_dir}")

    if manifest is not None:
        files = _manifest_sources(src_dir, manifest)
        logger.debug(f"Using {len(files)} sources from manifest")
        return SourceFileSet(src_dir=src_dir.resolve(), files=tuple(files), from_manifest=True)

    files = _scan_sources(src_dir, extension)
    if not files:
        logger.warning(f"No *{extension} files found in {src_dir}")
    logger.debug(f"Found {len(files)} *{extension} sources in {src_dir}")
    return SourceFileSet(src_dir=src_dir.resolve(), files=tuple(files))
