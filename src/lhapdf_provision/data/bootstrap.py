# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
PDF directory initialization.

LHAPDF refuses to start unless ``lhapdf.conf`` and ``pdfsets.index`` are
present in its data directory. Missing files are copied from the templates
shipped with this package; files that already exist belong to the user and
are never touched.
"""

import errno
import logging
import shutil
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..core.constants import DataLayout
from ..core.exceptions import (
    BootstrapProbeError,
    DatasetDirUnavailableError,
    PackagingDefectError,
)
from ..resources import get_template_dir
from .paths import DataRoot, DatasetDir

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Outcome of initializing the PDF directory."""

    dataset_dir: DatasetDir
    installed: List[str] = field(default_factory=list)
    present: List[str] = field(default_factory=list)


def _bootstrap_file_exists(path: Path) -> bool:
    """
    Report whether a bootstrap file exists.

    Returns False only for "does not exist"; every other failure, including a
    directory squatting on the file name, is a BootstrapProbeError.
    """
    try:
        st = path.stat()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise BootstrapProbeError(path, e) from e
    if not stat.S_ISREG(st.st_mode):
        raise BootstrapProbeError(path, OSError(errno.EISDIR, "not a regular file"))
    return True


def _open_dataset_dir(root: DataRoot, fixed_name: str) -> DatasetDir:
    target = root.child(fixed_name)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DatasetDirUnavailableError(target, e) from e
    return DatasetDir(path=target.resolve(), root=root)


def ensure_dataset_dir(
    root: DataRoot,
    fixed_name: str = DataLayout.PDF_DIR_NAME,
    template_root: Optional[Union[str, Path]] = None,
    bootstrap_files: Iterable[str] = DataLayout.BOOTSTRAP_FILES,
) -> BootstrapResult:
    """
    Ensure ``root/fixed_name`` exists and holds every bootstrap file.

    Args:
        root: Resolved data root
        fixed_name: Name of the PDF subdirectory
        template_root: Directory with template copies of the bootstrap files;
            defaults to the templates bundled with the package
        bootstrap_files: File names that must be present

    Returns:
        BootstrapResult listing which files were installed on this run

    Raises:
        DatasetDirUnavailableError: The PDF directory cannot be created
        BootstrapProbeError: A bootstrap file cannot be inspected
        PackagingDefectError: A template could not be copied
    """
    dataset_dir = _open_dataset_dir(root, fixed_name)
    template_root = Path(template_root) if template_root is not None else get_template_dir()
    result = BootstrapResult(dataset_dir=dataset_dir)

    for filename in bootstrap_files:
        target = dataset_dir.child(filename)
        if _bootstrap_file_exists(target):
            logger.debug(f"Bootstrap file already present: {target}")
            result.present.append(filename)
            continue

        template = template_root / filename
        try:
            shutil.copyfile(template, target)
        except OSError as e:
            logger.critical(f"THIS IS A BUG: packaging error while copying {template}")
            raise PackagingDefectError(template, e) from e
        logger.info(f"Installed {filename} into {dataset_dir}")
        result.installed.append(filename)

    return result
