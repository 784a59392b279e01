# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Resource loading utilities for lhapdf-provision package data."""

from importlib import resources
from pathlib import Path

TEMPLATE_PACKAGE = "lhapdf_provision.resources"
TEMPLATE_SUBDIR = "templates"


def get_template_dir() -> Path:
    """
    Directory holding the bootstrap templates shipped with the package.

    The package is installed as a regular directory (no zip import), so the
    traversable returned by importlib.resources maps onto a real path.
    """
    return Path(str(resources.files(TEMPLATE_PACKAGE).joinpath(TEMPLATE_SUBDIR)))


def get_template(name: str) -> Path:
    """Path of a single bundled template file."""
    return get_template_dir() / name


__all__ = ['get_template', 'get_template_dir']
