# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

# src/lhapdf_provision/__init__.py
try:
    from .lhapdf_provision_version import __version__
except ImportError:
    try:
        from importlib.metadata import version, PackageNotFoundError
        __version__ = version("lhapdf-provision")
    except (ImportError, PackageNotFoundError):
        __version__ = "0.0.0"

from .provisioner import LHAPDFProvisioner

__all__ = ["LHAPDFProvisioner", "__version__"]
