# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Fixed names and defaults for lhapdf-provision.

The PDF subdirectory name and the bootstrap file names are hard-coded in the
LHAPDF C++ sources and must not drift from them.
"""

from typing import Tuple


class DataLayout:
    """Names that make up the on-disk data layout."""

    DEFAULT_DATA_DIR = "lhapdf-data"
    """Data root used when no data-dir override is supplied, relative to the project root."""

    PDF_DIR_NAME = "LHAPDF"
    """Subdirectory of the data root that LHAPDF searches for PDF sets."""

    CONFIG_FILE = "lhapdf.conf"
    """Global LHAPDF configuration file."""

    INDEX_FILE = "pdfsets.index"
    """Index mapping LHAPDF IDs to PDF set names."""

    BOOTSTRAP_FILES: Tuple[str, ...] = (CONFIG_FILE, INDEX_FILE)
    """Files that must exist in the PDF directory before LHAPDF can run."""


class DownloadDefaults:
    """Defaults for the PDF set archive download."""

    BASE_URL = "https://lhapdfsets.web.cern.ch/current/"
    """CERN server hosting current PDF set tarballs."""

    ARCHIVE_SUFFIX = ".tar.gz"

    PDF_SETS: Tuple[str, ...] = (
        "EPPS21nlo_CT18Anlo_O16",
        "EPPS21nlo_CT18Anlo_Pb208",
    )
    """PDF sets installed by ``--download-pdfs`` when none are named."""

    MAX_ARCHIVE_BYTES = 1 << 30
    """Upper bound on the compressed size of a single archive (1 GiB)."""

    TIMEOUT_SEC = 600
    """Socket timeout for connect and each read, in seconds."""

    CHUNK_SIZE = 1 << 20
    """Bytes requested from the response per read (1 MiB)."""

    PROGRESS_INTERVAL = 50 << 20
    """Log download progress every 50 MiB."""


class BuildDefaults:
    """Defaults for compiling the LHAPDF static library."""

    LIBRARY_NAME = "lhapdf-fortrajectum"
    SOURCE_DIR = "src"
    SOURCE_EXTENSION = ".cc"
    INCLUDE_DIR = "include"
    BUILD_DIR = "build"
    CXX_STD = "c++11"
    OPTIMIZE = "-O2"
    CXX = "c++"
    AR = "ar"

    DATA_PREFIX_DEFINE = "LHAPDF_DATA_PREFIX"
    """Preprocessor symbol the C++ sources read the data root from."""

    LINK_LIBRARIES: Tuple[str, ...] = ("yaml-cpp-fortrajectum",)
    """Libraries consumers of the static library must also link."""


ENV_PREFIX = "LHAPDF_PROVISION_"
"""Prefix for environment variable configuration overrides."""
