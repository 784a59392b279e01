# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Native source assembly and static library build."""

from .sources import BuildDefine, SourceFileSet, assemble_sources, load_manifest, make_build_define
from .toolchain import BuildResult, StaticLibraryBuilder, Toolchain

__all__ = [
    'BuildDefine',
    'BuildResult',
    'SourceFileSet',
    'StaticLibraryBuilder',
    'Toolchain',
    'assemble_sources',
    'load_manifest',
    'make_build_define',
]
