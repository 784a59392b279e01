# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Single source of truth for the lhapdf-provision version.
Update this when cutting a release.
"""
# Semantic version (PEP 440-friendly)
__version__ = "0.3.0"
