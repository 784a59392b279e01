# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Command-line interface for lhapdf-provision."""

from .exit_codes import ExitCode

__all__ = ['ExitCode']
