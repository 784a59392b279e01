# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""CLI command handlers."""

from .base import BaseCommand, cli_exception_handler
from .build_commands import BuildCommands
from .provision_commands import ProvisionCommands

__all__ = ['BaseCommand', 'BuildCommands', 'ProvisionCommands', 'cli_exception_handler']
