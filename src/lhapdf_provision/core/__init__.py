# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Core building blocks: constants, exceptions, configuration and logging."""

from .constants import BuildDefaults, DataLayout, DownloadDefaults
from .exceptions import LHAPDFProvisionError
from .logging_utils import configure_logging
from .mixins import LoggingMixin

__all__ = [
    'BuildDefaults',
    'DataLayout',
    'DownloadDefaults',
    'LHAPDFProvisionError',
    'LoggingMixin',
    'configure_logging',
]
