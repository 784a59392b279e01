# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Configuration models and loading."""

from .loader import FLAT_KEY_MAP, load_config
from .models import BuildConfig, DataConfig, DownloadConfig, ProvisionConfig, SystemConfig

__all__ = [
    'BuildConfig',
    'DataConfig',
    'DownloadConfig',
    'FLAT_KEY_MAP',
    'ProvisionConfig',
    'SystemConfig',
    'load_config',
]
