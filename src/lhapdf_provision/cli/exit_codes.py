# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Process exit codes for the lhapdf-provision CLI."""

from enum import IntEnum

from ..core.exceptions import (
    ArchiveError,
    BuildError,
    ConfigurationError,
    DataAcquisitionError,
    EnvironmentSetupError,
    LHAPDFProvisionError,
    PackagingDefectError,
)


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    CONFIG_ERROR = 3
    ENVIRONMENT_ERROR = 4
    PACKAGING_ERROR = 5
    NETWORK_ERROR = 6
    ARCHIVE_ERROR = 7
    BUILD_ERROR = 8
    INTERRUPTED = 130


_ERROR_CODES = (
    (ConfigurationError, ExitCode.CONFIG_ERROR),
    (EnvironmentSetupError, ExitCode.ENVIRONMENT_ERROR),
    (PackagingDefectError, ExitCode.PACKAGING_ERROR),
    (DataAcquisitionError, ExitCode.NETWORK_ERROR),
    (ArchiveError, ExitCode.ARCHIVE_ERROR),
    (BuildError, ExitCode.BUILD_ERROR),
)


def exit_code_for(error: LHAPDFProvisionError) -> ExitCode:
    """Map an error to the exit code of its category."""
    for error_type, code in _ERROR_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.GENERAL_ERROR
