# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Custom exception hierarchy for lhapdf-provision.

Errors are grouped by who has to act on them: the user (configuration),
the machine (environment), the maintainers (packaging defects), the remote
server (acquisition) or the archive content itself. Every error carries the
path, dataset name or URL it is about so the CLI can print a single
actionable line.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union


class LHAPDFProvisionError(Exception):
    """
    Base exception for all lhapdf-provision errors.

    Catching this class catches every failure the tool raises on purpose.
    """
    pass


# =============================================================================
# User configuration
# =============================================================================

class ConfigurationError(LHAPDFProvisionError):
    """
    Configuration-related errors.

    Raised when:
    - The configuration file cannot be read or parsed
    - A configuration value fails validation
    """
    pass


class InvalidDataDirError(ConfigurationError):
    """The user-supplied data directory cannot be used."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"Could not open data-dir {self.path} (is it an absolute path to an "
            f"existing directory?){detail}"
        )


class InvalidDatasetNameError(ConfigurationError):
    """A PDF set name that cannot be used as a directory name inside the PDF directory."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid PDF set name {name!r}: {reason}")


# =============================================================================
# Environment
# =============================================================================

class EnvironmentSetupError(LHAPDFProvisionError):
    """
    Filesystem state prevents provisioning.

    Raised when directories cannot be created or files cannot be inspected
    because of permissions, disk space or similar OS-level causes.
    """

    def __init__(self, message: str, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{message} {self.path}{detail}")


class DefaultDirUnavailableError(EnvironmentSetupError):
    """The default data directory could not be created."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        super().__init__("Could not create default data directory", path, cause)


class DatasetDirUnavailableError(EnvironmentSetupError):
    """The fixed PDF subdirectory could not be opened or created."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        super().__init__("Could not open pdf-dir", path, cause)


class BootstrapProbeError(EnvironmentSetupError):
    """A bootstrap file exists but cannot be inspected."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        super().__init__("Cannot read bootstrap file", path, cause)


# =============================================================================
# Packaging
# =============================================================================

class PackagingDefectError(LHAPDFProvisionError):
    """
    A template shipped with the tool is missing or unreadable.

    This is a bug in the distribution of lhapdf-provision itself, never a
    user error.
    """

    def __init__(self, template: Union[str, Path], cause: Optional[BaseException] = None):
        self.template = str(template)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"THIS IS A BUG: packaging error, bootstrap template {self.template} "
            f"could not be installed{detail}"
        )


# =============================================================================
# Remote acquisition
# =============================================================================

class DataAcquisitionError(LHAPDFProvisionError):
    """
    Remote download failures.

    Raised when:
    - The PDF server is unreachable or returns a non-success status
    - A response exceeds the configured size cap
    """

    def __init__(self, message: str, name: str, url: str):
        self.name = name
        self.url = url
        super().__init__(message)


class FetchFailedError(DataAcquisitionError):
    """Network failure or non-success HTTP status for one dataset."""

    def __init__(self, name: str, url: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(f"Failed to download PDF set {name!r} from {url}: {cause}", name, url)


class ResponseTooLargeError(DataAcquisitionError):
    """The archive body is larger than the configured cap."""

    def __init__(self, name: str, url: str, limit: int, received: int):
        self.limit = limit
        self.received = received
        super().__init__(
            f"Response for PDF set {name!r} from {url} exceeds the size cap "
            f"({received} > {limit} bytes)",
            name,
            url,
        )


# =============================================================================
# Archive content
# =============================================================================

class ArchiveError(LHAPDFProvisionError):
    """
    Archive content failures.

    The archive is rejected as a whole; nothing from it is kept.
    """

    def __init__(self, message: str, name: str):
        self.name = name
        super().__init__(message)


class DecompressionFailedError(ArchiveError):
    """The response body is not a valid gzip stream."""

    def __init__(self, name: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(f"Could not decompress archive for PDF set {name!r}: {cause}", name)


class ArchiveFormatError(ArchiveError):
    """The decompressed stream is not a readable tar archive."""

    def __init__(self, name: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(f"Malformed tar archive for PDF set {name!r}: {cause}", name)


class UnsafeArchiveEntryError(ArchiveError):
    """An archive entry would be written outside the destination."""

    def __init__(self, name: str, entry: str, reason: str):
        self.entry = entry
        self.reason = reason
        super().__init__(
            f"Unsafe entry {entry!r} in archive for PDF set {name!r}: {reason}", name
        )


# =============================================================================
# Native build
# =============================================================================

class BuildError(LHAPDFProvisionError):
    """
    Native library build failures.

    Raised when:
    - The source set cannot be assembled
    - The compiler or archiver is missing or fails
    """
    pass


class SourceSetError(BuildError):
    """The source directory or manifest does not describe existing files."""
    pass


class ToolchainNotFoundError(BuildError):
    """A toolchain executable is not available on PATH."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"Toolchain executable not found: {executable}")


class CompilationError(BuildError):
    """A compiler or archiver invocation returned a non-zero status."""

    def __init__(self, command: list, returncode: int, stdout: str = "", stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        tail = self.stderr.strip().splitlines()[-1:] or self.stdout.strip().splitlines()[-1:]
        detail = f": {tail[0]}" if tail else ""
        super().__init__(
            f"Command failed with exit status {returncode}: {' '.join(self.command)}{detail}"
        )


# =============================================================================
# Helpers
# =============================================================================

def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ConfigurationError)
    """
    if error_type is None:
        error_type = ConfigurationError
    if not condition:
        raise error_type(message)


@contextmanager
def provision_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    error_type: type = LHAPDFProvisionError
):
    """
    Context manager for standardized error handling.

    Package errors pass through unchanged; anything else is converted to
    ``error_type`` with the original exception chained.

    Example:
        >>> with provision_error_handler("header install", logger, error_type=BuildError):
        ...     shutil.copytree(src, dst, dirs_exist_ok=True)
    """
    try:
        yield
    except LHAPDFProvisionError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        if reraise:
            raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        if reraise:
            raise error_type(f"Failed during {operation}: {e}") from e


__all__ = [
    'LHAPDFProvisionError',
    'ConfigurationError',
    'InvalidDataDirError',
    'InvalidDatasetNameError',
    'EnvironmentSetupError',
    'DefaultDirUnavailableError',
    'DatasetDirUnavailableError',
    'BootstrapProbeError',
    'PackagingDefectError',
    'DataAcquisitionError',
    'FetchFailedError',
    'ResponseTooLargeError',
    'ArchiveError',
    'DecompressionFailedError',
    'ArchiveFormatError',
    'UnsafeArchiveEntryError',
    'BuildError',
    'SourceSetError',
    'ToolchainNotFoundError',
    'CompilationError',
    'require',
    'provision_error_handler',
]
