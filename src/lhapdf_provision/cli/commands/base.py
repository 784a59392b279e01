# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Base command class for lhapdf-provision CLI commands.

This module provides the base class that all command handlers inherit from,
plus the decorator that turns raised errors into exit codes.
"""

import functools
import sys
import traceback
from argparse import Namespace
from typing import Any, Callable, Dict, Optional

from ...core.config import ProvisionConfig, load_config
from ...core.exceptions import LHAPDFProvisionError
from ...core.logging_utils import configure_logging
from ..exit_codes import ExitCode, exit_code_for

# Namespace attribute -> flat configuration key
ARG_OVERRIDES = {
    'data_dir': 'DATA_DIR',
    'project_root': 'PROJECT_ROOT',
    'download_pdfs': 'DOWNLOAD_PDFS',
    'base_url': 'PDF_BASE_URL',
    'continue_on_error': 'CONTINUE_ON_ERROR',
}


def cli_exception_handler(func: Callable[[Namespace], int]) -> Callable[[Namespace], int]:
    """
    Convert errors raised by a command handler into exit codes.

    Package errors are printed as a single fatal line and mapped to their
    category's exit code. With --debug the traceback is printed as well.
    """
    @functools.wraps(func)
    def wrapper(args: Namespace) -> int:
        try:
            return int(func(args))
        except KeyboardInterrupt:
            print("\n⚠️  Interrupted by user", file=sys.stderr)
            return ExitCode.INTERRUPTED
        except LHAPDFProvisionError as e:
            BaseCommand.error(str(e))
            if BaseCommand.get_arg(args, 'debug', False):
                traceback.print_exc()
            return exit_code_for(e)
    return wrapper


class BaseCommand:
    """
    Base class for all CLI command handlers.

    Provides common functionality for reading arguments, loading
    configuration and printing status lines.
    """

    @staticmethod
    def get_arg(args: Namespace, name: str, default: Any = None) -> Any:
        """Read an argument that may be absent because of argparse.SUPPRESS."""
        return getattr(args, name, default)

    @staticmethod
    def build_overrides(args: Namespace) -> Dict[str, Any]:
        """Collect CLI flags that override configuration values."""
        overrides = {}
        for attr, key in ARG_OVERRIDES.items():
            value = BaseCommand.get_arg(args, attr)
            if value is not None:
                overrides[key] = value
        if BaseCommand.get_arg(args, 'debug', False):
            overrides['LOG_LEVEL'] = 'DEBUG'
        return overrides

    @staticmethod
    def load_config(args: Namespace, extra: Optional[Dict[str, Any]] = None) -> ProvisionConfig:
        """
        Load configuration with CLI overrides and set up logging from it.

        Raises:
            ConfigurationError: If the file or any value is invalid
        """
        overrides = BaseCommand.build_overrides(args)
        if extra:
            overrides.update(extra)
        config = load_config(BaseCommand.get_arg(args, 'config'), overrides=overrides)
        configure_logging(config.system.log_level, config.system.log_format)
        return config

    @staticmethod
    def info(message: str) -> None:
        print(message)

    @staticmethod
    def success(message: str) -> None:
        print(f"✅ {message}")

    @staticmethod
    def warning(message: str) -> None:
        print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error(message: str) -> None:
        print(f"❌ {message}", file=sys.stderr)
