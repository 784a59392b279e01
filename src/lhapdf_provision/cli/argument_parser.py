# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
lhapdf-provision CLI Argument Parser.

Commands:
    - setup: Resolve the data directory and install the bootstrap files
    - download: Fetch PDF set archives into the PDF directory
    - sources: Show the source set and the data-prefix define
    - build: Provision, then compile and install the static library
"""

import argparse
from typing import List, Optional

try:
    from lhapdf_provision.lhapdf_provision_version import __version__
except ImportError:
    __version__ = "0+unknown"

from .commands.build_commands import BuildCommands
from .commands.provision_commands import ProvisionCommands


class CLIParser:
    """
    Main CLI parser.

    Attributes:
        common_parser: Parent parser with global options (--config, --debug, etc.)
        parser: Main argument parser with all subcommands registered
    """

    def __init__(self):
        self.common_parser = self._create_common_parser()
        self.parser = self._create_parser()

    def _create_common_parser(self) -> argparse.ArgumentParser:
        """Create a parent parser with common arguments."""
        # Use SUPPRESS to avoid overwriting global flags with subcommand defaults
        parser = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)

        parser.add_argument('--config', type=str,
                            help='Path to a YAML configuration file')
        parser.add_argument('--data-dir', type=str, dest='data_dir',
                            help='Absolute path of an existing data directory '
                                 '(default: <project-root>/lhapdf-data, created if missing)')
        parser.add_argument('--project-root', type=str, dest='project_root',
                            help='Directory containing src/ and include/ (default: current directory)')
        parser.add_argument('--debug', action='store_true',
                            help='Enable debug output')
        return parser

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='lhapdf-provision',
            description='Provision LHAPDF data directories and build the LHAPDF static library',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            parents=[self.common_parser],
            epilog="""
Examples:
  lhapdf-provision setup
  lhapdf-provision setup --download-pdfs
  lhapdf-provision --data-dir /opt/lhapdf download EPPS21nlo_CT18Anlo_Pb208
  lhapdf-provision build --dry-run
"""
        )
        parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

        subparsers = parser.add_subparsers(dest='command', metavar='<command>', required=True)
        self._register_setup(subparsers)
        self._register_download(subparsers)
        self._register_sources(subparsers)
        self._register_build(subparsers)
        return parser

    def _register_setup(self, subparsers) -> None:
        setup = subparsers.add_parser(
            'setup', parents=[self.common_parser],
            help='Resolve the data directory and install lhapdf.conf / pdfsets.index',
        )
        setup.add_argument('--download-pdfs', action='store_true', dest='download_pdfs',
                           default=argparse.SUPPRESS,
                           help='Also download the configured PDF sets')
        setup.set_defaults(func=ProvisionCommands.setup)

    def _register_download(self, subparsers) -> None:
        download = subparsers.add_parser(
            'download', parents=[self.common_parser],
            help='Download and unpack PDF set archives',
        )
        download.add_argument('names', nargs='*', metavar='NAME',
                              help='PDF set names (default: the configured list)')
        download.add_argument('--base-url', type=str, dest='base_url', default=argparse.SUPPRESS,
                              help='Server prefix the archive name is appended to')
        download.add_argument('--continue-on-error', action='store_true', dest='continue_on_error',
                              default=argparse.SUPPRESS,
                              help='Keep going after a failed PDF set and report all failures')
        download.set_defaults(func=ProvisionCommands.download)

    def _register_sources(self, subparsers) -> None:
        sources = subparsers.add_parser(
            'sources', parents=[self.common_parser],
            help='List the sources that will be compiled and the data-prefix define',
        )
        sources.add_argument('--manifest', type=str, default=argparse.SUPPRESS,
                             help='File listing sources (text, one per line, or YAML list)')
        sources.set_defaults(func=BuildCommands.sources)

    def _register_build(self, subparsers) -> None:
        build = subparsers.add_parser(
            'build', parents=[self.common_parser],
            help='Provision the data directory, then build and install the static library',
        )
        build.add_argument('--download-pdfs', action='store_true', dest='download_pdfs',
                           default=argparse.SUPPRESS,
                           help='Download the configured PDF sets before building')
        build.add_argument('--manifest', type=str, default=argparse.SUPPRESS,
                           help='File listing sources (text, one per line, or YAML list)')
        build.add_argument('--dry-run', action='store_true', dest='dry_run',
                           default=argparse.SUPPRESS,
                           help='Show the compiler commands without running them')
        build.set_defaults(func=BuildCommands.build)

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(args)
