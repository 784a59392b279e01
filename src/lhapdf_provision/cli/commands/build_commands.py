# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Source assembly and static library build command handlers."""

import shlex
from argparse import Namespace

from ...provisioner import LHAPDFProvisioner
from ..exit_codes import ExitCode
from .base import BaseCommand, cli_exception_handler
from .provision_commands import report_ingestion


class BuildCommands(BaseCommand):
    """Handlers for build commands."""

    @staticmethod
    @cli_exception_handler
    def sources(args: Namespace) -> int:
        """
        Execute: lhapdf-provision sources [--manifest FILE]

        Prints the translation units in build order and the data-prefix
        define. The data root is resolved (and the default created) since
        the define embeds its absolute path.
        """
        provisioner = LHAPDFProvisioner(BaseCommand.load_config(args))
        sources = provisioner.assemble_sources(BaseCommand.get_arg(args, 'manifest'))
        define = provisioner.build_define()

        origin = "manifest" if sources.from_manifest else "directory scan"
        BaseCommand.info(f"{len(sources)} sources from {sources.src_dir} ({origin}):")
        for source in sources:
            BaseCommand.info(f"  {source.name}")
        BaseCommand.info(f"Define: {define.as_flag()}")
        return ExitCode.SUCCESS

    @staticmethod
    @cli_exception_handler
    def build(args: Namespace) -> int:
        """
        Execute: lhapdf-provision build [--download-pdfs] [--dry-run]

        Provisions the data directory, then compiles every source with the
        data-prefix define and archives and installs the static library.
        """
        provisioner = LHAPDFProvisioner(BaseCommand.load_config(args))
        dry_run = BaseCommand.get_arg(args, 'dry_run', False)

        summary = provisioner.provision()
        if summary.ingestion is not None and not summary.ingestion.ok:
            # Failed sets were already logged; the library is still buildable.
            BaseCommand.warning("Some PDF sets failed to install; continuing with the build")

        sources = provisioner.assemble_sources(BaseCommand.get_arg(args, 'manifest'))
        result = provisioner.build_library(sources, dry_run=dry_run)

        if dry_run:
            for command in result.commands:
                BaseCommand.info(shlex.join(command))
            BaseCommand.success(f"Dry run: {len(sources)} sources would build {result.library}")
        else:
            BaseCommand.success(f"Built {result.library}; installed to {result.installed_library}")

        if summary.ingestion is not None and not summary.ingestion.ok:
            return report_ingestion(summary.ingestion)
        return ExitCode.SUCCESS
