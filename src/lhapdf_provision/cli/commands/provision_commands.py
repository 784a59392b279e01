# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Data provisioning command handlers.

Implements ``setup`` (data root plus PDF directory) and ``download``
(PDF set ingestion).
"""

from argparse import Namespace

from ...data.ingestion import IngestionReport
from ...provisioner import LHAPDFProvisioner
from ..exit_codes import ExitCode, exit_code_for
from .base import BaseCommand, cli_exception_handler


def report_ingestion(report: IngestionReport) -> int:
    """Print one line per PDF set; return the exit code of the first failure."""
    for result in report.results:
        if result.ok:
            BaseCommand.success(f"{result.name}: {result.files_extracted} files in {result.destination}")
        else:
            BaseCommand.error(f"{result.name}: {result.error}")
    if report.ok:
        return ExitCode.SUCCESS
    return exit_code_for(report.failed[0].error)


class ProvisionCommands(BaseCommand):
    """Handlers for data directory commands."""

    @staticmethod
    @cli_exception_handler
    def setup(args: Namespace) -> int:
        """
        Execute: lhapdf-provision setup [--download-pdfs]

        Resolves the data root, creates the PDF directory with its bootstrap
        files and, when enabled, downloads the configured PDF sets.
        """
        provisioner = LHAPDFProvisioner(BaseCommand.load_config(args))
        summary = provisioner.provision()

        BaseCommand.info(f"Data directory: {summary.data_root}")
        BaseCommand.info(f"PDF directory:  {summary.bootstrap.dataset_dir}")
        for name in summary.bootstrap.installed:
            BaseCommand.info(f"  installed {name}")

        if summary.ingestion is not None:
            return report_ingestion(summary.ingestion)
        BaseCommand.success("Data directory ready")
        return ExitCode.SUCCESS

    @staticmethod
    @cli_exception_handler
    def download(args: Namespace) -> int:
        """
        Execute: lhapdf-provision download [NAME ...]

        Downloads the named PDF sets, or the configured list when none are
        given, into the PDF directory.
        """
        provisioner = LHAPDFProvisioner(BaseCommand.load_config(args))
        report = provisioner.download_pdf_sets(BaseCommand.get_arg(args, 'names') or None)
        return report_ingestion(report)
