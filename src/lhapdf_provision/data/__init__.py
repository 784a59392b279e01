# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Data directory provisioning and PDF set ingestion."""

from .archive import ExtractionResult, check_member, extract_archive_stream, merge_tree
from .bootstrap import BootstrapResult, ensure_dataset_dir
from .ingestion import ArchiveIngestor, IngestionReport, IngestResult
from .paths import DataRoot, DatasetDir, check_dataset_name, resolve_data_root
from .transport import CappedResponseReader, build_archive_url, create_session, open_archive_stream

__all__ = [
    'ArchiveIngestor',
    'BootstrapResult',
    'CappedResponseReader',
    'DataRoot',
    'DatasetDir',
    'ExtractionResult',
    'IngestResult',
    'IngestionReport',
    'build_archive_url',
    'check_dataset_name',
    'check_member',
    'create_session',
    'ensure_dataset_dir',
    'extract_archive_stream',
    'merge_tree',
    'open_archive_stream',
    'resolve_data_root',
]
