# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
PDF set archive ingestion.

For every requested set, strictly in order: build the archive URL, stream the
response through a size cap, gunzip it, and unpack the tar into the PDF
directory. By default the first failure aborts the run, since a partially
installed collection is a worse end state than none.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from ..core.constants import DownloadDefaults
from ..core.exceptions import LHAPDFProvisionError
from ..core.mixins import LoggingMixin
from .archive import extract_archive_stream
from .paths import DatasetDir, check_dataset_name
from .transport import build_archive_url, create_session, open_archive_stream


@dataclass
class IngestResult:
    """Outcome for a single PDF set."""

    name: str
    url: str
    destination: Optional[Path] = None
    bytes_downloaded: int = 0
    files_extracted: int = 0
    error: Optional[LHAPDFProvisionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IngestionReport:
    """Per-set results of one ingestion run, in request order."""

    results: List[IngestResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[IngestResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[IngestResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


class ArchiveIngestor(LoggingMixin):
    """
    Downloads and installs PDF set archives.

    Args:
        base_url: Prefix the set name is appended to
        max_archive_bytes: Hard cap on the compressed size of one archive
        timeout_sec: Socket timeout for connect and reads, None to wait forever
        max_retries: Retries for connection errors and 429/5xx responses
        continue_on_error: Record failures and carry on instead of aborting
        session: Pre-built requests session (mainly for tests)
    """

    def __init__(
        self,
        base_url: str = DownloadDefaults.BASE_URL,
        max_archive_bytes: int = DownloadDefaults.MAX_ARCHIVE_BYTES,
        timeout_sec: Optional[float] = DownloadDefaults.TIMEOUT_SEC,
        max_retries: int = 0,
        continue_on_error: bool = False,
        session: Optional[requests.Session] = None,
        logger=None,
    ):
        self.base_url = base_url
        self.max_archive_bytes = max_archive_bytes
        self.timeout_sec = timeout_sec
        self.continue_on_error = continue_on_error
        self.session = session or create_session(max_retries=max_retries)
        if logger is not None:
            self.logger = logger

    @classmethod
    def from_config(cls, download_config, session: Optional[requests.Session] = None) -> 'ArchiveIngestor':
        return cls(
            base_url=download_config.base_url,
            max_archive_bytes=download_config.max_archive_bytes,
            timeout_sec=download_config.timeout_sec,
            max_retries=download_config.max_retries,
            continue_on_error=download_config.continue_on_error,
            session=session,
        )

    def url_for(self, name: str) -> str:
        return build_archive_url(self.base_url, name)

    def ingest_one(self, name: str, dest: DatasetDir) -> IngestResult:
        """
        Download and install a single PDF set.

        Raises:
            InvalidDatasetNameError, FetchFailedError, ResponseTooLargeError,
            DecompressionFailedError, ArchiveFormatError, UnsafeArchiveEntryError,
            DatasetDirUnavailableError
        """
        check_dataset_name(name)
        url = self.url_for(name)
        self.logger.info(f"Downloading {url}. This could take a while...")

        with open_archive_stream(
            self.session, name, url, self.max_archive_bytes, timeout_sec=self.timeout_sec
        ) as stream:
            self.logger.info(f"Decompressing and extracting {name}...")
            extracted = extract_archive_stream(stream, Path(str(dest)), name)

        self.logger.info(f"Installed PDF {name!r} to {extracted.destination}")
        return IngestResult(
            name=name,
            url=url,
            destination=extracted.destination,
            bytes_downloaded=stream.bytes_read,
            files_extracted=extracted.files_extracted,
        )

    def ingest(self, names: Sequence[str], dest: DatasetDir) -> IngestionReport:
        """
        Install every named PDF set into ``dest``, in order.

        With ``continue_on_error`` off, the first failure is raised and the
        remaining sets are not attempted. With it on, failures are recorded in
        the report and processing continues.
        """
        report = IngestionReport()
        for name in names:
            try:
                result = self.ingest_one(name, dest)
            except LHAPDFProvisionError as e:
                self.logger.error(f"{e}")
                if not self.continue_on_error:
                    raise
                result = IngestResult(name=name, url=self.url_for(name), error=e)
            report.results.append(result)

        if report.failed:
            failed = ', '.join(r.name for r in report.failed)
            self.logger.warning(
                f"{len(report.succeeded)} of {len(report.results)} PDF sets installed; failed: {failed}"
            )
        return report
