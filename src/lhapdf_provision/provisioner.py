# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Provisioning and build orchestration.

Provides the LHAPDFProvisioner class that runs the whole flow for one
invocation: resolve the data root, initialize the PDF directory, optionally
download PDF sets, assemble the sources and build the static library. The
build never depends on the download having happened; a missing PDF set is a
runtime concern of the compiled library.

Example:
    >>> from lhapdf_provision import LHAPDFProvisioner
    >>> p = LHAPDFProvisioner(overrides={'DOWNLOAD_PDFS': True})
    >>> p.run()
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from .build.sources import BuildDefine, SourceFileSet, assemble_sources, load_manifest, make_build_define
from .build.toolchain import BuildResult, StaticLibraryBuilder, Toolchain
from .core.config import ProvisionConfig, load_config
from .core.mixins import LoggingMixin
from .data.bootstrap import BootstrapResult, ensure_dataset_dir
from .data.ingestion import ArchiveIngestor, IngestionReport
from .data.paths import DataRoot, DatasetDir, resolve_data_root


@dataclass
class RunSummary:
    """Everything one provisioning run produced."""

    data_root: DataRoot
    bootstrap: BootstrapResult
    ingestion: Optional[IngestionReport] = None
    sources: Optional[SourceFileSet] = None
    define: Optional[BuildDefine] = None
    build: Optional[BuildResult] = None


class LHAPDFProvisioner(LoggingMixin):
    """
    Coordinates data provisioning and the native build.

    Each step re-checks the filesystem; nothing is cached between runs.
    Within one instance the data root is resolved once and reused.
    """

    def __init__(
        self,
        config: Optional[Union[ProvisionConfig, str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
        ingestor: Optional[ArchiveIngestor] = None,
        builder: Optional[StaticLibraryBuilder] = None,
    ):
        if isinstance(config, ProvisionConfig):
            if overrides:
                raise ValueError("overrides cannot be combined with a ProvisionConfig instance")
            self.config = config
        else:
            self.config = load_config(config, overrides=overrides)

        self._ingestor = ingestor
        self._builder = builder
        self._data_root: Optional[DataRoot] = None
        self._bootstrap: Optional[BootstrapResult] = None

    # ------------------------------------------------------------------
    # Data directory
    # ------------------------------------------------------------------

    def resolve_data_root(self) -> DataRoot:
        if self._data_root is None:
            data = self.config.data
            self._data_root = resolve_data_root(data.data_dir, data.default_data_dir, data.project_root)
        return self._data_root

    def initialize_dataset_dir(self) -> BootstrapResult:
        if self._bootstrap is None:
            data = self.config.data
            self._bootstrap = ensure_dataset_dir(
                self.resolve_data_root(),
                fixed_name=data.pdf_dir_name,
                template_root=data.template_dir,
            )
        return self._bootstrap

    @property
    def dataset_dir(self) -> DatasetDir:
        return self.initialize_dataset_dir().dataset_dir

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    @property
    def ingestor(self) -> ArchiveIngestor:
        if self._ingestor is None:
            self._ingestor = ArchiveIngestor.from_config(self.config.download)
        return self._ingestor

    def download_pdf_sets(self, names: Optional[Sequence[str]] = None) -> IngestionReport:
        """Install the given PDF sets, or the configured list when ``names`` is empty."""
        names = list(names) if names else list(self.config.download.pdf_sets)
        self.logger.info(f"Installing {len(names)} PDF sets: {', '.join(names)}")
        return self.ingestor.ingest(names, self.dataset_dir)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def assemble_sources(self, manifest_file: Optional[Union[str, Path]] = None) -> SourceFileSet:
        build = self.config.build
        manifest = load_manifest(manifest_file) if manifest_file else build.source_manifest
        return assemble_sources(
            self.config.project_path(build.source_dir),
            extension=build.source_extension,
            manifest=manifest,
        )

    def build_define(self) -> BuildDefine:
        return make_build_define(self.resolve_data_root().path)

    @property
    def builder(self) -> StaticLibraryBuilder:
        if self._builder is None:
            self._builder = StaticLibraryBuilder(Toolchain.from_config(self.config))
        return self._builder

    def build_library(
        self,
        sources: Optional[SourceFileSet] = None,
        dry_run: bool = False,
    ) -> BuildResult:
        sources = sources if sources is not None else self.assemble_sources()
        result = self.builder.build(sources, self.build_define(), dry_run=dry_run)
        return self.builder.install(result)

    # ------------------------------------------------------------------
    # Whole flow
    # ------------------------------------------------------------------

    def provision(self, download: Optional[bool] = None) -> RunSummary:
        """Steps 1-3: data root, PDF directory and optional download."""
        data_root = self.resolve_data_root()
        bootstrap = self.initialize_dataset_dir()
        summary = RunSummary(data_root=data_root, bootstrap=bootstrap)

        download = self.config.download.enabled if download is None else download
        if download:
            summary.ingestion = self.download_pdf_sets()
        return summary

    def run(self, download: Optional[bool] = None, dry_run: bool = False) -> RunSummary:
        """Provision the data directory, then build and install the library."""
        summary = self.provision(download=download)
        summary.sources = self.assemble_sources()
        summary.define = self.build_define()
        summary.build = self.build_library(summary.sources, dry_run=dry_run)
        return summary
