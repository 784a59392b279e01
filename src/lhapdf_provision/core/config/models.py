# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Typed configuration models.

The configuration is split into four frozen sections. Every field carries a
flat upper-case alias (``DATA_DIR``, ``PDF_SETS``, ...) which is the key used
in flat YAML files, in ``LHAPDF_PROVISION_*`` environment variables and in
CLI overrides.
"""

import os
from pathlib import Path
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import BuildDefaults, DataLayout, DownloadDefaults

# Standard ConfigDict for all config models
FROZEN_CONFIG = ConfigDict(extra='allow', populate_by_name=True, frozen=True)


def _split_list(v):
    """Accept comma-separated strings (env vars, CLI) as well as sequences."""
    if v is None:
        return v
    if isinstance(v, str):
        return tuple(item.strip() for item in v.split(',') if item.strip())
    return tuple(v)


class SystemConfig(BaseModel):
    """Logging settings"""
    model_config = FROZEN_CONFIG

    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'] = Field(
        default='INFO', alias='LOG_LEVEL'
    )
    log_format: Literal['simple', 'detailed'] = Field(default='simple', alias='LOG_FORMAT')

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class DataConfig(BaseModel):
    """Where the data root lives and where bootstrap templates come from"""
    model_config = FROZEN_CONFIG

    data_dir: Optional[Path] = Field(default=None, alias='DATA_DIR')
    default_data_dir: str = Field(default=DataLayout.DEFAULT_DATA_DIR, alias='DEFAULT_DATA_DIR')
    pdf_dir_name: str = Field(default=DataLayout.PDF_DIR_NAME, alias='PDF_DIR_NAME')
    template_dir: Optional[Path] = Field(default=None, alias='TEMPLATE_DIR')
    project_root: Path = Field(default_factory=Path.cwd, alias='PROJECT_ROOT')

    @field_validator('data_dir', 'template_dir')
    @classmethod
    def expand_user(cls, v):
        # Deliberately not resolved: a relative data-dir must be rejected later.
        return Path(v).expanduser() if v is not None else v

    @field_validator('project_root')
    @classmethod
    def resolve_root(cls, v):
        return Path(v).expanduser().resolve()

    @field_validator('pdf_dir_name', 'default_data_dir')
    @classmethod
    def validate_relative_name(cls, v, info):
        if not v or Path(v).is_absolute() or '..' in Path(v).parts:
            raise ValueError(f"{info.field_name} must be a non-empty relative path, got {v!r}")
        return v


class DownloadConfig(BaseModel):
    """PDF set archive download settings"""
    model_config = FROZEN_CONFIG

    enabled: bool = Field(default=False, alias='DOWNLOAD_PDFS')
    pdf_sets: Tuple[str, ...] = Field(default=DownloadDefaults.PDF_SETS, alias='PDF_SETS')
    base_url: str = Field(default=DownloadDefaults.BASE_URL, alias='PDF_BASE_URL')
    max_archive_bytes: int = Field(default=DownloadDefaults.MAX_ARCHIVE_BYTES, alias='MAX_ARCHIVE_BYTES')
    timeout_sec: Optional[float] = Field(default=DownloadDefaults.TIMEOUT_SEC, alias='DOWNLOAD_TIMEOUT')
    max_retries: int = Field(default=0, alias='DOWNLOAD_RETRIES')
    continue_on_error: bool = Field(default=False, alias='CONTINUE_ON_ERROR')

    @field_validator('pdf_sets', mode='before')
    @classmethod
    def split_sets(cls, v):
        return _split_list(v)

    @field_validator('pdf_sets')
    @classmethod
    def validate_set_names(cls, v):
        for name in v:
            if '/' in name or '\\' in name or name in ('.', '..'):
                raise ValueError(f"PDF set name must be a plain name, got {name!r}")
        return v

    @field_validator('base_url')
    @classmethod
    def normalize_base_url(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("base_url must not be empty")
        return v if v.endswith('/') else v + '/'

    @field_validator('max_archive_bytes')
    @classmethod
    def validate_cap(cls, v):
        if v < 1:
            raise ValueError(f"max_archive_bytes must be at least 1, got {v}")
        return v

    @field_validator('timeout_sec')
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v

    @field_validator('max_retries')
    @classmethod
    def validate_retries(cls, v):
        if v < 0:
            raise ValueError(f"max_retries must not be negative, got {v}")
        return v


class BuildConfig(BaseModel):
    """Native toolchain settings; relative paths are taken from the project root"""
    model_config = FROZEN_CONFIG

    source_dir: Path = Field(default=Path(BuildDefaults.SOURCE_DIR), alias='SOURCE_DIR')
    source_extension: str = Field(default=BuildDefaults.SOURCE_EXTENSION, alias='SOURCE_EXTENSION')
    source_manifest: Optional[Tuple[str, ...]] = Field(default=None, alias='SOURCE_MANIFEST')
    include_dir: Path = Field(default=Path(BuildDefaults.INCLUDE_DIR), alias='INCLUDE_DIR')
    build_dir: Path = Field(default=Path(BuildDefaults.BUILD_DIR), alias='BUILD_DIR')
    install_prefix: Optional[Path] = Field(default=None, alias='INSTALL_PREFIX')
    library_name: str = Field(default=BuildDefaults.LIBRARY_NAME, alias='LIBRARY_NAME')
    cxx: str = Field(default_factory=lambda: os.environ.get('CXX') or BuildDefaults.CXX, alias='CXX')
    ar: str = Field(default_factory=lambda: os.environ.get('AR') or BuildDefaults.AR, alias='AR')
    cxx_std: str = Field(default=BuildDefaults.CXX_STD, alias='CXX_STD')
    optimize: str = Field(default=BuildDefaults.OPTIMIZE, alias='OPTIMIZE')
    extra_flags: Tuple[str, ...] = Field(default=(), alias='EXTRA_CXXFLAGS')
    link_libraries: Tuple[str, ...] = Field(default=BuildDefaults.LINK_LIBRARIES, alias='LINK_LIBRARIES')

    @field_validator('source_manifest', 'extra_flags', 'link_libraries', mode='before')
    @classmethod
    def split_lists(cls, v):
        return _split_list(v)

    @field_validator('source_extension')
    @classmethod
    def validate_extension(cls, v):
        if not v.startswith('.') or len(v) < 2:
            raise ValueError(f"source_extension must look like '.cc', got {v!r}")
        return v

    @field_validator('library_name')
    @classmethod
    def validate_library_name(cls, v):
        if not v or '/' in v:
            raise ValueError(f"library_name must be a plain name, got {v!r}")
        return v


class ProvisionConfig(BaseModel):
    """Root configuration for one provisioning/build invocation."""
    model_config = FROZEN_CONFIG

    system: SystemConfig = Field(default_factory=SystemConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    def project_path(self, path: Path) -> Path:
        """Anchor a possibly relative path at the project root."""
        return self.data.project_root / path


SECTION_MODELS = {
    'system': SystemConfig,
    'data': DataConfig,
    'download': DownloadConfig,
    'build': BuildConfig,
}
