# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Layered configuration loading.

Loading precedence (highest to lowest):
1. CLI overrides (programmatic)
2. Environment variables (LHAPDF_PROVISION_*)
3. Config file (YAML)
4. Defaults from the Pydantic models

Files may use flat upper-case keys (``DATA_DIR: /opt/lhapdf``) or nested
sections (``data: {data_dir: /opt/lhapdf}``).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union, get_args

import yaml
from pydantic import ValidationError

from ..constants import ENV_PREFIX
from ..exceptions import ConfigurationError
from .models import SECTION_MODELS, ProvisionConfig

logger = logging.getLogger(__name__)


def _build_flat_key_map() -> Dict[str, Tuple[str, str]]:
    """Map each flat alias (e.g. ``PDF_SETS``) to its (section, field) location."""
    mapping = {}
    for section, model in SECTION_MODELS.items():
        for field_name, field in model.model_fields.items():
            if field.alias:
                mapping[field.alias] = (section, field_name)
    return mapping


FLAT_KEY_MAP = _build_flat_key_map()

# Marks a value that should fall back to the field default
_UNSET = object()


def _build_nullable_fields() -> Dict[str, frozenset]:
    """
    Per section, the keys whose field accepts None but defaults to something else.

    For these an explicit null is a real value (``DOWNLOAD_TIMEOUT: null`` means
    no timeout) rather than a request for the default.
    """
    nullable = {}
    for section, model in SECTION_MODELS.items():
        keys = set()
        for field_name, field in model.model_fields.items():
            has_default = field.default is not None or field.default_factory is not None
            if has_default and type(None) in get_args(field.annotation):
                keys.add(field_name)
                if field.alias:
                    keys.add(field.alias)
        nullable[section] = frozenset(keys)
    return nullable


NULLABLE_FIELDS = _build_nullable_fields()


def _coerce_value(value: Any) -> Any:
    """
    Map placeholder strings before validation; Pydantic coerces everything else.

    ``''`` and ``default`` select the field default. ``none`` and ``null``
    become None.
    """
    if isinstance(value, str):
        marker = value.strip().lower()
        if marker in ('', 'default'):
            return _UNSET
        if marker in ('none', 'null'):
            return None
    return value


def _is_nested_config(config: Mapping[str, Any]) -> bool:
    return any(
        str(key).lower() in SECTION_MODELS and isinstance(value, Mapping)
        for key, value in config.items()
    )


def _normalize_nested_config(config: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    nested: Dict[str, Dict[str, Any]] = {}
    for key, value in config.items():
        section = str(key).lower()
        if section in SECTION_MODELS and isinstance(value, Mapping):
            nested.setdefault(section, {}).update(
                {str(k): _coerce_value(v) for k, v in value.items()}
            )
        else:
            _merge_flat(nested, {key: value}, source="config file")
    return nested


def _merge_flat(nested: Dict[str, Dict[str, Any]], flat: Mapping[str, Any], source: str) -> None:
    for key, value in flat.items():
        location = FLAT_KEY_MAP.get(str(key).upper())
        if location is None:
            logger.warning(f"Ignoring unknown configuration key {key!r} from {source}")
            continue
        section, field_name = location
        nested.setdefault(section, {})[field_name] = _coerce_value(value)


def _load_env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect LHAPDF_PROVISION_* variables as flat overrides."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for env_key, env_value in environ.items():
        if env_key.startswith(ENV_PREFIX):
            overrides[env_key[len(ENV_PREFIX):].upper()] = env_value
    return overrides


def _filter_unset_values(nested: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Drop values that should fall back to field defaults.

    None is kept only for fields in NULLABLE_FIELDS; elsewhere it means "not set".
    """
    filtered = {}
    for section, values in nested.items():
        nullable = NULLABLE_FIELDS.get(section, frozenset())
        filtered[section] = {
            k: v for k, v in values.items()
            if v is not _UNSET and (v is not None or k in nullable)
        }
    return filtered


def _format_validation_error(error: ValidationError, source: str) -> str:
    """Format a Pydantic ValidationError as a readable, flat-key oriented report."""
    reverse = {location: alias for alias, location in FLAT_KEY_MAP.items()}
    error_lines = ["=" * 70, f"Configuration Validation Failed ({source})", "=" * 70]
    for err in error.errors():
        loc = tuple(str(part) for part in err['loc'])
        key = reverse.get(loc[:2], '.'.join(loc)) if len(loc) >= 2 else '.'.join(loc)
        error_lines.append(f"  - {key}: {err['msg']}")
    error_lines.append("=" * 70)
    return "\n".join(error_lines)


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    use_env: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> ProvisionConfig:
    """
    Load configuration from an optional YAML file plus env and CLI overrides.

    Args:
        path: YAML configuration file, or None for defaults only
        overrides: Flat (``DATA_DIR``) or nested CLI overrides
        use_env: Whether to read LHAPDF_PROVISION_* environment variables
        environ: Environment mapping to read instead of os.environ

    Returns:
        Validated ProvisionConfig instance

    Raises:
        ConfigurationError: If the file cannot be parsed or values are invalid
    """
    nested: Dict[str, Dict[str, Any]] = {}
    source = "defaults"

    if path is not None:
        path = Path(path).expanduser()
        source = str(path)
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not read configuration file {path}: {e}") from e
        if not isinstance(file_config, Mapping):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        if _is_nested_config(file_config):
            nested = _normalize_nested_config(file_config)
        else:
            _merge_flat(nested, file_config, source=str(path))

    if use_env:
        _merge_flat(nested, _load_env_overrides(environ), source="environment")

    if overrides:
        if _is_nested_config(overrides):
            for section, values in _normalize_nested_config(overrides).items():
                nested.setdefault(section, {}).update(values)
        else:
            _merge_flat(nested, overrides, source="command line")

    try:
        config = ProvisionConfig(**_filter_unset_values(nested))
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e, source)) from e

    logger.debug(f"Loaded configuration from {source}")
    return config
