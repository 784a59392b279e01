"""Tests for layered configuration loading."""

from pathlib import Path

import pytest
import yaml

from lhapdf_provision.core.config import FLAT_KEY_MAP, ProvisionConfig, load_config
from lhapdf_provision.core.constants import DownloadDefaults
from lhapdf_provision.core.exceptions import ConfigurationError

pytestmark = [pytest.mark.unit, pytest.mark.quick]


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:

    def test_defaults_without_file(self):
        config = load_config(use_env=False)

        assert config.data.data_dir is None
        assert config.data.default_data_dir == "lhapdf-data"
        assert config.data.pdf_dir_name == "LHAPDF"
        assert config.download.enabled is False
        assert config.download.pdf_sets == DownloadDefaults.PDF_SETS
        assert config.download.base_url == "https://lhapdfsets.web.cern.ch/current/"
        assert config.build.library_name == "lhapdf-fortrajectum"
        assert config.build.cxx == "c++"

    def test_flat_key_map_covers_documented_keys(self):
        for key in ("DATA_DIR", "DOWNLOAD_PDFS", "PDF_SETS", "PDF_BASE_URL", "MAX_ARCHIVE_BYTES",
                    "SOURCE_DIR", "INSTALL_PREFIX", "CXX", "LOG_LEVEL"):
            assert key in FLAT_KEY_MAP

    def test_compiler_taken_from_environment(self, monkeypatch):
        monkeypatch.setenv("CXX", "clang++")
        assert load_config(use_env=False).build.cxx == "clang++"


class TestFileFormats:

    def test_flat_file(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {
            "DATA_DIR": "/opt/lhapdf",
            "PDF_SETS": ["CT18NLO"],
            "DOWNLOAD_PDFS": True,
        })
        config = load_config(path, use_env=False)

        assert config.data.data_dir == Path("/opt/lhapdf")
        assert config.download.pdf_sets == ("CT18NLO",)
        assert config.download.enabled is True

    def test_nested_file(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {
            "download": {"base_url": "https://example.test", "max_retries": 2},
            "build": {"library_name": "lhapdf"},
        })
        config = load_config(path, use_env=False)

        assert config.download.base_url == "https://example.test/"
        assert config.download.max_retries == 2
        assert config.build.library_name == "lhapdf"

    def test_null_like_values_fall_back_to_default(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {"DATA_DIR": "default", "PDF_BASE_URL": "none"})
        config = load_config(path, use_env=False)

        assert config.data.data_dir is None
        assert config.download.base_url == DownloadDefaults.BASE_URL

    def test_null_timeout_in_file_disables_timeout(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {"DOWNLOAD_TIMEOUT": None})
        assert load_config(path, use_env=False).download.timeout_sec is None

    def test_null_timeout_in_nested_file(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {"download": {"timeout_sec": "null"}})
        assert load_config(path, use_env=False).download.timeout_sec is None

    def test_default_keyword_restores_timeout(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {"DOWNLOAD_TIMEOUT": "default"})
        config = load_config(path, use_env=False)
        assert config.download.timeout_sec == DownloadDefaults.TIMEOUT_SEC

    def test_unknown_keys_are_ignored(self, tmp_path, caplog):
        path = write_yaml(tmp_path / "config.yaml", {"NOT_A_KEY": 1})
        config = load_config(path, use_env=False)

        assert isinstance(config, ProvisionConfig)
        assert "NOT_A_KEY" in caplog.text


class TestPrecedence:

    def test_cli_beats_env_beats_file(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {
            "PDF_BASE_URL": "https://file.test/",
            "LIBRARY_NAME": "from-file",
            "DOWNLOAD_TIMEOUT": 30,
        })
        environ = {
            "LHAPDF_PROVISION_PDF_BASE_URL": "https://env.test/",
            "LHAPDF_PROVISION_LIBRARY_NAME": "from-env",
        }
        config = load_config(
            path,
            overrides={"PDF_BASE_URL": "https://cli.test/"},
            environ=environ,
        )

        assert config.download.base_url == "https://cli.test/"
        assert config.build.library_name == "from-env"
        assert config.download.timeout_sec == 30

    def test_env_list_is_comma_separated(self):
        config = load_config(environ={"LHAPDF_PROVISION_PDF_SETS": "A, B,C"})
        assert config.download.pdf_sets == ("A", "B", "C")

    def test_env_ignored_when_disabled(self, monkeypatch):
        monkeypatch.setenv("LHAPDF_PROVISION_LIBRARY_NAME", "from-env")
        assert load_config(use_env=False).build.library_name == "lhapdf-fortrajectum"

    def test_log_level_override_is_upper_cased(self):
        config = load_config(overrides={"LOG_LEVEL": "debug"}, use_env=False)
        assert config.system.log_level == "DEBUG"

    def test_explicit_none_override_disables_timeout(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", {"DOWNLOAD_TIMEOUT": 30})
        config = load_config(path, overrides={"DOWNLOAD_TIMEOUT": None}, use_env=False)
        assert config.download.timeout_sec is None

    def test_none_override_keeps_defaults_for_required_values(self):
        config = load_config(overrides={"PDF_BASE_URL": None, "DOWNLOAD_TIMEOUT": None}, use_env=False)
        assert config.download.base_url == DownloadDefaults.BASE_URL
        assert config.download.timeout_sec is None

    def test_env_none_disables_timeout(self):
        config = load_config(environ={"LHAPDF_PROVISION_DOWNLOAD_TIMEOUT": "none"})
        assert config.download.timeout_sec is None


class TestErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("DATA_DIR: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path, use_env=False)

    def test_non_mapping_file(self, tmp_path):
        path = write_yaml(tmp_path / "config.yaml", ["a", "b"])
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path, use_env=False)

    @pytest.mark.parametrize("overrides,key", [
        ({"MAX_ARCHIVE_BYTES": 0}, "MAX_ARCHIVE_BYTES"),
        ({"PDF_SETS": "../escape"}, "PDF_SETS"),
        ({"PDF_DIR_NAME": "/abs"}, "PDF_DIR_NAME"),
        ({"SOURCE_EXTENSION": "cc"}, "SOURCE_EXTENSION"),
        ({"LOG_FORMAT": "fancy"}, "LOG_FORMAT"),
    ])
    def test_validation_errors_name_flat_key(self, overrides, key):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(overrides=overrides, use_env=False)
        assert key in str(exc_info.value)

    def test_config_is_frozen(self):
        config = load_config(use_env=False)
        with pytest.raises(Exception):
            config.download.enabled = True
