"""Tests for LHAPDFProvisioner orchestration."""

from unittest.mock import MagicMock

import pytest

from lhapdf_provision import LHAPDFProvisioner
from lhapdf_provision.build.toolchain import BuildResult, StaticLibraryBuilder
from lhapdf_provision.core.config import load_config
from lhapdf_provision.core.exceptions import FetchFailedError, InvalidDataDirError
from lhapdf_provision.data.ingestion import ArchiveIngestor, IngestionReport

pytestmark = [pytest.mark.unit]


@pytest.fixture
def config(project_root):
    return load_config(overrides={"PROJECT_ROOT": str(project_root)}, use_env=False)


@pytest.fixture
def mock_ingestor():
    ingestor = MagicMock(spec=ArchiveIngestor)
    ingestor.ingest.return_value = IngestionReport()
    return ingestor


class TestConstruction:

    def test_overrides_with_instance_rejected(self, config):
        with pytest.raises(ValueError):
            LHAPDFProvisioner(config, overrides={"DOWNLOAD_PDFS": True})

    def test_loads_from_overrides(self, project_root):
        p = LHAPDFProvisioner(overrides={"PROJECT_ROOT": str(project_root), "LIBRARY_NAME": "lhapdf"})
        assert p.config.build.library_name == "lhapdf"


class TestProvision:

    def test_default_root_and_pdf_dir(self, config, project_root, mock_ingestor):
        summary = LHAPDFProvisioner(config, ingestor=mock_ingestor).provision()

        assert summary.data_root.path == (project_root / "lhapdf-data").resolve()
        assert summary.bootstrap.dataset_dir.path == summary.data_root.path / "LHAPDF"
        assert summary.ingestion is None
        mock_ingestor.ingest.assert_not_called()

    def test_download_uses_configured_sets(self, config, mock_ingestor):
        p = LHAPDFProvisioner(config, ingestor=mock_ingestor)
        summary = p.provision(download=True)

        names, dest = mock_ingestor.ingest.call_args.args
        assert names == ["EPPS21nlo_CT18Anlo_O16", "EPPS21nlo_CT18Anlo_Pb208"]
        assert dest == p.dataset_dir
        assert summary.ingestion is mock_ingestor.ingest.return_value

    def test_explicit_names(self, config, mock_ingestor):
        LHAPDFProvisioner(config, ingestor=mock_ingestor).download_pdf_sets(["CT18NLO"])
        assert mock_ingestor.ingest.call_args.args[0] == ["CT18NLO"]

    def test_download_failure_propagates(self, config, mock_ingestor):
        mock_ingestor.ingest.side_effect = FetchFailedError("Foo", "https://example.test/Foo.tar.gz")
        with pytest.raises(FetchFailedError):
            LHAPDFProvisioner(config, ingestor=mock_ingestor).provision(download=True)

    def test_invalid_user_dir_stops_before_anything_is_created(self, project_root, tmp_path):
        config = load_config(overrides={
            "PROJECT_ROOT": str(project_root),
            "DATA_DIR": str(tmp_path / "missing"),
        }, use_env=False)

        with pytest.raises(InvalidDataDirError):
            LHAPDFProvisioner(config).provision()
        assert not (project_root / "lhapdf-data").exists()
        assert not (tmp_path / "missing").exists()


class TestRun:

    def test_run_builds_with_data_root_define(self, config, project_root, mock_ingestor):
        builder = MagicMock(spec=StaticLibraryBuilder)
        builder.build.return_value = BuildResult(library=project_root / "build" / "lib.a", dry_run=True)
        builder.install.side_effect = lambda result: result

        summary = LHAPDFProvisioner(config, ingestor=mock_ingestor, builder=builder).run(dry_run=True)

        sources, define = builder.build.call_args.args
        assert [p.name for p in sources] == ["Config.cc", "PDF.cc", "Paths.cc"]
        assert define.value == str(summary.data_root.path)
        assert builder.build.call_args.kwargs == {"dry_run": True}
        assert summary.build.dry_run is True

    def test_real_dry_run_plan(self, config, project_root):
        summary = LHAPDFProvisioner(config).run(dry_run=True)

        compiles = summary.build.commands[:-1]
        assert len(compiles) == 3
        assert all(summary.define.as_flag() in cmd for cmd in compiles)
