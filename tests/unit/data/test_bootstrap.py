"""Tests for PDF directory initialization."""

import pytest

from lhapdf_provision.core.exceptions import (
    BootstrapProbeError,
    DatasetDirUnavailableError,
    PackagingDefectError,
)
from lhapdf_provision.data.bootstrap import ensure_dataset_dir
from lhapdf_provision.data.paths import DataRoot
from lhapdf_provision.resources import get_template

pytestmark = [pytest.mark.unit, pytest.mark.data, pytest.mark.quick]


@pytest.fixture
def data_root(tmp_path):
    root = tmp_path / "data"
    root.mkdir()
    return DataRoot(path=root.resolve(), is_default=True)


class TestEnsureDatasetDir:

    def test_fresh_root_gets_bundled_templates(self, data_root):
        result = ensure_dataset_dir(data_root)

        pdf_dir = data_root.path / "LHAPDF"
        assert result.dataset_dir.path == pdf_dir
        assert result.installed == ["lhapdf.conf", "pdfsets.index"]
        assert (pdf_dir / "lhapdf.conf").read_bytes() == get_template("lhapdf.conf").read_bytes()
        assert (pdf_dir / "pdfsets.index").is_file()

    def test_second_run_installs_nothing(self, data_root):
        ensure_dataset_dir(data_root)
        result = ensure_dataset_dir(data_root)

        assert result.installed == []
        assert result.present == ["lhapdf.conf", "pdfsets.index"]

    def test_user_files_are_never_overwritten(self, data_root):
        pdf_dir = data_root.path / "LHAPDF"
        pdf_dir.mkdir()
        (pdf_dir / "lhapdf.conf").write_text("Verbosity: 3\n")

        result = ensure_dataset_dir(data_root)

        assert (pdf_dir / "lhapdf.conf").read_text() == "Verbosity: 3\n"
        assert result.installed == ["pdfsets.index"]
        assert result.present == ["lhapdf.conf"]

    def test_custom_template_root(self, data_root, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "lhapdf.conf").write_text("custom\n")
        (templates / "pdfsets.index").write_text("")

        ensure_dataset_dir(data_root, template_root=templates)

        assert (data_root.path / "LHAPDF" / "lhapdf.conf").read_text() == "custom\n"

    def test_missing_template_is_packaging_defect(self, data_root, tmp_path):
        empty = tmp_path / "empty-templates"
        empty.mkdir()

        with pytest.raises(PackagingDefectError) as exc_info:
            ensure_dataset_dir(data_root, template_root=empty)
        assert "THIS IS A BUG" in str(exc_info.value)

    def test_directory_squatting_on_bootstrap_name(self, data_root):
        (data_root.path / "LHAPDF" / "lhapdf.conf").mkdir(parents=True)

        with pytest.raises(BootstrapProbeError):
            ensure_dataset_dir(data_root)

    def test_file_in_place_of_pdf_dir(self, data_root):
        (data_root.path / "LHAPDF").write_text("oops")

        with pytest.raises(DatasetDirUnavailableError, match="Could not open pdf-dir"):
            ensure_dataset_dir(data_root)

    def test_custom_fixed_name(self, data_root):
        result = ensure_dataset_dir(data_root, fixed_name="pdfs")
        assert result.dataset_dir.path == data_root.path / "pdfs"
        assert result.dataset_dir.root == data_root
