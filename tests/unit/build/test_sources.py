"""Tests for source assembly and the data-prefix define."""

import pytest

from lhapdf_provision.build.sources import (
    BuildDefine,
    assemble_sources,
    load_manifest,
    make_build_define,
)
from lhapdf_provision.core.exceptions import SourceSetError

pytestmark = [pytest.mark.unit, pytest.mark.build, pytest.mark.quick]


class TestAssembleSources:

    def test_scan_is_sorted_and_filtered(self, project_root):
        sources = assemble_sources(project_root / "src")

        assert [p.name for p in sources] == ["Config.cc", "PDF.cc", "Paths.cc"]
        assert all(p.is_absolute() for p in sources)
        assert sources.from_manifest is False

    def test_scan_is_deterministic(self, project_root):
        first = assemble_sources(project_root / "src")
        second = assemble_sources(project_root / "src")
        assert first.files == second.files

    def test_scan_is_not_recursive(self, project_root):
        (project_root / "src" / "nested").mkdir()
        (project_root / "src" / "nested" / "Hidden.cc").write_text("")

        sources = assemble_sources(project_root / "src")

        assert "Hidden.cc" not in [p.name for p in sources]

    def test_directory_named_like_source_is_skipped(self, project_root):
        (project_root / "src" / "weird.cc").mkdir()
        sources = assemble_sources(project_root / "src")
        assert "weird.cc" not in [p.name for p in sources]

    def test_manifest_order_is_kept(self, project_root):
        sources = assemble_sources(project_root / "src", manifest=["Paths.cc", "PDF.cc"])

        assert [p.name for p in sources] == ["Paths.cc", "PDF.cc"]
        assert sources.from_manifest is True

    def test_manifest_entry_missing(self, project_root):
        with pytest.raises(SourceSetError, match="Gone.cc"):
            assemble_sources(project_root / "src", manifest=["PDF.cc", "Gone.cc"])

    def test_missing_source_dir(self, tmp_path):
        with pytest.raises(SourceSetError, match="not found"):
            assemble_sources(tmp_path / "nope")

    def test_empty_directory(self, tmp_path):
        sources = assemble_sources(tmp_path)
        assert len(sources) == 0

    def test_other_extension(self, project_root):
        (project_root / "src" / "extra.cpp").write_text("")
        sources = assemble_sources(project_root / "src", extension=".cpp")
        assert [p.name for p in sources] == ["extra.cpp"]


class TestLoadManifest:

    def test_text_manifest(self, tmp_path):
        path = tmp_path / "sources.txt"
        path.write_text("# core\nPDF.cc\n\nConfig.cc  # config\n")
        assert load_manifest(path) == ("PDF.cc", "Config.cc")

    def test_yaml_manifest(self, tmp_path):
        path = tmp_path / "sources.yaml"
        path.write_text("- PDF.cc\n- Paths.cc\n")
        assert load_manifest(path) == ("PDF.cc", "Paths.cc")

    def test_yaml_manifest_must_be_list(self, tmp_path):
        path = tmp_path / "sources.yml"
        path.write_text("sources: PDF.cc\n")
        with pytest.raises(SourceSetError, match="list"):
            load_manifest(path)

    def test_unreadable_manifest(self, tmp_path):
        with pytest.raises(SourceSetError):
            load_manifest(tmp_path / "missing.txt")


class TestBuildDefine:

    def test_define_string(self, tmp_path):
        define = make_build_define(tmp_path)

        assert define == BuildDefine("LHAPDF_DATA_PREFIX", str(tmp_path))
        assert str(define) == f'LHAPDF_DATA_PREFIX="{tmp_path}"'
        assert define.as_flag() == f'-DLHAPDF_DATA_PREFIX="{tmp_path}"'

    def test_quote_in_path_rejected(self):
        with pytest.raises(SourceSetError):
            make_build_define('/data/we"ird')
