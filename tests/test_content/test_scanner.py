"""Tests for folio.content.scanner module."""

from __future__ import annotations

import pytest

from folio.content.scanner import find_flat_sources, find_project_folders, source_for


class TestFindProjectFolders:
    """Tests for find_project_folders()."""

    def test_only_folders_with_index_md(self, tmp_path):
        (tmp_path / "b-project").mkdir()
        (tmp_path / "b-project" / "index.md").write_text("x")
        (tmp_path / "a-project").mkdir()
        (tmp_path / "a-project" / "index.md").write_text("x")
        (tmp_path / "empty").mkdir()
        (tmp_path / "notes.md").write_text("x")

        folders = find_project_folders(tmp_path)
        assert [f.name for f in folders] == ["a-project", "b-project"]

    def test_hidden_and_underscore_folders_ignored(self, tmp_path):
        for name in (".git", "_drafts"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "index.md").write_text("x")
        assert find_project_folders(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        assert find_project_folders(tmp_path / "missing") == []

    def test_missing_directory_strict(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_project_folders(tmp_path / "missing", strict=True)


class TestFindFlatSources:
    def test_skips_non_project_files(self, tmp_path):
        for name in ("tool.md", "README.md", "template.md", "index.md", "_draft.md", "alpha.md"):
            (tmp_path / name).write_text("x")
        assert [p.name for p in find_flat_sources(tmp_path)] == ["alpha.md", "tool.md"]

    def test_missing_directory(self, tmp_path):
        assert find_flat_sources(tmp_path / "missing") == []


def test_source_for(tmp_path):
    assert source_for(tmp_path / "tool") == tmp_path / "tool" / "index.md"
