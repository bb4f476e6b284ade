"""Tests for folio.core.backup module."""

from __future__ import annotations

import json

import pytest

from folio.core.backup import create_backup, remove_path, safe_write_json, write_text_atomic


class TestCreateBackup:
    """Tests for create_backup()."""

    def test_backs_up_file(self, tmp_path):
        source = tmp_path / "index.json"
        source.write_text("{}")
        backup = create_backup(source, tmp_path / "backup")
        assert backup.exists()
        assert backup.suffix == ".json"
        assert backup.read_text() == "{}"

    def test_backs_up_directory_with_label(self, tmp_path):
        source = tmp_path / "projects"
        source.mkdir()
        (source / "a.md").write_text("A")
        backup = create_backup(source, tmp_path / "backup", label="migration")
        assert backup.name.startswith("migration_")
        assert (backup / "a.md").read_text() == "A"

    def test_same_second_backups_do_not_collide(self, tmp_path):
        source = tmp_path / "data.txt"
        source.write_text("x")
        first = create_backup(source, tmp_path / "backup", timestamp_format="fixed")
        second = create_backup(source, tmp_path / "backup", timestamp_format="fixed")
        assert first != second
        assert first.exists() and second.exists()

    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            create_backup(tmp_path / "missing", tmp_path / "backup")

    def test_backup_dir_inside_source_is_not_copied(self, tmp_path):
        source = tmp_path / "projects"
        (source / "a").mkdir(parents=True)
        backup = create_backup(source, source / "backup")
        assert not (backup / "backup").exists()


class TestAtomicWrites:
    """Tests for write_text_atomic() and safe_write_json()."""

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "page.html"
        write_text_atomic(target, "<p>ok</p>")
        assert target.read_text(encoding="utf-8") == "<p>ok</p>"

    def test_no_temp_files_left(self, tmp_path):
        write_text_atomic(tmp_path / "out.txt", "done")
        assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]

    def test_json_keeps_unicode(self, tmp_path):
        target = tmp_path / "data.json"
        safe_write_json(target, {"title": "Café"})
        assert "Café" in target.read_text(encoding="utf-8")
        assert json.loads(target.read_text(encoding="utf-8")) == {"title": "Café"}

    def test_unserializable_raises_value_error(self, tmp_path):
        target = tmp_path / "data.json"
        with pytest.raises(ValueError):
            safe_write_json(target, {"bad": object()})
        assert not target.exists()


class TestRemovePath:
    def test_removes_file_and_tree(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_text("x")
        d = tmp_path / "d"
        (d / "nested").mkdir(parents=True)
        assert remove_path(f) is True
        assert remove_path(d) is True
        assert not f.exists() and not d.exists()

    def test_missing_path(self, tmp_path):
        assert remove_path(tmp_path / "nope") is False
