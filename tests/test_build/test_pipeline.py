"""Tests for folio.build.pipeline module."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from folio.build.pipeline import BuildPipeline

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestBuildPipeline:
    """End-to-end builds against a temporary site."""

    def test_minimal_site(self, mock_site_root, site_paths, site_config):
        (mock_site_root / "projects" / "a").mkdir()
        (mock_site_root / "projects" / "a" / "index.md").write_text(
            "---\ntitle: A\ndescription: B\ndate: 2024-01-01\n---\n", encoding="utf-8"
        )

        result = BuildPipeline(site_paths, site_config, now=NOW).run()

        assert result.ok
        assert len(result.pages.generated) == 1
        assert (site_paths.projects / "a" / "index.html").is_file()

        index = json.loads(site_paths.index_json.read_text(encoding="utf-8"))
        assert index["projects"][0]["slug"] == "a"
        assert index["projects"][0]["categories"] == ["General"]
        assert result.seo.sitemap_url_count == 5

    def test_production_excludes_drafts_everywhere(self, create_project, site_paths, site_config):
        create_project("live", title="Live")
        create_project("wip", title="WIP", extra_fm={"status": "draft"})

        result = BuildPipeline(site_paths, site_config, production=True, now=NOW).run()

        slugs = [p["slug"] for p in json.loads(site_paths.index_json.read_text())["projects"]]
        assert slugs == ["live"]
        assert "/projects/wip" not in site_paths.sitemap.read_text(encoding="utf-8")
        assert not (site_paths.projects / "wip" / "index.html").exists()
        assert [s.folder.name for s in result.pages.skipped] == ["wip"]

    def test_duplicate_slug_gets_no_page(self, create_project, site_paths, site_config):
        create_project("first", title="Same Name", date="2024-01-01")
        create_project("second", title="Same Name", date="2024-02-01")

        result = BuildPipeline(site_paths, site_config, now=NOW).run()

        assert result.ok
        assert [p.folder.name for p in result.pages.generated] == ["first"]
        assert [s.folder.name for s in result.pages.skipped] == ["second"]
        assert not (site_paths.projects / "second" / "index.html").exists()

    def test_pages_use_build_date(self, create_project, site_paths, site_config):
        create_project("tool")
        BuildPipeline(site_paths, site_config, now=NOW).run()
        html = (site_paths.projects / "tool" / "index.html").read_text(encoding="utf-8")
        assert '"dateModified": "2024-06-01"' in html

    def test_writes_every_artifact(self, create_project, site_paths, site_config):
        create_project("tool", extra_fm={"categories": ["Automation"], "tech_stack": ["Python"]})
        BuildPipeline(site_paths, site_config, now=NOW).run()

        for path in (
            site_paths.index_json,
            site_paths.simple_index_json,
            site_paths.tags_metadata,
            site_paths.sitemap,
            site_paths.robots,
            site_paths.structured_data,
            site_paths.social_data,
            site_paths.seo_report,
        ):
            assert path.is_file(), path

    def test_invalid_project_does_not_fail_build(self, create_project, site_paths, site_config):
        create_project("good")
        create_project("broken", title=None)

        result = BuildPipeline(site_paths, site_config, now=NOW).run()

        assert result.ok
        assert [s.folder.name for s in result.index.skipped] == ["broken"]
        assert [e.folder.name for e in result.pages.errors] == ["broken"]

    def test_missing_template_is_fatal(self, create_project, site_paths, site_config):
        create_project("good")
        site_paths.project_template.unlink()
        with pytest.raises(FileNotFoundError, match="folio init"):
            BuildPipeline(site_paths, site_config, now=NOW).run()
        assert not site_paths.index_json.exists()

    def test_missing_projects_dir(self, mock_site_root, site_paths, site_config):
        (mock_site_root / "projects").rmdir()

        with pytest.raises(FileNotFoundError, match="Projects directory"):
            BuildPipeline(site_paths, site_config, strict=True, now=NOW).run()

        result = BuildPipeline(site_paths, site_config, now=NOW).run()
        assert result.index.projects == []

    def test_result_to_dict(self, create_project, site_paths, site_config):
        create_project("good")
        data = BuildPipeline(site_paths, site_config, now=NOW).run().to_dict()
        assert data["ok"] is True
        assert data["projects"] == 1
        assert len(data["seo_files"]) == 5
