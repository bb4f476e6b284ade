"""Tests for folio.legacy.pipeline module."""

from __future__ import annotations

import json
from datetime import date

from folio.core.config import SiteConfig
from folio.legacy.pipeline import LegacyPipeline, apply_legacy_defaults, parse_legacy_source

VALID = """\
---
title: Sales Dashboard
description: Power BI dashboard for the sales team.
date: 2024-02-01
categories: [Power BI]
hero_image: images/dashboard.png
---

# Dashboard

Numbers.
"""

MALFORMED = """\
---
title: Broken: but readable
categories: [Automation]
---

Body.
"""


class TestApplyLegacyDefaults:
    """Tests for apply_legacy_defaults()."""

    def test_fills_placeholders(self):
        fm = apply_legacy_defaults({}, "my_old-tool", date(2024, 1, 1))
        assert fm["title"] == "My Old Tool"
        assert fm["description"] == "My Old Tool"
        assert fm["date"] == "2024-01-01"

    def test_repairs_fields(self):
        fm = apply_legacy_defaults(
            {"title": "T", "status": "live", "image": "images/a.png", "categories": "SQL"},
            "t",
            date(2024, 1, 1),
        )
        assert fm["status"] == "published"
        assert fm["hero_image"] == "images/a.png"
        assert fm["categories"] == ["SQL"]

    def test_empty_categories_dropped(self):
        fm = apply_legacy_defaults({"title": "T", "categories": []}, "t", date(2024, 1, 1))
        assert "categories" not in fm


class TestParseLegacySource:
    def test_malformed_header_degrades(self, tmp_path):
        source = tmp_path / "broken.md"
        source.write_text(MALFORMED, encoding="utf-8")
        parsed = parse_legacy_source(source, SiteConfig(), today=date(2024, 1, 1))
        assert parsed.degraded
        assert parsed.record.title == "Broken: but readable"
        assert parsed.record.categories == ["Automation"]
        assert parsed.record.date == date(2024, 1, 1)

    def test_no_header_at_all(self, tmp_path):
        source = tmp_path / "plain-notes.md"
        source.write_text("Just some notes.", encoding="utf-8")
        parsed = parse_legacy_source(source, SiteConfig())
        assert parsed.record.title == "Plain Notes"
        assert parsed.record.slug == "plain-notes"


class TestLegacyPipeline:
    """Tests for LegacyPipeline.run()."""

    def test_builds_site_directory(self, mock_site_root, create_flat_project, site_paths, site_config):
        create_flat_project("dashboard", VALID)
        create_flat_project("broken", MALFORMED)
        (mock_site_root / "index.html").write_text("<html>home</html>")
        (mock_site_root / "css").mkdir()
        (mock_site_root / "css" / "style.css").write_text("body {}")

        result = LegacyPipeline(site_paths, site_config).run()

        assert result.ok
        assert result.degraded == ["broken"]
        output = site_paths.legacy_site / "projects"
        page = (output / "dashboard" / "index.html").read_text(encoding="utf-8")
        assert "Sales Dashboard" in page
        assert (output / "broken" / "index.html").exists()
        assert (site_paths.legacy_site / "index.html").exists()
        assert (site_paths.legacy_site / "css" / "style.css").exists()

        index = json.loads((output / "index.json").read_text(encoding="utf-8"))
        assert [e["url"] for e in index] == ["broken", "dashboard"]
        dashboard = index[1]
        assert set(dashboard) == {"title", "description", "image", "categories", "url"}
        assert dashboard["image"] == "../images/projects/dashboard/dashboard.png"

    def test_bootstraps_missing_template(self, create_flat_project, site_paths, site_config):
        site_paths.project_template.unlink()
        create_flat_project("dashboard", VALID)

        result = LegacyPipeline(site_paths, site_config, copy_static=False).run()

        assert result.template_bootstrapped
        assert site_paths.project_template.is_file()
        assert len(result.pages) == 1

    def test_no_sources(self, site_paths, site_config):
        result = LegacyPipeline(site_paths, site_config, copy_static=False).run()
        assert result.pages == []
        assert json.loads(result.index_path.read_text()) == []
