"""Tests for folio.taxonomy.tags module."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone

from folio.taxonomy.tags import (
    TAG_COLORS,
    build_filter_config,
    build_tag_metadata,
    collect_tag_stats,
    tag_color,
    write_tag_metadata,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)

ENTRIES = [
    {"categories": ["Automation", "AI"], "tags": ["bots"], "tech_stack": ["Python", "n8n"]},
    {"categories": ["Automation"], "tags": [], "tech_stack": ["Python", "Docker"]},
    {"categories": ["Power BI"], "tags": ["bots", "sales"], "tech_stack": ["SQL"]},
]


class TestFilterConfig:
    """Tests for build_filter_config()."""

    def test_categories_and_popular_tech(self):
        filters = build_filter_config(collect_tag_stats(ENTRIES))
        assert filters == ["Automation", "Python", "AI", "Power BI"]

    def test_single_use_tech_is_not_a_filter(self):
        filters = build_filter_config(collect_tag_stats(ENTRIES))
        assert "Docker" not in filters
        assert "SQL" not in filters


class TestTagColor:
    def test_palette(self):
        assert tag_color("Python") == TAG_COLORS["python"]
        assert tag_color("Power BI") == TAG_COLORS["power-bi"]

    def test_generated_colour_is_stable(self):
        first = tag_color("Kubernetes")
        assert first == tag_color("Kubernetes")
        match = re.fullmatch(r"hsl\((\d+), (\d+)%, (\d+)%\)", first)
        assert match
        hue, saturation, lightness = map(int, match.groups())
        assert 0 <= hue < 360
        assert 60 <= saturation < 90
        assert 45 <= lightness < 65


class TestTagMetadata:
    """Tests for build_tag_metadata() and write_tag_metadata()."""

    def test_document(self):
        metadata = build_tag_metadata(ENTRIES, now=NOW)
        assert metadata["generated_at"] == NOW.isoformat()
        assert metadata["summary"] == {
            "total_categories": 3,
            "total_tags": 2,
            "total_tech_stack": 4,
            "total_filters": 4,
        }
        automation = next(c for c in metadata["categories"] if c["name"] == "Automation")
        assert automation == {
            "name": "Automation",
            "slug": "automation",
            "count": 2,
            "color": TAG_COLORS["automation"],
        }
        python = next(f for f in metadata["filters"] if f["name"] == "Python")
        assert python["type"] == "technology"
        assert python["count"] == 2

    def test_empty(self):
        metadata = build_tag_metadata([], now=NOW)
        assert metadata["filters"] == []
        assert metadata["summary"]["total_categories"] == 0

    def test_write(self, tmp_path):
        path = tmp_path / "tags-metadata.json"
        write_tag_metadata(ENTRIES, path, now=NOW)
        assert json.loads(path.read_text(encoding="utf-8"))["summary"]["total_tags"] == 2
