"""Tests for folio.seo.report module."""

from __future__ import annotations

from datetime import datetime, timezone

from folio.seo.report import build_recommendations, build_seo_report

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def project(slug, **extra):
    data = {
        "slug": slug,
        "status": "published",
        "title": "Short title",
        "description": "d" * 130,
        "seo_description": "d" * 130,
        "hero_image": "images/hero.png",
        "github_url": "https://github.com/me/x",
        "featured": False,
        "reading_time": 2,
        "complexity": 3,
        "categories": ["Automation"],
        "tags": ["demo"],
    }
    data.update(extra)
    return data


class TestRecommendations:
    """Tests for build_recommendations()."""

    def test_nothing_to_recommend(self):
        assert build_recommendations([project("a")]) == []

    def test_grouped_by_type_with_slugs(self):
        recs = build_recommendations(
            [
                project("a", seo_description="short"),
                project("b", hero_image=None, github_url=None),
                project("c", title="T" * 70),
            ]
        )
        by_type = {r["type"]: r for r in recs}
        assert [r["type"] for r in recs] == ["meta_description", "images", "title_length", "github_links"]
        assert by_type["meta_description"]["priority"] == "high"
        assert by_type["meta_description"]["projects"] == ["a"]
        assert by_type["images"]["count"] == 1
        assert by_type["title_length"]["projects"] == ["c"]
        assert by_type["github_links"]["priority"] == "low"


class TestSeoReport:
    """Tests for build_seo_report()."""

    def test_summary_counts_published(self):
        entries = [project("a", featured=True), project("b", status="draft"), project("c", reading_time=3)]
        report = build_seo_report(entries, NOW)
        summary = report["summary"]
        assert summary["total_projects"] == 3
        assert summary["published_projects"] == 2
        assert summary["featured_projects"] == 1
        # (2 + 3) / 2 rounds half up
        assert summary["average_reading_time"] == 3
        assert report["seo"]["sitemap"]["urls"] == 6
        assert report["content_analysis"]["categories_distribution"] == {"Automation": 2}

    def test_content_analysis(self):
        report = build_seo_report([project("a", description="tiny", hero_image=None)], NOW)
        analysis = report["content_analysis"]
        assert analysis["missing_descriptions"] == 1
        assert analysis["short_descriptions"] == 1
        assert analysis["missing_images"] == 1
        assert analysis["long_titles"] == 0

    def test_empty(self):
        report = build_seo_report([], NOW)
        assert report["summary"]["average_reading_time"] == 0
        assert report["recommendations"] == []
