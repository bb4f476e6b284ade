"""Tests for folio.validate.checks module."""

from __future__ import annotations

import json

import pytest

from folio.validate.checks import (
    IssueSeverity,
    IssueType,
    ProjectValidator,
    write_validation_report,
)

LONG_BODY = " ".join(["word"] * 120)


def issue_types(report, project=None, severity=None):
    return [
        i.issue_type
        for i in report.issues
        if (project is None or i.project == project) and (severity is None or i.severity is severity)
    ]


class TestProjectValidator:
    """Tests for ProjectValidator.validate()."""

    def test_clean_project_has_no_errors(self, create_project, site_paths):
        create_project("test-project", body=LONG_BODY, extra_fm={"categories": ["Automation"]})
        report = ProjectValidator(site_paths.projects).validate()
        assert report.ok
        assert report.folders_checked == 1
        assert report.projects[0].word_count == 120

    def test_missing_required_fields(self, create_project, site_paths):
        create_project("bare", title=None, description=None, date=None)
        report = ProjectValidator(site_paths.projects).validate()
        errors = [i for i in report.errors if i.issue_type is IssueType.MISSING_REQUIRED]
        assert sorted(i.field for i in errors) == ["date", "description", "title"]
        assert not report.ok

    def test_invalid_values(self, create_project, site_paths):
        create_project(
            "test-project",
            date="15/01/2024",
            extra_fm={"status": "live", "categories": []},
        )
        report = ProjectValidator(site_paths.projects).validate()
        types = issue_types(report, severity=IssueSeverity.ERROR)
        assert IssueType.INVALID_FORMAT in types
        assert types.count(IssueType.INVALID_VALUE) == 2

    def test_warnings(self, create_project, site_paths):
        create_project(
            "test-project",
            title="T" * 70,
            description="Too short",
            body="Tiny ![](images/x.png)",
        )
        report = ProjectValidator(site_paths.projects).validate()
        warnings = issue_types(report, severity=IssueSeverity.WARNING)
        assert warnings.count(IssueType.SEO_WARNING) == 2
        assert IssueType.CONTENT_WARNING in warnings
        assert IssueType.ACCESSIBILITY_WARNING in warnings
        assert IssueType.CATEGORIZATION_WARNING in warnings

    def test_suggestions(self, create_project, site_paths):
        create_project("test-project", body="See [notes](./notes.md).")
        report = ProjectValidator(site_paths.projects).validate()
        suggestions = issue_types(report, severity=IssueSeverity.SUGGESTION)
        assert IssueType.SEO_SUGGESTION in suggestions
        assert IssueType.SOCIAL_SUGGESTION in suggestions
        assert IssueType.LINK_SUGGESTION in suggestions
        assert IssueType.IMAGE_SUGGESTION in suggestions

    def test_too_many_categories(self, create_project, site_paths):
        create_project("test-project", extra_fm={"categories": list("abcdef")})
        report = ProjectValidator(site_paths.projects).validate()
        assert any("Too many categories" in i.message for i in report.warnings)

    def test_missing_hero_image(self, create_project, site_paths):
        create_project("test-project", extra_fm={"hero_image": "images/hero.png"})
        report = ProjectValidator(site_paths.projects).validate()
        assert IssueType.MISSING_IMAGE in issue_types(report, severity=IssueSeverity.ERROR)

    def test_existing_hero_image_and_empty_images_dir(self, create_project, site_paths):
        source = create_project("test-project", extra_fm={"hero_image": "hero.png"})
        (source.parent / "hero.png").write_bytes(b"png")
        (source.parent / "images").mkdir()
        report = ProjectValidator(site_paths.projects).validate()
        types = issue_types(report)
        assert IssueType.MISSING_IMAGE not in types
        assert IssueType.EMPTY_IMAGES in types

    def test_duplicate_slug_is_an_error(self, create_project, site_paths):
        create_project("same-name", title="Same Name")
        create_project("zz-copy", title="Same Name")
        report = ProjectValidator(site_paths.projects).validate()
        duplicates = [i for i in report.errors if i.issue_type is IssueType.DUPLICATE_SLUG]
        assert [i.project for i in duplicates] == ["zz-copy"]

    def test_folder_slug_mismatch_warns(self, create_project, site_paths):
        create_project("folder-name", title="Other Title")
        report = ProjectValidator(site_paths.projects).validate()
        assert any(i.field == "slug" and "differs" in i.message for i in report.warnings)

    def test_impossible_date_is_a_format_error(self, mock_site_root, site_paths):
        folder = mock_site_root / "projects" / "leap"
        folder.mkdir()
        (folder / "index.md").write_text(
            "---\ndescription: B\ndate: 2024-02-30\n---\nBody\n", encoding="utf-8"
        )

        report = ProjectValidator(site_paths.projects).validate()
        types = issue_types(report, project="leap", severity=IssueSeverity.ERROR)
        assert IssueType.PARSE_ERROR not in types
        assert IssueType.INVALID_FORMAT in types
        assert IssueType.MISSING_REQUIRED in types

    def test_unparseable_project_reported(self, mock_site_root, create_project, site_paths):
        create_project("good")
        broken = mock_site_root / "projects" / "broken"
        broken.mkdir()
        (broken / "index.md").write_text("---\ntitle: a: b\n---\n", encoding="utf-8")

        report = ProjectValidator(site_paths.projects).validate()
        assert [i.project for i in report.errors if i.issue_type is IssueType.PARSE_ERROR] == ["broken"]
        assert [p.name for p in report.projects] == ["good"]


def test_report_document(create_project, site_paths):
    create_project("bare", title=None)
    report = ProjectValidator(site_paths.projects).validate()
    path = write_validation_report(report, site_paths.validation_report)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"]["errors"] == len(report.errors) == 1
    assert data["issues"]["errors"][0] == {
        "project": "bare",
        "type": "missing_required",
        "severity": "error",
        "message": "Missing required field: title",
        "field": "title",
    }
    assert {"name", "status", "word_count"} <= set(data["projects"][0])


@pytest.mark.parametrize("severity", list(IssueSeverity))
def test_severity_values(severity):
    assert severity.value in ("error", "warning", "suggestion")
