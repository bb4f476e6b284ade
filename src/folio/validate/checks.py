"""
Project validation.

Checks every project folder for required fields, field formats, SEO and
social fields, content quality and images, and writes a
``validation-report.json``. A broken project is reported, never fatal.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from rich.console import Console

from folio.content.frontmatter import (
    REQUIRED_FIELDS,
    VALID_STATUSES,
    FrontmatterError,
    is_valid_date,
    split_document,
)
from folio.content.renderer import count_words, extract_images, extract_links
from folio.content.scanner import find_project_folders, source_for
from folio.content.text import slugify
from folio.core.backup import safe_write_json

console = Console()
logger = logging.getLogger(__name__)

RECOMMENDED_FIELDS = ("categories", "hero_image", "slug")
SEO_FIELDS = ("seo_title", "seo_description", "canonical_url")
SOCIAL_FIELDS = ("og_title", "og_description", "twitter_card")

DESCRIPTION_MIN_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 160
TITLE_MAX_LENGTH = 60
MIN_WORD_COUNT = 100
MAX_CATEGORIES = 5


class IssueType(Enum):
    """Kinds of validation issues."""

    MISSING_REQUIRED = "missing_required"
    MISSING_RECOMMENDED = "missing_recommended"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"
    DUPLICATE_SLUG = "duplicate_slug"
    SEO_WARNING = "seo_warning"
    CONTENT_WARNING = "content_warning"
    ACCESSIBILITY_WARNING = "accessibility_warning"
    LINK_SUGGESTION = "link_suggestion"
    SEO_SUGGESTION = "seo_suggestion"
    SOCIAL_SUGGESTION = "social_suggestion"
    CATEGORIZATION_WARNING = "categorization_warning"
    MISSING_IMAGE = "missing_image"
    EMPTY_IMAGES = "empty_images"
    IMAGE_SUGGESTION = "image_suggestion"
    PARSE_ERROR = "parse_error"


class IssueSeverity(Enum):
    """Severity levels for validation issues."""

    ERROR = "error"  # Blocks a clean validation
    WARNING = "warning"  # Should be looked at
    SUGGESTION = "suggestion"  # Nice to have


@dataclass
class ValidationIssue:
    """A single problem found in one project."""

    project: str
    issue_type: IssueType
    message: str
    severity: IssueSeverity = IssueSeverity.ERROR
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "project": self.project,
            "type": self.issue_type.value,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.field:
            data["field"] = self.field
        return data


@dataclass
class ProjectSummary:
    """What the validator learned about one readable project."""

    name: str
    status: str
    word_count: int
    has_hero_image: bool
    category_count: int
    description_length: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "word_count": self.word_count,
            "has_hero_image": self.has_hero_image,
            "category_count": self.category_count,
            "description_length": self.description_length,
        }


@dataclass
class ValidationReport:
    """Result of validating every project."""

    projects: list[ProjectSummary] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)
    folders_checked: int = 0

    def by_severity(self, severity: IssueSeverity) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity is severity]

    @property
    def errors(self) -> list[ValidationIssue]:
        return self.by_severity(IssueSeverity.ERROR)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return self.by_severity(IssueSeverity.WARNING)

    @property
    def suggestions(self) -> list[ValidationIssue]:
        return self.by_severity(IssueSeverity.SUGGESTION)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self, now: datetime | None = None) -> dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        return {
            "generated": now.isoformat(),
            "summary": {
                "total_projects": len(self.projects),
                "folders_checked": self.folders_checked,
                "errors": len(self.errors),
                "warnings": len(self.warnings),
                "suggestions": len(self.suggestions),
            },
            "projects": [p.to_dict() for p in self.projects],
            "issues": {
                "errors": [i.to_dict() for i in self.errors],
                "warnings": [i.to_dict() for i in self.warnings],
                "suggestions": [i.to_dict() for i in self.suggestions],
            },
        }


class ProjectValidator:
    """Validate every project folder under a projects directory."""

    def __init__(self, projects_dir: Path):
        self.projects_dir = Path(projects_dir)

    def validate(self) -> ValidationReport:
        report = ValidationReport()
        folders = find_project_folders(self.projects_dir)
        report.folders_checked = len(folders)
        seen_slugs: dict[str, str] = {}

        for folder in folders:
            try:
                self.validate_project(folder, report, seen_slugs)
            except Exception as e:
                logger.debug("Validation crashed for %s", folder, exc_info=True)
                report.issues.append(
                    ValidationIssue(folder.name, IssueType.PARSE_ERROR, f"Failed to validate: {e}")
                )
        return report

    def validate_project(
        self,
        folder: Path,
        report: ValidationReport,
        seen_slugs: dict[str, str] | None = None,
    ) -> None:
        """Append every issue found in one project folder to the report."""
        name = folder.name
        try:
            text = source_for(folder).read_text(encoding="utf-8")
            front_matter, body = split_document(text)
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            message = e.errors[0] if isinstance(e, FrontmatterError) else str(e)
            report.issues.append(
                ValidationIssue(name, IssueType.PARSE_ERROR, f"Failed to parse markdown: {message}")
            )
            return

        issues: list[ValidationIssue] = []
        issues.extend(self.check_frontmatter(name, front_matter))
        issues.extend(self.check_content(name, body))
        issues.extend(self.check_seo(name, front_matter))
        issues.extend(self.check_images(name, folder, front_matter))
        issues.extend(self.check_slug(name, front_matter, seen_slugs if seen_slugs is not None else {}))
        report.issues.extend(issues)

        categories = front_matter.get("categories")
        description = front_matter.get("description")
        report.projects.append(
            ProjectSummary(
                name=name,
                status=str(front_matter.get("status") or "unknown"),
                word_count=count_words(body),
                has_hero_image=bool(front_matter.get("hero_image")),
                category_count=len(categories) if isinstance(categories, list) else 0,
                description_length=len(description) if isinstance(description, str) else 0,
            )
        )

    def check_frontmatter(self, name: str, fm: dict[str, Any]) -> list[ValidationIssue]:
        issues = []
        for key in REQUIRED_FIELDS:
            if not fm.get(key):
                issues.append(
                    ValidationIssue(
                        name, IssueType.MISSING_REQUIRED, f"Missing required field: {key}", field=key
                    )
                )

        for key in RECOMMENDED_FIELDS:
            if not fm.get(key):
                issues.append(
                    ValidationIssue(
                        name,
                        IssueType.MISSING_RECOMMENDED,
                        f"Missing recommended field: {key}",
                        IssueSeverity.WARNING,
                        field=key,
                    )
                )

        if fm.get("date") and not is_valid_date(fm["date"]):
            issues.append(
                ValidationIssue(
                    name, IssueType.INVALID_FORMAT, "Invalid date format. Use YYYY-MM-DD", field="date"
                )
            )

        if fm.get("status") and fm["status"] not in VALID_STATUSES:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.INVALID_VALUE,
                    "Status must be: " + ", ".join(VALID_STATUSES),
                    field="status",
                )
            )

        if "categories" in fm and not (isinstance(fm["categories"], list) and fm["categories"]):
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.INVALID_VALUE,
                    "Categories must be a non-empty list",
                    field="categories",
                )
            )

        description = fm.get("description")
        if isinstance(description, str) and description:
            if len(description) < DESCRIPTION_MIN_LENGTH:
                message = f"Description too short ({len(description)} chars). Recommended: 120-160 chars"
            elif len(description) > DESCRIPTION_MAX_LENGTH:
                message = f"Description too long ({len(description)} chars). Recommended: 120-160 chars"
            else:
                message = None
            if message:
                issues.append(
                    ValidationIssue(
                        name, IssueType.SEO_WARNING, message, IssueSeverity.WARNING, field="description"
                    )
                )

        title = fm.get("title")
        if isinstance(title, str) and len(title) > TITLE_MAX_LENGTH:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.SEO_WARNING,
                    f"Title too long ({len(title)} chars). Recommended: < 60 chars",
                    IssueSeverity.WARNING,
                    field="title",
                )
            )
        return issues

    def check_content(self, name: str, body: str) -> list[ValidationIssue]:
        issues = []
        word_count = count_words(body)
        if word_count < MIN_WORD_COUNT:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.CONTENT_WARNING,
                    f"Very short content ({word_count} words). Consider adding more detail",
                    IssueSeverity.WARNING,
                )
            )

        for link in extract_links(body):
            if link.url.startswith(("./", "../")):
                issues.append(
                    ValidationIssue(
                        name,
                        IssueType.LINK_SUGGESTION,
                        f"Consider verifying local link: {link.url}",
                        IssueSeverity.SUGGESTION,
                    )
                )

        for image in extract_images(body):
            if not image.alt.strip():
                issues.append(
                    ValidationIssue(
                        name,
                        IssueType.ACCESSIBILITY_WARNING,
                        f"Image missing alt text: {image.src}",
                        IssueSeverity.WARNING,
                    )
                )
        return issues

    def check_seo(self, name: str, fm: dict[str, Any]) -> list[ValidationIssue]:
        issues = []
        if not any(fm.get(key) for key in SEO_FIELDS):
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.SEO_SUGGESTION,
                    "Consider adding custom SEO fields for better search optimization",
                    IssueSeverity.SUGGESTION,
                )
            )
        if not any(fm.get(key) for key in SOCIAL_FIELDS):
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.SOCIAL_SUGGESTION,
                    "Consider adding Open Graph/Twitter fields for better social sharing",
                    IssueSeverity.SUGGESTION,
                )
            )

        categories = fm.get("categories")
        if not categories:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.CATEGORIZATION_WARNING,
                    "Project has no categories - will be hard to discover",
                    IssueSeverity.WARNING,
                )
            )
        elif isinstance(categories, list) and len(categories) > MAX_CATEGORIES:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.CATEGORIZATION_WARNING,
                    f"Too many categories ({len(categories)}). Recommended: 1-5",
                    IssueSeverity.WARNING,
                )
            )
        return issues

    def resolve_hero_image(self, folder: Path, hero_image: str) -> Path | None:
        """Local file a hero image path points at (None for remote URLs)."""
        if "://" in hero_image:
            return None
        if hero_image.startswith("../images/"):
            return self.projects_dir.parent / hero_image[len("../"):]
        if hero_image.startswith("/"):
            return self.projects_dir.parent / hero_image.lstrip("/")
        return folder / hero_image

    def check_images(self, name: str, folder: Path, fm: dict[str, Any]) -> list[ValidationIssue]:
        issues = []
        hero_image = fm.get("hero_image")
        if hero_image:
            image_path = self.resolve_hero_image(folder, str(hero_image))
            if image_path is not None and not image_path.exists():
                issues.append(
                    ValidationIssue(name, IssueType.MISSING_IMAGE, f"Hero image not found: {hero_image}")
                )

        images_dir = folder / "images"
        if images_dir.is_dir():
            if not any(images_dir.iterdir()):
                issues.append(
                    ValidationIssue(
                        name,
                        IssueType.EMPTY_IMAGES,
                        "Images directory exists but is empty",
                        IssueSeverity.WARNING,
                    )
                )
        elif not hero_image:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.IMAGE_SUGGESTION,
                    "Consider adding a hero image for better visual appeal",
                    IssueSeverity.SUGGESTION,
                )
            )
        return issues

    def check_slug(
        self,
        name: str,
        fm: dict[str, Any],
        seen_slugs: dict[str, str],
    ) -> list[ValidationIssue]:
        """Slugs must be unique; pages are served from the folder name."""
        source = fm.get("slug") or fm.get("title")
        if not source:
            return []

        slug = slugify(str(source))
        issues = []
        if not slug:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.INVALID_VALUE,
                    "Cannot derive a slug from the title; set slug explicitly",
                    field="slug",
                )
            )
            return issues

        if slug in seen_slugs:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.DUPLICATE_SLUG,
                    f"Slug '{slug}' is already used by {seen_slugs[slug]}",
                    field="slug",
                )
            )
        else:
            seen_slugs[slug] = name

        if slug != name:
            issues.append(
                ValidationIssue(
                    name,
                    IssueType.INVALID_VALUE,
                    f"Folder name '{name}' differs from slug '{slug}'; the page URL will not match",
                    IssueSeverity.WARNING,
                    field="slug",
                )
            )
        return issues


def write_validation_report(report: ValidationReport, path: Path, now: datetime | None = None) -> Path:
    safe_write_json(path, report.to_dict(now))
    console.print(f"[blue]Validation report saved: {path}[/blue]")
    return path


def print_validation_summary(report: ValidationReport, max_warnings: int = 5) -> None:
    """Print errors, the first few warnings and a status breakdown."""
    console.print(f"\n[cyan]Validation Summary:[/cyan] {len(report.projects)} projects validated")

    if report.errors:
        console.print(f"  [red]Errors: {len(report.errors)}[/red]")
        for issue in report.errors:
            console.print(f"    [red]•[/red] {issue.project}: {issue.message}")

    if report.warnings:
        console.print(f"  [yellow]Warnings: {len(report.warnings)}[/yellow]")
        for issue in report.warnings[:max_warnings]:
            console.print(f"    [yellow]•[/yellow] {issue.project}: {issue.message}")
        if len(report.warnings) > max_warnings:
            console.print(f"    [yellow]...[/yellow] and {len(report.warnings) - max_warnings} more warnings")

    if report.suggestions:
        console.print(f"  [blue]Suggestions: {len(report.suggestions)}[/blue] (see validation-report.json)")

    if not report.errors and not report.warnings:
        console.print("[green]✓ All projects pass validation![/green]")

    statuses = Counter(p.status for p in report.projects)
    if statuses:
        colors = {"published": "green", "draft": "yellow"}
        parts = []
        for status, count in sorted(statuses.items()):
            color = colors.get(status, "dim")
            parts.append(f"[{color}]{status}[/{color}]: {count}")
        console.print("  Status: " + ", ".join(parts))
