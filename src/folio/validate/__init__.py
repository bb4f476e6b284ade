"""Project validation."""

from folio.validate.checks import (
    IssueSeverity,
    IssueType,
    ProjectValidator,
    ValidationIssue,
    ValidationReport,
)

__all__ = [
    "IssueSeverity",
    "IssueType",
    "ProjectValidator",
    "ValidationIssue",
    "ValidationReport",
]
