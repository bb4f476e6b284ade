"""
Front matter parsing and validation.

Splits a project source into its YAML header and Markdown body. Two parser
variants share one interface:

- YamlFrontmatterParser: strict YAML via python-frontmatter
- LenientFrontmatterParser: line-based ``key: value`` extraction used when
  the header is not valid YAML (the legacy single-file pipeline)

FallbackParser chains them so callers never special-case degraded mode.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "date")
VALID_STATUSES = ("draft", "published", "archived")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_FENCE_RE = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)(.*)$", re.DOTALL)
_LINE_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*:\s*(.*)$")


class FrontmatterError(ValueError):
    """Front matter failed validation.

    Carries every problem found, not just the first one.
    """

    def __init__(self, errors: list[str], path: Path | None = None):
        self.errors = list(errors)
        self.path = path
        location = f" in {path}" if path else ""
        super().__init__(
            f"Frontmatter validation failed{location}:\n" + "\n".join(self.errors)
        )


class FrontmatterSyntaxError(FrontmatterError):
    """The header block could not be parsed at all."""


@dataclass
class ParsedDocument:
    """A source split into header fields and body text."""

    front_matter: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    degraded: bool = False


class FrontmatterParser(Protocol):
    """Anything that turns raw source text into a ParsedDocument."""

    def parse(self, text: str) -> ParsedDocument: ...


class DateAsTextLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as the text written in the header."""


DateAsTextLoader.add_constructor(
    "tag:yaml.org,2002:timestamp",
    lambda loader, node: loader.construct_scalar(node),
)


class DateAsTextHandler(YAMLHandler):
    def load(self, fm: str, **kwargs: Any) -> Any:
        kwargs.setdefault("Loader", DateAsTextLoader)
        return super().load(fm, **kwargs)


class YamlFrontmatterParser:
    """Strict YAML front matter, delimited by ``---`` lines.

    A timestamp PyYAML can't construct (``date: 2024-02-30``) is re-read as
    text so field validation reports it with everything else.
    """

    def parse(self, text: str) -> ParsedDocument:
        try:
            post = frontmatter.loads(text)
        except yaml.YAMLError as e:
            raise FrontmatterSyntaxError([f"Invalid YAML front matter: {e}"]) from e
        except (TypeError, ValueError):
            post = self._load_dates_as_text(text)

        return ParsedDocument(front_matter=dict(post.metadata), body=post.content)

    def _load_dates_as_text(self, text: str) -> frontmatter.Post:
        try:
            return frontmatter.loads(text, handler=DateAsTextHandler())
        except yaml.YAMLError as e:
            raise FrontmatterSyntaxError([f"Invalid YAML front matter: {e}"]) from e
        except (TypeError, ValueError) as e:
            raise FrontmatterSyntaxError(["Front matter must be a mapping of fields"]) from e


class LenientFrontmatterParser:
    """Best-effort ``key: value`` extraction for malformed headers.

    Understands inline lists (``[a, b]``), ``- item`` lists under an empty
    key, quoted strings and true/false. Lines it can't read are ignored.
    """

    def parse(self, text: str) -> ParsedDocument:
        match = _FENCE_RE.match(text.lstrip("﻿"))
        if not match:
            return ParsedDocument(front_matter={}, body=text, degraded=True)

        header, body = match.group(1), match.group(2)
        data: dict[str, Any] = {}
        current_list_key: str | None = None

        for raw_line in header.splitlines():
            line = raw_line.rstrip()
            if not line.strip() or line.lstrip().startswith("#"):
                continue

            stripped = line.strip()
            if stripped.startswith("- ") and current_list_key:
                data.setdefault(current_list_key, []).append(_unquote(stripped[2:].strip()))
                continue

            line_match = _LINE_RE.match(stripped)
            if not line_match:
                continue

            key, value = line_match.group(1), line_match.group(2).strip()
            if not value:
                current_list_key = key
                data[key] = []
                continue

            current_list_key = None
            data[key] = _coerce_scalar_or_list(value)

        # Keys that announced a block list but got no items are empty strings
        for key, value in list(data.items()):
            if value == []:
                data[key] = ""

        return ParsedDocument(front_matter=data, body=body.lstrip("\n"), degraded=True)


class FallbackParser:
    """Try a primary parser, degrade to a fallback on syntax errors."""

    def __init__(
        self,
        primary: FrontmatterParser | None = None,
        fallback: FrontmatterParser | None = None,
    ):
        self.primary = primary or YamlFrontmatterParser()
        self.fallback = fallback or LenientFrontmatterParser()

    def parse(self, text: str) -> ParsedDocument:
        try:
            return self.primary.parse(text)
        except FrontmatterSyntaxError as e:
            logger.warning("Falling back to lenient front matter parsing: %s", e.errors[0])
            return self.fallback.parse(text)


def split_document(text: str) -> tuple[dict[str, Any], str]:
    """Split source text into (front matter, body) with the strict parser.

    Raises:
        FrontmatterSyntaxError: If the header is not a YAML mapping
    """
    document = YamlFrontmatterParser().parse(text)
    return document.front_matter, document.body


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _coerce_scalar_or_list(value: str) -> Any:
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1].strip()
        if not inner:
            return []
        return [_unquote(item.strip()) for item in inner.split(",") if item.strip()]

    value = _unquote(value)
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def is_valid_date(value: Any) -> bool:
    """Check a date field: a YAML date or a ``YYYY-MM-DD`` calendar date."""
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        return False
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def coerce_date(value: Any) -> date:
    """Turn a validated date field into a ``datetime.date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def validate_frontmatter(front_matter: dict[str, Any]) -> list[str]:
    """Check required fields and field formats.

    Returns:
        List of error messages (empty when valid)
    """
    errors: list[str] = []

    for name in REQUIRED_FIELDS:
        value = front_matter.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(f"Missing required field: {name}")

    raw_date = front_matter.get("date")
    if raw_date not in (None, "") and not is_valid_date(raw_date):
        errors.append("Invalid date format. Use YYYY-MM-DD")

    status = front_matter.get("status")
    if status not in (None, "") and status not in VALID_STATUSES:
        errors.append("Status must be: " + ", ".join(VALID_STATUSES))

    if "categories" in front_matter:
        categories = front_matter["categories"]
        if not isinstance(categories, list) or len(categories) == 0:
            errors.append("Categories must be a non-empty list")

    return errors


def dump_document(front_matter: dict[str, Any], body: str) -> str:
    """Serialize header fields and body back into a source file."""
    post = frontmatter.Post(body, **front_matter)
    return frontmatter.dumps(post, sort_keys=False, allow_unicode=True) + "\n"
