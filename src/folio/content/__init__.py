"""
Project content handling.

Provides tools for:
- Splitting and validating front matter
- Building typed project records with derived SEO fields
- Rendering Markdown bodies and measuring them
- Finding project sources on disk
"""

from folio.content.frontmatter import (
    FallbackParser,
    FrontmatterError,
    LenientFrontmatterParser,
    YamlFrontmatterParser,
    split_document,
    validate_frontmatter,
)
from folio.content.project import (
    ParsedProject,
    ProjectRecord,
    ProjectStatus,
    enhance_frontmatter,
    parse_project,
    parse_project_file,
)
from folio.content.renderer import ContentStats, RenderedContent, render_content, render_project
from folio.content.scanner import find_project_folders

__all__ = [
    "FrontmatterError",
    "YamlFrontmatterParser",
    "LenientFrontmatterParser",
    "FallbackParser",
    "split_document",
    "validate_frontmatter",
    "ProjectRecord",
    "ProjectStatus",
    "ParsedProject",
    "enhance_frontmatter",
    "parse_project",
    "parse_project_file",
    "ContentStats",
    "RenderedContent",
    "render_content",
    "render_project",
    "find_project_folders",
]
