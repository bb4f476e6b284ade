"""
Project source discovery.

A project lives in its own folder under the projects directory:
``projects/<folder>/index.md``. The legacy layout keeps flat
``projects/<name>.md`` files instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SOURCE_FILENAME = "index.md"

# Flat files that are never projects
NON_PROJECT_STEMS = frozenset({"template", "README", "index"})


def _visible(path: Path) -> bool:
    return not path.name.startswith((".", "_")) and not path.is_symlink()


def find_project_folders(projects_dir: Path, strict: bool = False) -> list[Path]:
    """Find every folder holding an index.md, sorted by folder name.

    Args:
        projects_dir: Directory containing one folder per project
        strict: Raise instead of returning [] when the directory is missing

    Raises:
        FileNotFoundError: If strict and projects_dir doesn't exist
    """
    projects_dir = Path(projects_dir)
    if not projects_dir.is_dir():
        if strict:
            raise FileNotFoundError(f"Projects directory not found: {projects_dir}")
        logger.warning("Projects directory not found: %s", projects_dir)
        return []

    folders = []
    for child in sorted(projects_dir.iterdir()):
        if not child.is_dir() or not _visible(child):
            continue
        source = child / SOURCE_FILENAME
        if source.is_file() and not source.is_symlink():
            folders.append(child)
    return folders


def find_flat_sources(projects_dir: Path) -> list[Path]:
    """Find legacy flat ``<name>.md`` project files, sorted by name."""
    projects_dir = Path(projects_dir)
    if not projects_dir.is_dir():
        return []
    return [
        path
        for path in sorted(projects_dir.glob("*.md"))
        if path.is_file() and _visible(path) and path.stem not in NON_PROJECT_STEMS
    ]


def source_for(folder: Path) -> Path:
    """The Markdown source inside a project folder."""
    return Path(folder) / SOURCE_FILENAME
