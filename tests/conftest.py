"""Shared test fixtures for the folio package."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

SITE_CONFIG = {
    "site_name": "Test Portfolio",
    "site_description": "Projects built for testing",
    "base_url": "https://example.com",
    "language": "en",
    "author": {
        "name": "Test Author",
        "job_title": "Automation Developer",
        "organization": "Freelance",
        "same_as": ["https://github.com/test-author"],
        "twitter_handle": "@testauthor",
    },
}

LONG_DESCRIPTION = (
    "A long enough description of a test project that explains what it does, "
    "who it is for and why it exists in this portfolio."
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep build environment variables from leaking between tests."""
    monkeypatch.setenv("FOLIO_ENV", "development")
    monkeypatch.setenv("CI", "")
    monkeypatch.delenv("FOLIO_SITE_ROOT", raising=False)

    from folio.core import config
    config.get_site_root.cache_clear()
    yield


@pytest.fixture
def mock_site_root(tmp_path, monkeypatch):
    """Create a site with folio.yaml, projects/ and the default template."""
    from folio.core import config
    from folio.pages.templates import bootstrap_template

    (tmp_path / "folio.yaml").write_text(yaml.safe_dump(SITE_CONFIG), encoding="utf-8")
    (tmp_path / "projects").mkdir()
    bootstrap_template(tmp_path / "templates" / "project.html")

    # Mock get_site_root to return our tmp_path
    config.get_site_root.cache_clear()
    monkeypatch.setattr(config, "get_site_root", lambda: tmp_path)

    return tmp_path


@pytest.fixture
def site_config(mock_site_root):
    from folio.core.config import load_site_config

    return load_site_config(mock_site_root)


@pytest.fixture
def site_paths(mock_site_root, site_config):
    from folio.core.config import get_paths

    return get_paths(mock_site_root, site_config)


@pytest.fixture
def create_project(mock_site_root):
    """Factory fixture for creating project folders with an index.md."""
    def _create(
        folder: str = "test-project",
        title: str | None = "Test Project",
        description: str | None = LONG_DESCRIPTION,
        date: str | None = "2024-01-01",
        body: str = "Test content.",
        extra_fm: dict | None = None,
    ) -> Path:
        project_dir = mock_site_root / "projects" / folder
        project_dir.mkdir(parents=True, exist_ok=True)

        fm = {}
        if title is not None:
            fm["title"] = title
        if description is not None:
            fm["description"] = description
        if date is not None:
            fm["date"] = date
        if extra_fm:
            fm.update(extra_fm)

        fm_str = yaml.safe_dump(fm, default_flow_style=False, sort_keys=False)
        source = project_dir / "index.md"
        source.write_text(f"---\n{fm_str}---\n\n{body}\n", encoding="utf-8")
        return source

    return _create


@pytest.fixture
def create_flat_project(mock_site_root):
    """Factory fixture for legacy flat projects/<name>.md files."""
    def _create(name: str, text: str) -> Path:
        source = mock_site_root / "projects" / f"{name}.md"
        source.write_text(text, encoding="utf-8")
        return source

    return _create
