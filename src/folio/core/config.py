"""
Configuration and path management.

Provides site root detection, the site configuration loaded from
``folio.yaml`` and the standard paths every build step reads or writes.

Resolution order for site root:
  1. FOLIO_SITE_ROOT environment variable (highest priority)
  2. Walk up from cwd looking for a folio.yaml file
  3. Global config file (~/.config/folio/config.yaml) site_root key
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "folio.yaml"
PRODUCTION = "production"
DEVELOPMENT = "development"


@dataclass(frozen=True)
class AuthorConfig:
    """Identity of the portfolio owner, used in structured data."""

    name: str = "Portfolio Author"
    job_title: str = "Developer"
    organization: str = "Freelance"
    knows_about: tuple[str, ...] = ()
    same_as: tuple[str, ...] = ()
    twitter_handle: str = ""


@dataclass(frozen=True)
class SiteConfig:
    """Fixed site configuration shared by every pipeline stage."""

    base_url: str = "https://example.com"
    site_name: str = "Portfolio"
    site_description: str = "Personal project portfolio"
    language: str = "en"
    author: AuthorConfig = field(default_factory=AuthorConfig)
    keywords: tuple[str, ...] = ()
    projects_dir: str = "projects"
    url_prefix: str = "projects"
    templates_dir: str = "templates"
    output_dir: str = "."

    @property
    def locale(self) -> str:
        return "fr_FR" if self.language == "fr" else "en_US"

    def project_url(self, slug: str) -> str:
        """Absolute URL of a project page."""
        return f"{self.base_url}/{self.url_prefix}/{slug}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SiteConfig:
        """Build a config from a parsed folio.yaml mapping.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        author_data = data.get("author") or {}
        if isinstance(author_data, str):
            author_data = {"name": author_data}
        author = AuthorConfig(
            name=str(author_data.get("name", AuthorConfig.name)),
            job_title=str(author_data.get("job_title", AuthorConfig.job_title)),
            organization=str(author_data.get("organization", AuthorConfig.organization)),
            knows_about=tuple(author_data.get("knows_about") or ()),
            same_as=tuple(author_data.get("same_as") or ()),
            twitter_handle=str(author_data.get("twitter_handle", "")),
        )

        kwargs: dict[str, Any] = {"author": author}
        for key in (
            "base_url", "site_name", "site_description", "language",
            "projects_dir", "url_prefix", "templates_dir", "output_dir",
        ):
            if data.get(key) is not None:
                kwargs[key] = str(data[key])
        if "base_url" in kwargs:
            kwargs["base_url"] = kwargs["base_url"].rstrip("/")
        if data.get("keywords"):
            kwargs["keywords"] = tuple(data["keywords"])

        return cls(**kwargs)


@dataclass(frozen=True)
class SitePaths:
    """Standard paths for the portfolio site."""

    root: Path
    config_file: Path
    projects: Path
    templates: Path
    output: Path

    # Templates
    project_template: Path

    # Generated JSON (next to the projects)
    index_json: Path
    simple_index_json: Path
    tags_metadata: Path
    validation_report: Path

    # Generated SEO files
    sitemap: Path
    robots: Path
    structured_data: Path
    social_data: Path
    seo_report: Path

    # Backups and legacy output
    backups: Path
    legacy_site: Path


def get_global_config_path() -> Path:
    """Return the path to the global folio config file.

    Respects XDG_CONFIG_HOME if set, otherwise defaults to
    ~/.config/folio/config.yaml.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "folio" / "config.yaml"


def load_global_config() -> dict:
    """Load the global folio configuration.

    Returns:
        Configuration dict, or empty dict if file is missing or invalid.
    """
    config_path = get_global_config_path()
    if not config_path.is_file():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            return data
        return {}
    except (OSError, yaml.YAMLError):
        return {}


def _walk_up_for_config(start_path: Path) -> Path | None:
    """Walk up the directory tree looking for folio.yaml."""
    current = start_path.resolve()
    while True:
        if (current / CONFIG_FILENAME).is_file():
            return current
        if current == current.parent:
            return None
        current = current.parent


def find_site_root(start_path: Path | None = None) -> Path:
    """Find the site root using 3-tier resolution.

    Args:
        start_path: Starting path for the folio.yaml walk (defaults to cwd)

    Returns:
        Path to site root

    Raises:
        FileNotFoundError: If no site root is found by any method
    """
    env_root = os.environ.get("FOLIO_SITE_ROOT")
    if env_root:
        env_path = Path(env_root).resolve()
        if (env_path / CONFIG_FILENAME).is_file():
            return env_path
        raise FileNotFoundError(
            f"FOLIO_SITE_ROOT={env_root} does not contain a {CONFIG_FILENAME} file."
        )

    if start_path is None:
        start_path = Path.cwd()
    result = _walk_up_for_config(Path(start_path))
    if result is not None:
        return result

    site_root_str = load_global_config().get("site_root")
    if site_root_str:
        global_path = Path(site_root_str).expanduser().resolve()
        if (global_path / CONFIG_FILENAME).is_file():
            return global_path
        raise FileNotFoundError(
            f"Global config site_root={site_root_str} does not contain a {CONFIG_FILENAME} file."
        )

    raise FileNotFoundError(
        f"Could not find {CONFIG_FILENAME} starting from {start_path}. "
        f"Run 'folio init' to initialize, set FOLIO_SITE_ROOT, or configure "
        f"site_root in {get_global_config_path()}."
    )


@lru_cache(maxsize=1)
def get_site_root() -> Path:
    """Get the cached site root path."""
    return find_site_root()


def load_site_config(site_root: Path | None = None) -> SiteConfig:
    """Load folio.yaml from the site root.

    A missing or empty file yields the default configuration.

    Raises:
        ValueError: If folio.yaml is not valid YAML or not a mapping
    """
    if site_root is None:
        site_root = get_site_root()
    config_path = Path(site_root) / CONFIG_FILENAME
    if not config_path.is_file():
        return SiteConfig()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return SiteConfig()
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a mapping")
    return SiteConfig.from_dict(data)


def get_paths(site_root: Path | None = None, config: SiteConfig | None = None) -> SitePaths:
    """Get all standard paths for the site.

    Args:
        site_root: Site root path (uses cached default if not provided)
        config: Site config (loaded from the root if not provided)

    Returns:
        SitePaths dataclass with all paths
    """
    if site_root is None:
        site_root = get_site_root()
    site_root = Path(site_root)
    if config is None:
        config = load_site_config(site_root)

    projects = site_root / config.projects_dir
    templates = site_root / config.templates_dir
    output = (site_root / config.output_dir).resolve()

    return SitePaths(
        root=site_root,
        config_file=site_root / CONFIG_FILENAME,
        projects=projects,
        templates=templates,
        output=output,
        project_template=templates / "project.html",
        index_json=projects / "index.json",
        simple_index_json=projects / "index-simple.json",
        tags_metadata=projects / "tags-metadata.json",
        validation_report=projects / "validation-report.json",
        sitemap=output / "sitemap.xml",
        robots=output / "robots.txt",
        structured_data=output / "structured-data.json",
        social_data=output / "social-media-data.json",
        seo_report=output / "seo-report.json",
        backups=site_root / "backup",
        legacy_site=site_root / "_site",
    )


def get_environment() -> str:
    """Name of the current build environment."""
    return os.environ.get("FOLIO_ENV", DEVELOPMENT).strip().lower() or DEVELOPMENT


def is_production() -> bool:
    """True when building for production (drafts are excluded)."""
    return get_environment() == PRODUCTION


def is_ci() -> bool:
    """True when running under a CI service such as GitHub Actions."""
    return bool(os.environ.get("CI"))


def is_strict() -> bool:
    """Strict mode turns missing infrastructure into fatal errors."""
    return is_production() or is_ci()


def load_site(site_root: Path | None = None) -> tuple[SitePaths, SiteConfig]:
    """Resolve the site root once and return its paths and configuration.

    Raises:
        FileNotFoundError: If no site root is found
        ValueError: If folio.yaml is invalid
    """
    if site_root is None:
        site_root = get_site_root()
    config = load_site_config(site_root)
    return get_paths(site_root, config), config
