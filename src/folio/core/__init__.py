"""Core utilities for folio."""

from folio.core.backup import create_backup, remove_path, safe_write_json, write_text_atomic
from folio.core.config import (
    AuthorConfig,
    SiteConfig,
    SitePaths,
    get_paths,
    get_site_root,
    is_production,
    is_strict,
    load_site,
    load_site_config,
)

__all__ = [
    # Backup
    "create_backup",
    "safe_write_json",
    "write_text_atomic",
    "remove_path",
    # Config
    "AuthorConfig",
    "SiteConfig",
    "SitePaths",
    "get_site_root",
    "get_paths",
    "load_site",
    "load_site_config",
    "is_production",
    "is_strict",
]
