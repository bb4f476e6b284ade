"""Flat-file to folder migration."""

from folio.migrate.migrator import MigrationResult, ProjectMigrator

__all__ = ["MigrationResult", "ProjectMigrator"]
