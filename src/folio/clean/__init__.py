"""Removal of generated files."""

from folio.clean.cleaner import TARGET_GROUPS, Cleaner, CleanStats

__all__ = ["TARGET_GROUPS", "Cleaner", "CleanStats"]
