"""Category and technology filter metadata."""

from folio.taxonomy.tags import build_tag_metadata, tag_color, write_tag_metadata

__all__ = ["build_tag_metadata", "tag_color", "write_tag_metadata"]
