"""folio: static-site generator for a Markdown project portfolio."""

__version__ = "1.0.0"
