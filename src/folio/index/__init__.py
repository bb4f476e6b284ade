"""Project index aggregation."""

from folio.index.aggregator import IndexResult, build_index, write_index

__all__ = ["IndexResult", "build_index", "write_index"]
