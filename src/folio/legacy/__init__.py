"""Legacy single-directory build."""

from folio.legacy.pipeline import LegacyPipeline, LegacyResult

__all__ = ["LegacyPipeline", "LegacyResult"]
