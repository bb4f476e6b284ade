"""Full site build."""

from folio.build.pipeline import BuildPipeline, BuildResult

__all__ = ["BuildPipeline", "BuildResult"]
