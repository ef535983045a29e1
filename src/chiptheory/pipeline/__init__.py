"""Pipeline module for Chiptheory."""

from chiptheory.pipeline.base import PipelineStage
from chiptheory.pipeline.orchestrator import Pipeline, create_default_pipeline

__all__ = ["Pipeline", "PipelineStage", "create_default_pipeline"]
