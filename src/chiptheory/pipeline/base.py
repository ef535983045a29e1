"""Base classes for pipeline stages."""

import logging
import time
from abc import ABC, abstractmethod

from chiptheory.models.pipeline import ProcessingContext, StageResult

logger = logging.getLogger(__name__)


class PipelineStage(ABC):
    """Abstract base class for pipeline stages.

    Each stage implements execute() which receives a ProcessingContext,
    fills in its part of the annotation, and returns a StageResult.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this stage."""
        ...

    @abstractmethod
    def execute(self, context: ProcessingContext) -> StageResult:
        """Execute this stage.

        Args:
            context: Mutable processing context that accumulates results.

        Returns:
            StageResult indicating success/failure and any warnings.
        """
        ...

    def fail(self, message: str) -> StageResult:
        """Failed result for this stage."""
        return StageResult(
            success=False,
            stage_name=self.name,
            duration_seconds=0,
            error_message=message,
        )

    def run(self, context: ProcessingContext) -> StageResult:
        """Run the stage with timing.

        This is the public entry point that wraps execute() with timing
        and error handling.
        """
        start_time = time.perf_counter()
        try:
            result = self.execute(context)
        except Exception as e:
            logger.exception("Stage %s raised", self.name)
            result = self.fail(f"Unexpected error: {e}")
        result.duration_seconds = time.perf_counter() - start_time
        return result
