"""Segmentation stage - turns period series into notes per voice."""

from chiptheory.models.pipeline import ProcessingContext, StageResult
from chiptheory.pipeline.base import PipelineStage
from chiptheory.theory.segmenter import segment


class SegmentationStage(PipelineStage):
    """Stage 2: Segmentation.

    Estimates the pitch of every frame against the APU pitch table and cuts
    each voice into notes wherever the pitch changes. Silent runs are
    dropped.
    """

    @property
    def name(self) -> str:
        return "segmentation"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Segment every loaded voice."""
        if not context.periods:
            return self.fail("No period data loaded")

        warnings: list[str] = []
        for voice, periods in context.periods.items():
            notes = segment(periods, voice.osc_type, context.resolution_seconds)
            context.notes[voice] = notes
            warnings.append(f"{voice.value}: {len(notes)} notes")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )
