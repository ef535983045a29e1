"""Grid stage - derives measures and beats from the saved annotation."""

from chiptheory.models.pipeline import ProcessingContext, StageResult
from chiptheory.pipeline.base import PipelineStage
from chiptheory.storage import AnalysisStore, load_or_default
from chiptheory.theory.grid import compute_grid
from chiptheory.theory.segmenter import tonal_notes


class GridStage(PipelineStage):
    """Stage 3: Measure Grid.

    Loads the track's saved annotation and extrapolates the measure/beat grid
    from its anchors over the pitched voices. A track without two anchors
    gets an empty grid, which is not an error.
    """

    def __init__(self, store: AnalysisStore) -> None:
        self.store = store

    @property
    def name(self) -> str:
        return "grid"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Load the annotation and compute the grid."""
        warnings: list[str] = []

        context.analysis = load_or_default(self.store, context.track_id)
        context.grid = compute_grid(
            context.analysis,
            tonal_notes(context.notes),
            context.beats_per_measure,
        )

        if context.grid.measures:
            warnings.append(
                f"{len(context.grid.measures)} measures, {len(context.grid.beats)} beats"
            )
        else:
            warnings.append(
                f"No measure grid (annotation is {context.analysis.phase.value})"
            )

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )
