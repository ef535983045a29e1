"""Classification stage - scale degree and display color of every note."""

from chiptheory.models.pipeline import ProcessingContext, StageResult
from chiptheory.pipeline.base import PipelineStage
from chiptheory.theory.scale import classify, note_color


class ClassificationStage(PipelineStage):
    """Stage 4: Classification.

    With a key set, labels each note with its scale degree relative to the
    key. Without one, degrees are None and colors fall back to the voice
    color.
    """

    @property
    def name(self) -> str:
        return "classification"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Classify the notes of every voice."""
        warnings: list[str] = []
        key = context.analysis.key

        for voice, notes in context.notes.items():
            context.degrees[voice] = [classify(n.midi_number, key) for n in notes]
            context.colors[voice] = [note_color(voice, n.midi_number, key) for n in notes]

        if key is None:
            warnings.append("No key set, notes colored by voice")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )
