"""Finalize stage - writes annotation.json for the rendering layer."""

import json
from datetime import datetime, timezone

from chiptheory import __version__
from chiptheory.models.pipeline import ProcessingContext, StageResult
from chiptheory.pipeline.base import PipelineStage
from chiptheory.serialization import to_serializable
from chiptheory.theory.segmenter import midi_range, tonal_notes

ANNOTATION_FILENAME = "annotation.json"


class FinalizeStage(PipelineStage):
    """Stage 5: Finalize.

    Collects the notes, grid, key and per-note classification from the
    ProcessingContext and serializes them to a single JSON file:

    {output_dir}/
    └── annotation.json
        ├── trackId, sourceFile, processingDate, converterVersion
        ├── resolutionSeconds, midiRange
        ├── analysis       # saved AnalysisState
        ├── grid           # measures, beats, firstMeasureIndex
        └── voices         # per voice: notes with degree and color
    """

    @property
    def name(self) -> str:
        return "finalize"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Build and write annotation.json."""
        warnings: list[str] = []

        try:
            document = self._build_document(context)

            context.output_dir.mkdir(parents=True, exist_ok=True)
            annotation_path = context.output_dir / ANNOTATION_FILENAME
            with open(annotation_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)

            context.annotation_path = annotation_path
            warnings.append(f"Wrote {annotation_path}")

        except (OSError, TypeError, ValueError) as e:
            return self.fail(f"Failed to write annotation: {e}")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )

    def _build_document(self, context: ProcessingContext) -> dict:
        """Assemble the JSON document from the context."""
        voices = {}
        for voice, notes in context.notes.items():
            degrees = context.degrees.get(voice, [None] * len(notes))
            colors = context.colors.get(voice, [None] * len(notes))
            voices[voice.value] = [
                {
                    **to_serializable(note),
                    "degree": to_serializable(degree),
                    "color": color,
                }
                for note, degree, color in zip(notes, degrees, colors)
            ]

        return {
            "trackId": context.track_id,
            "sourceFile": context.source_path.name,
            "processingDate": datetime.now(timezone.utc).isoformat(),
            "converterVersion": __version__,
            "resolutionSeconds": context.resolution_seconds,
            "midiRange": to_serializable(midi_range(tonal_notes(context.notes))),
            "analysis": to_serializable(context.analysis),
            "grid": to_serializable(context.grid),
            "voices": voices,
        }
