"""Load dump stage - reads and validates a chip-state period dump."""

import json

from chiptheory.models.analysis import Voice
from chiptheory.models.pipeline import ProcessingContext, StageResult
from chiptheory.pipeline.base import PipelineStage


class LoadDumpStage(PipelineStage):
    """Stage 1: Load Dump.

    - Validates the dump file exists and is JSON
    - Reads one period list per voice ("p1", "p2", "t", "n")
    - Rejects values that are not integers >= -1 (-1 marks silence)

    A voice missing from the dump is treated as silent for the whole track.
    """

    SUPPORTED_EXTENSIONS = {".json"}

    @property
    def name(self) -> str:
        return "load_dump"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Execute the load stage."""
        warnings: list[str] = []

        if not context.source_path.exists():
            return self.fail(f"File not found: {context.source_path}")

        ext = context.source_path.suffix.lower()
        if ext not in self.SUPPORTED_EXTENSIONS:
            return self.fail(
                f"Unsupported format: {ext}. Supported: {', '.join(sorted(self.SUPPORTED_EXTENSIONS))}"
            )

        try:
            with open(context.source_path, encoding="utf-8") as f:
                dump = json.load(f)
        except (OSError, ValueError) as e:
            return self.fail(f"Could not read dump: {e}")

        if not isinstance(dump, dict):
            return self.fail("Dump must be a JSON object keyed by voice")

        for voice in Voice:
            values = dump.get(voice.dump_key)
            if values is None:
                warnings.append(f"{voice.value}: not in dump, treated as silent")
                context.periods[voice] = []
                continue

            error = self._validate_periods(values)
            if error:
                return self.fail(f"{voice.value}: {error}")
            context.periods[voice] = values

        frames = max((len(p) for p in context.periods.values()), default=0)
        warnings.append(
            f"Loaded {frames} frames ({frames * context.resolution_seconds:.1f}s)"
        )

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )

    def _validate_periods(self, values: object) -> str | None:
        """Describe what is wrong with a period list, None if it is valid."""
        if not isinstance(values, list):
            return "period data must be a list"
        for index, value in enumerate(values):
            if isinstance(value, bool) or not isinstance(value, int):
                return f"sample {index} is not an integer: {value!r}"
            if value < -1:
                return f"sample {index} is a negative period: {value}"
        return None
