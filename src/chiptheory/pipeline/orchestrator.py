"""Pipeline orchestrator for Chiptheory."""

import time
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from chiptheory.config import Settings
from chiptheory.models.pipeline import ProcessingContext, ProcessingResult
from chiptheory.pipeline.base import PipelineStage
from chiptheory.storage import AnalysisStore

console = Console()


class Pipeline:
    """Orchestrates the execution of pipeline stages."""

    def __init__(self, stages: list[PipelineStage], settings: Settings) -> None:
        """Initialize the pipeline.

        Args:
            stages: Ordered list of stages to execute.
            settings: Application settings.
        """
        self.stages = stages
        self.settings = settings

    def run(
        self,
        source_path: Path,
        output_dir: Path,
        track_id: str | None = None,
    ) -> ProcessingResult:
        """Run the full pipeline on a chip-state dump.

        Args:
            source_path: Path to the dump JSON file.
            output_dir: Directory for output files.
            track_id: Key of the saved analysis; defaults to the dump's stem.

        Returns:
            ProcessingResult with success status and details.
        """
        context = ProcessingContext(
            source_path=source_path,
            track_id=track_id or source_path.stem,
            output_dir=output_dir,
            resolution_seconds=self.settings.resolution_seconds,
            beats_per_measure=self.settings.beats_per_measure,
        )
        return self.run_context(context)

    def run_context(self, context: ProcessingContext) -> ProcessingResult:
        """Run every stage over an already initialized context."""
        start_time = time.time()
        result = ProcessingResult(success=True)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            for stage in self.stages:
                task = progress.add_task(f"[cyan]{stage.name}[/cyan]...", total=None)

                stage_result = stage.run(context)

                progress.remove_task(task)

                if stage_result.success:
                    result.stages_completed.append(stage.name)
                    result.warnings.extend(stage_result.warnings)
                    console.print(
                        f"  [green]{stage.name}[/green] "
                        f"({stage_result.duration_seconds:.2f}s)"
                    )
                else:
                    result.success = False
                    result.errors.append(
                        f"{stage.name}: {stage_result.error_message}"
                    )
                    console.print(
                        f"  [red]{stage.name}[/red] failed: "
                        f"{stage_result.error_message}"
                    )
                    break

        if result.success:
            result.output_path = context.annotation_path or context.output_dir

        result.total_duration = time.time() - start_time
        return result


def create_default_pipeline(settings: Settings, store: AnalysisStore) -> Pipeline:
    """Create a pipeline with all default stages.

    Args:
        settings: Application settings.
        store: Where saved analyses are read from.

    Returns:
        Configured Pipeline instance.
    """
    from chiptheory.stages import (
        ClassificationStage,
        FinalizeStage,
        GridStage,
        LoadDumpStage,
        SegmentationStage,
    )

    stages: list[PipelineStage] = [
        LoadDumpStage(),
        SegmentationStage(),
        GridStage(store),
        ClassificationStage(),
        FinalizeStage(),
    ]

    return Pipeline(stages, settings)
