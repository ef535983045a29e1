"""Pipeline processing models for Chiptheory.

These models track state as a chip-state dump moves through the processing
pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path

from chiptheory.config import DEFAULT_BEATS_PER_MEASURE, RESOLUTION_SECONDS
from chiptheory.models.analysis import (
    AnalysisState,
    MeasuresAndBeats,
    Note,
    ScaleDegree,
    Voice,
)


@dataclass
class ProcessingContext:
    """Mutable state passed through pipeline stages."""

    # Input
    source_path: Path
    track_id: str = ""

    # Directories
    output_dir: Path = field(default_factory=lambda: Path("./output"))

    # Sampling
    resolution_seconds: float = RESOLUTION_SECONDS
    beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE

    # Raw period series (Stage 1) - keyed by voice
    periods: dict[Voice, list[int]] = field(default_factory=dict)

    # Note data (Stage 2) - keyed by voice
    notes: dict[Voice, list[Note]] = field(default_factory=dict)

    # Annotation (Stage 3)
    analysis: AnalysisState = field(default_factory=AnalysisState)
    grid: MeasuresAndBeats = field(default_factory=MeasuresAndBeats)

    # Per-note classification (Stage 4) - parallel to notes[voice]
    degrees: dict[Voice, list[ScaleDegree | None]] = field(default_factory=dict)
    colors: dict[Voice, list[str]] = field(default_factory=dict)

    # Final output
    annotation_path: Path | None = None


@dataclass
class StageResult:
    """Result of a pipeline stage execution."""

    success: bool
    stage_name: str
    duration_seconds: float
    error_message: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class ProcessingResult:
    """Final result of the complete pipeline execution."""

    success: bool
    output_path: Path | None = None
    stages_completed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    total_duration: float = 0.0
