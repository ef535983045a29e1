"""Data models for Chiptheory."""

from chiptheory.models.analysis import (
    TONAL_VOICES,
    AnalysisPhase,
    AnalysisState,
    KeySignature,
    MeasuresAndBeats,
    Mode,
    Note,
    OscType,
    Pitch,
    PitchTableEntry,
    ScaleDegree,
    Voice,
)
from chiptheory.models.pipeline import ProcessingContext, ProcessingResult, StageResult

__all__ = [
    "TONAL_VOICES",
    "AnalysisPhase",
    "AnalysisState",
    "KeySignature",
    "MeasuresAndBeats",
    "Mode",
    "Note",
    "OscType",
    "Pitch",
    "PitchTableEntry",
    "ProcessingContext",
    "ProcessingResult",
    "ScaleDegree",
    "StageResult",
    "Voice",
]
