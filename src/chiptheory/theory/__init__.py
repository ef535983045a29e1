"""Core music-theory algorithms for Chiptheory."""

from chiptheory.theory.analysis_model import AnalysisModel, advance_analysis
from chiptheory.theory.estimator import estimate
from chiptheory.theory.grid import compute_grid, measure_at, nearest_measure_index
from chiptheory.theory.pitch_table import NES_APU_NOTE_ESTIMATIONS, PAUSE
from chiptheory.theory.scale import classify, note_color
from chiptheory.theory.segmenter import (
    find_playing_notes,
    midi_range,
    segment,
    segment_voices,
    tonal_notes,
)

__all__ = [
    "NES_APU_NOTE_ESTIMATIONS",
    "PAUSE",
    "AnalysisModel",
    "advance_analysis",
    "classify",
    "compute_grid",
    "estimate",
    "find_playing_notes",
    "measure_at",
    "midi_range",
    "nearest_measure_index",
    "note_color",
    "segment",
    "segment_voices",
    "tonal_notes",
]
