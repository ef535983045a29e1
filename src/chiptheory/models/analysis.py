"""Core analysis data models for Chiptheory.

These models describe the notes recovered from a chip-state dump and the
user-built annotation (anchors, corrections, key) that gets persisted per
track.
"""

from dataclasses import dataclass, field
from enum import Enum


class OscType(str, Enum):
    """Oscillator kind of an APU channel."""

    PULSE = "pulse"
    TRIANGLE = "triangle"
    NOISE = "noise"


class Voice(str, Enum):
    """An APU channel as it appears in a chip-state dump."""

    PULSE1 = "pulse1"
    PULSE2 = "pulse2"
    TRIANGLE = "triangle"
    NOISE = "noise"

    @property
    def osc_type(self) -> OscType:
        if self is Voice.TRIANGLE:
            return OscType.TRIANGLE
        if self is Voice.NOISE:
            return OscType.NOISE
        return OscType.PULSE

    @property
    def dump_key(self) -> str:
        """Key of this voice's period list in a chip-state dump."""
        return {
            Voice.PULSE1: "p1",
            Voice.PULSE2: "p2",
            Voice.TRIANGLE: "t",
            Voice.NOISE: "n",
        }[self]


# Voices that carry pitched material (noise is percussion)
TONAL_VOICES = (Voice.TRIANGLE, Voice.PULSE1, Voice.PULSE2)


class Mode(str, Enum):
    """Diatonic modes a key can be set to."""

    MAJOR = "major"
    MINOR = "minor"
    DORIAN = "dorian"
    PHRYGIAN = "phrygian"
    LYDIAN = "lydian"
    MIXOLYDIAN = "mixolydian"
    LOCRIAN = "locrian"


class AnalysisPhase(str, Enum):
    """Where an annotation stands in the downbeat-picking interaction."""

    EMPTY = "empty"  # no anchors
    ONE_ANCHOR = "one_anchor"  # waiting for the second downbeat
    SEEDED = "seeded"  # two anchors, grid derivable
    CORRECTED = "corrected"  # seeded plus per-measure overrides


@dataclass(frozen=True)
class PitchTableEntry:
    """A musical pitch and the APU periods that best approximate it."""

    name: str  # e.g. "C#4"
    midi_number: int
    frequency: float = 0.0  # Hz, 12-TET
    piano_number: int | None = None  # 1-88
    pulse_period: int | None = None
    pulse_frequency: float | None = None
    pulse_tuning_error: float | None = None  # cents
    triangle_period: int | None = None
    triangle_frequency: float | None = None
    triangle_tuning_error: float | None = None  # cents


@dataclass(frozen=True)
class Pitch:
    """The pitch part of a note."""

    midi_number: int
    name: str


@dataclass(frozen=True)
class Note:
    """A sounding note recovered from a period series."""

    pitch: Pitch
    span: tuple[float, float]  # (start, end) in seconds
    raw_period: int  # period value of the note's first sample

    @property
    def start(self) -> float:
        return self.span[0]

    @property
    def end(self) -> float:
        return self.span[1]

    @property
    def duration(self) -> float:
        """Note duration in seconds."""
        return self.span[1] - self.span[0]

    @property
    def midi_number(self) -> int:
        return self.pitch.midi_number


@dataclass(frozen=True)
class KeySignature:
    """Tonal center and mode chosen by the user."""

    root: int  # pitch class, 0=C
    mode: Mode = Mode.MAJOR

    def __post_init__(self) -> None:
        if not 0 <= self.root < 12:
            raise ValueError(f"root must be a pitch class 0-11, got {self.root}")


@dataclass(frozen=True)
class AnalysisState:
    """Accumulated tonal/rhythmic annotation of one track.

    Never mutated in place: every transition returns a new instance.
    """

    key: KeySignature | None = None
    anchors: tuple[float, ...] = ()  # at most two seed downbeats, ascending
    corrected_measures: dict[int, float] = field(default_factory=dict)
    selected_downbeat_index: int | None = None

    @property
    def phase(self) -> AnalysisPhase:
        if not self.anchors:
            return AnalysisPhase.EMPTY
        if len(self.anchors) == 1:
            return AnalysisPhase.ONE_ANCHOR
        if self.corrected_measures:
            return AnalysisPhase.CORRECTED
        return AnalysisPhase.SEEDED

    @property
    def measure_length(self) -> float | None:
        """Seconds between the two anchors, if both are set."""
        if len(self.anchors) < 2:
            return None
        return self.anchors[1] - self.anchors[0]


@dataclass(frozen=True)
class MeasuresAndBeats:
    """Measure and beat timestamps derived from an AnalysisState."""

    measures: tuple[float, ...] = ()
    beats: tuple[float, ...] = ()
    first_measure_index: int = 0  # measure index of measures[0]

    def measure_index(self, position: int) -> int:
        """Measure index of the measure at ``measures[position]``."""
        return self.first_measure_index + position


@dataclass(frozen=True)
class ScaleDegree:
    """Role of a pitch relative to a key."""

    interval: int  # semitones above the tonic, 0-11
    label: str  # "1", "b3", "#4", ...
    diatonic: bool
