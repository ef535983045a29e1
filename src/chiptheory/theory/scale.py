"""Scale-degree classification of notes once a key is known."""

from chiptheory.models.analysis import KeySignature, Mode, ScaleDegree, Voice

# Semitone offsets of each mode's seven degrees from the tonic
MODE_INTERVALS: dict[Mode, frozenset[int]] = {
    Mode.MAJOR: frozenset({0, 2, 4, 5, 7, 9, 11}),
    Mode.MINOR: frozenset({0, 2, 3, 5, 7, 8, 10}),
    Mode.DORIAN: frozenset({0, 2, 3, 5, 7, 9, 10}),
    Mode.PHRYGIAN: frozenset({0, 1, 3, 5, 7, 8, 10}),
    Mode.LYDIAN: frozenset({0, 2, 4, 6, 7, 9, 11}),
    Mode.MIXOLYDIAN: frozenset({0, 2, 4, 5, 7, 9, 10}),
    Mode.LOCRIAN: frozenset({0, 1, 3, 5, 6, 8, 10}),
}

# Degree names relative to the major scale
DEGREE_LABELS = ["1", "b2", "2", "b3", "3", "4", "#4", "5", "b6", "6", "b7", "7"]

# Used while no key is set
VOICE_COLORS: dict[Voice, str] = {
    Voice.PULSE1: "#26577C",
    Voice.PULSE2: "#AE445A",
    Voice.TRIANGLE: "#63995a",
    Voice.NOISE: "white",
}

# One hue per chromatic degree, tonic red, going round the circle
DEGREE_COLORS = [
    "#ff0000",  # 1
    "#ff7f00",  # b2
    "#ffbf00",  # 2
    "#ffff00",  # b3
    "#bfff00",  # 3
    "#00ff00",  # 4
    "#00ffbf",  # #4
    "#00bfff",  # 5
    "#007fff",  # b6
    "#0000ff",  # 6
    "#7f00ff",  # b7
    "#ff00bf",  # 7
]

CHROMATIC_COLOR = "#7f7f7f"


def classify(midi_number: int, key: KeySignature | None) -> ScaleDegree | None:
    """Scale degree of a MIDI pitch in ``key``, None when no key is set."""
    if key is None:
        return None
    interval = (midi_number - key.root) % 12
    return ScaleDegree(
        interval=interval,
        label=DEGREE_LABELS[interval],
        diatonic=interval in MODE_INTERVALS[key.mode],
    )


def note_color(voice: Voice, midi_number: int, key: KeySignature | None) -> str:
    """Display color of a note: per voice without a key, per degree with one.

    Degrees outside the mode get a neutral grey.
    """
    degree = classify(midi_number, key)
    if degree is None:
        return VOICE_COLORS[voice]
    if not degree.diatonic:
        return CHROMATIC_COLOR
    return DEGREE_COLORS[degree.interval]
