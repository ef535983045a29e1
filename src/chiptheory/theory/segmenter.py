"""Note segmentation - turns per-frame period series into Note events."""

from collections.abc import Iterable, Mapping, Sequence

from chiptheory.config import RESOLUTION_SECONDS
from chiptheory.models.analysis import TONAL_VOICES, Note, OscType, Pitch, Voice
from chiptheory.theory.estimator import estimate
from chiptheory.theory.pitch_table import PAUSE


def segment(
    periods: Sequence[int],
    osc_type: OscType,
    resolution: float = RESOLUTION_SECONDS,
) -> list[Note]:
    """Split a period series into notes.

    A new note starts on the first sample and whenever the estimated MIDI
    number changes. Silent runs take up time but are dropped from the result,
    so consecutive notes touch only when no silence separates them.

    Args:
        periods: One period per time step, -1 for silence.
        osc_type: Channel kind the periods come from.
        resolution: Seconds per sample.

    Returns:
        Sounding notes in ascending start order.
    """
    # (midi_number, name, start_index, raw_period) of each run
    runs: list[tuple[int, str, int, int]] = []
    for index, period in enumerate(periods):
        period = int(period)
        estimation = estimate(period, osc_type)
        if not runs or runs[-1][0] != estimation.midi_number:
            runs.append((estimation.midi_number, estimation.name, index, period))

    notes = []
    total = len(periods)
    for i, (midi_number, name, start_index, raw_period) in enumerate(runs):
        if midi_number == PAUSE.midi_number:
            continue
        end_index = runs[i + 1][2] if i + 1 < len(runs) else total
        notes.append(
            Note(
                pitch=Pitch(midi_number=midi_number, name=name),
                span=(start_index * resolution, end_index * resolution),
                raw_period=raw_period,
            )
        )
    return notes


def segment_voices(
    dump: Mapping[str, Sequence[int]],
    resolution: float = RESOLUTION_SECONDS,
) -> dict[Voice, list[Note]]:
    """Segment every voice of a chip-state dump.

    Args:
        dump: Period lists keyed by dump key ("p1", "p2", "t", "n").
            Missing voices produce empty note lists.
        resolution: Seconds per sample.
    """
    return {
        voice: segment(dump.get(voice.dump_key, []), voice.osc_type, resolution)
        for voice in Voice
    }


def tonal_notes(notes_by_voice: Mapping[Voice, list[Note]]) -> list[Note]:
    """All pitched notes (triangle, then both pulses); noise is left out."""
    notes: list[Note] = []
    for voice in TONAL_VOICES:
        notes.extend(notes_by_voice.get(voice, []))
    return notes


def is_playing(note: Note, position_ms: float) -> bool:
    """Whether the note sounds at the given playback position."""
    position = position_ms / 1000
    return note.start <= position <= note.end


def find_playing_notes(notes: Iterable[Note], position_ms: float) -> list[Note]:
    """Notes whose span covers the playback position (both ends inclusive)."""
    return [note for note in notes if is_playing(note, position_ms)]


def midi_range(notes: Iterable[Note]) -> tuple[int, int] | None:
    """Lowest and highest MIDI number among the notes, None if there are none."""
    midi_numbers = [note.midi_number for note in notes]
    if not midi_numbers:
        return None
    return min(midi_numbers), max(midi_numbers)
