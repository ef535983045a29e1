"""NES APU pitch table.

Maps every piano key (A0..C8) to the timer periods the 2A03 pulse and
triangle channels would need to play it. The table is built once at import
time from 12-TET and the NTSC CPU clock, and is read-only afterwards:

    pulse:    f = CPU_CLOCK / (16 * (period + 1))
    triangle: f = CPU_CLOCK / (32 * (period + 1))

A pitch outside a channel's usable period range gets ``None`` for that
channel's fields and is skipped by the estimator.
"""

import math

import numpy as np

from chiptheory.models.analysis import OscType, PitchTableEntry

# NTSC 2A03 CPU clock in Hz
CPU_CLOCK = 1789773

REFERENCE_FREQ = 440.0  # A4
REFERENCE_MIDI = 69

PIANO_LOWEST_MIDI = 21  # A0
PIANO_HIGHEST_MIDI = 108  # C8

# 11-bit timer. Pulse periods below 8 silence the channel; triangle periods
# below 2 are ultrasonic.
PULSE_PERIOD_RANGE = (8, 2047)
TRIANGLE_PERIOD_RANGE = (2, 2047)

PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Noise channel periods map onto four pseudo-pitches above the pitched range
NOISE_MIDI_BASE = 90

PAUSE = PitchTableEntry(name="pause", midi_number=-1)


class PitchTableError(RuntimeError):
    """The pitch table cannot serve every oscillator kind."""


def midi_to_name(midi_number: int) -> str:
    """Get note name (e.g., 'C4', 'A#3')."""
    octave = (midi_number // 12) - 1
    return f"{PITCH_NAMES[midi_number % 12]}{octave}"


def midi_to_freq(midi_number: int) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return REFERENCE_FREQ * (2 ** ((midi_number - REFERENCE_MIDI) / 12.0))


def _channel_period(
    freq: float, divider: int, period_range: tuple[int, int]
) -> tuple[int, float, float] | None:
    """Nearest timer period for ``freq`` with the resulting frequency and error.

    Returns None when the period falls outside the channel's range.
    """
    period = round(CPU_CLOCK / (divider * freq) - 1)
    low, high = period_range
    if period < low or period > high:
        return None
    actual = CPU_CLOCK / (divider * (period + 1))
    cents = 1200 * math.log2(actual / freq)
    return period, actual, cents


def _build_entries() -> tuple[PitchTableEntry, ...]:
    entries = []
    for midi_number in range(PIANO_LOWEST_MIDI, PIANO_HIGHEST_MIDI + 1):
        freq = midi_to_freq(midi_number)
        pulse = _channel_period(freq, 16, PULSE_PERIOD_RANGE)
        triangle = _channel_period(freq, 32, TRIANGLE_PERIOD_RANGE)
        entries.append(
            PitchTableEntry(
                name=midi_to_name(midi_number),
                midi_number=midi_number,
                frequency=freq,
                piano_number=midi_number - PIANO_LOWEST_MIDI + 1,
                pulse_period=pulse[0] if pulse else None,
                pulse_frequency=pulse[1] if pulse else None,
                pulse_tuning_error=pulse[2] if pulse else None,
                triangle_period=triangle[0] if triangle else None,
                triangle_frequency=triangle[1] if triangle else None,
                triangle_tuning_error=triangle[2] if triangle else None,
            )
        )
    return tuple(entries)


def _period_field(entry: PitchTableEntry, osc_type: OscType) -> int | None:
    if osc_type is OscType.PULSE:
        return entry.pulse_period
    if osc_type is OscType.TRIANGLE:
        return entry.triangle_period
    raise ValueError(f"{osc_type.value} has no period table")


def _index_periods(
    entries: tuple[PitchTableEntry, ...],
) -> dict[OscType, tuple[np.ndarray, tuple[PitchTableEntry, ...]]]:
    """Per oscillator kind: period array and matching entries, in table order."""
    index = {}
    for osc_type in (OscType.PULSE, OscType.TRIANGLE):
        usable = tuple(e for e in entries if _period_field(e, osc_type) is not None)
        if not usable:
            raise PitchTableError(f"No {osc_type.value} periods in pitch table")
        periods = np.array([_period_field(e, osc_type) for e in usable], dtype=np.int64)
        index[osc_type] = (periods, usable)
    return index


NES_APU_NOTE_ESTIMATIONS = _build_entries()

_PERIOD_INDEX = _index_periods(NES_APU_NOTE_ESTIMATIONS)


def period_index(osc_type: OscType) -> tuple[np.ndarray, tuple[PitchTableEntry, ...]]:
    """Periods of ``osc_type`` and their table entries, in table order."""
    return _PERIOD_INDEX[osc_type]


def noise_entry(period: int) -> PitchTableEntry:
    """Pseudo-pitch of a noise channel period (one of four)."""
    residue = period % 4
    return PitchTableEntry(name=str(residue), midi_number=residue + NOISE_MIDI_BASE)
