"""Measure/beat grid derived from the two seed downbeats."""

import logging
from bisect import bisect_right
from collections.abc import Iterable
from functools import lru_cache

from chiptheory.config import DEFAULT_BEATS_PER_MEASURE
from chiptheory.models.analysis import AnalysisState, MeasuresAndBeats, Note

logger = logging.getLogger(__name__)

# Absorbs float error in anchor0 + i * L when comparing against the track end
EPSILON = 1e-9

EMPTY_GRID = MeasuresAndBeats()


def compute_grid(
    state: AnalysisState,
    notes: Iterable[Note],
    beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE,
) -> MeasuresAndBeats:
    """Extrapolate measures and beats over the whole track.

    Measure 0 sits on the first anchor and the distance to the second anchor
    is the measure length L. Measure i is placed at ``anchor0 + i * L`` unless
    ``state.corrected_measures`` overrides it; overrides never move other
    measures. Measures run backwards while they stay at or after 0 s and
    forwards while they stay at or before the end of the last note.

    Each measure is split into ``beats_per_measure`` equal beats. An
    uncorrected measure spans L, shortened when the next measure line comes
    sooner; a corrected measure spans the gap to the next measure line. The
    last measure always spans L.

    Returns an empty grid when fewer than two anchors are set, when L is not
    positive, when there are no notes or when no measure line falls inside
    the track.
    """
    duration = max((note.end for note in notes), default=None)
    if len(state.anchors) < 2 or duration is None:
        return EMPTY_GRID

    corrections = tuple(sorted(state.corrected_measures.items()))
    return _grid(state.anchors[0], state.anchors[1], corrections, duration, beats_per_measure)


@lru_cache(maxsize=128)
def _grid(
    first: float,
    second: float,
    corrections: tuple[tuple[int, float], ...],
    duration: float,
    beats_per_measure: int,
) -> MeasuresAndBeats:
    length = second - first
    if length <= 0:
        logger.debug("Degenerate measure length %.4f, no grid", length)
        return EMPTY_GRID
    if beats_per_measure < 1:
        logger.debug("Invalid beats per measure %d, no grid", beats_per_measure)
        return EMPTY_GRID

    first_index = 0
    while first + (first_index - 1) * length >= -EPSILON:
        first_index -= 1
    last_index = first_index - 1
    while first + (last_index + 1) * length <= duration + EPSILON:
        last_index += 1
    if last_index < first_index:
        logger.debug("No measure line falls inside the track, no grid")
        return EMPTY_GRID

    overrides = dict(corrections)
    ignored = [i for i in overrides if not first_index <= i <= last_index]
    if ignored:
        logger.debug("Ignoring corrections outside the grid: %s", ignored)

    indices = range(first_index, last_index + 1)
    measures = [overrides.get(index, first + index * length) for index in indices]

    beats = []
    for position, (index, start) in enumerate(zip(indices, measures)):
        span = length
        if position + 1 < len(measures):
            gap = measures[position + 1] - start
            # A corrected measure fills the gap up to the next measure line
            if index in overrides:
                span = gap
            else:
                span = min(length, gap)
        if span <= 0:
            logger.debug("Measure %d starts after the next one, using L for its beats", index)
            span = length
        beat_length = span / beats_per_measure
        beats.extend(start + j * beat_length for j in range(beats_per_measure))

    return MeasuresAndBeats(
        measures=tuple(measures),
        beats=tuple(beats),
        first_measure_index=first_index,
    )


def nominal_measure_time(state: AnalysisState, index: int) -> float | None:
    """Uncorrected position of measure ``index``, None if not seeded."""
    length = state.measure_length
    if length is None or length <= 0:
        return None
    return state.anchors[0] + index * length


def measure_time(state: AnalysisState, index: int) -> float | None:
    """Position of measure ``index`` with corrections applied."""
    if index in state.corrected_measures:
        return state.corrected_measures[index]
    return nominal_measure_time(state, index)


def nearest_measure_index(state: AnalysisState, time: float) -> int | None:
    """Index of the measure whose nominal position is closest to ``time``.

    Returns None when the state has no usable measure length.
    """
    length = state.measure_length
    if length is None or length <= 0:
        return None
    return round((time - state.anchors[0]) / length)


def measure_at(grid: MeasuresAndBeats, time: float) -> int | None:
    """Index of the measure that contains ``time``, None before the first one."""
    position = bisect_right(grid.measures, time) - 1
    if position < 0:
        return None
    return grid.measure_index(position)
