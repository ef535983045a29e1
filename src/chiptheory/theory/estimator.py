"""Nearest-pitch estimation for a single period sample."""

from functools import lru_cache

import numpy as np

from chiptheory.models.analysis import OscType, PitchTableEntry
from chiptheory.theory.pitch_table import PAUSE, noise_entry, period_index

SILENCE = -1


@lru_cache(maxsize=8192)
def estimate(period: int, osc_type: OscType) -> PitchTableEntry:
    """Map an oscillator period to the closest known pitch.

    Args:
        period: Timer period of the channel, or -1 for silence.
        osc_type: Which channel produced the period.

    Returns:
        PAUSE for silence, a synthetic pitch for noise, otherwise the table
        entry whose period for this channel is nearest. Equidistant entries
        resolve to the one that comes first in the table.
    """
    if period == SILENCE:
        return PAUSE
    osc_type = OscType(osc_type)
    if osc_type is OscType.NOISE:
        return noise_entry(period)

    periods, entries = period_index(osc_type)
    # argmin returns the first occurrence of the minimum
    return entries[int(np.argmin(np.abs(periods - period)))]
