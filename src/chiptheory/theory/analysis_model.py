"""Downbeat-picking interaction over an AnalysisState.

The user builds the measure grid by clicking notes:

1. With no downbeat selected, a click marks the note's onset as the first
   downbeat and selects it.
2. The next click commits the second downbeat; the distance between the two
   onsets is one measure.
3. Once seeded, a click selects the measure nearest to it, and the click
   after that moves the selected measure onto the clicked onset. Moving
   measure 0 or 1 re-seeds the grid; any other measure gets a correction.

``advance_analysis`` is the single transition function. ``AnalysisModel``
wraps it with the save callback the host application provides.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from chiptheory.models.analysis import (
    AnalysisPhase,
    AnalysisState,
    KeySignature,
    Note,
)
from chiptheory.theory.grid import nearest_measure_index

logger = logging.getLogger(__name__)

SaveCallback = Callable[[AnalysisState], None]

ANALYSIS_STUB = AnalysisState()


def advance_analysis(
    note: Note,
    selected_downbeat_index: int | None,
    state: AnalysisState,
) -> AnalysisState:
    """Apply one note click to the annotation.

    Args:
        note: The clicked note. Only its onset is used.
        selected_downbeat_index: Measure index currently selected by the
            user, or None.
        state: Current annotation snapshot. Left untouched.

    Returns:
        The new annotation, with ``selected_downbeat_index`` set to what the
        host should show as selected next.
    """
    onset = note.start
    phase = state.phase

    if phase in (AnalysisPhase.EMPTY, AnalysisPhase.ONE_ANCHOR):
        if phase is AnalysisPhase.EMPTY or selected_downbeat_index is None:
            return replace(state, anchors=(onset,), selected_downbeat_index=0)

        first = state.anchors[0]
        if onset == first:
            # Clicking the selected downbeat again deselects it
            return replace(state, selected_downbeat_index=None)
        return replace(
            state,
            anchors=tuple(sorted((first, onset))),
            selected_downbeat_index=None,
        )

    if selected_downbeat_index is None:
        return replace(
            state, selected_downbeat_index=nearest_measure_index(state, onset)
        )

    if selected_downbeat_index in (0, 1):
        anchors = list(state.anchors)
        anchors[selected_downbeat_index] = onset
        if anchors[0] == anchors[1]:
            logger.debug("Ignoring re-seed that collapses both anchors at %.3f", onset)
            return replace(state, selected_downbeat_index=None)
        return replace(
            state,
            anchors=tuple(sorted(anchors)),
            selected_downbeat_index=None,
        )

    corrected = dict(state.corrected_measures)
    corrected[selected_downbeat_index] = onset
    return replace(state, corrected_measures=corrected, selected_downbeat_index=None)


def select_downbeat(state: AnalysisState, index: int | None) -> AnalysisState:
    """Select (or with None, deselect) a measure line directly."""
    return replace(state, selected_downbeat_index=index)


def set_key(state: AnalysisState, key: KeySignature | None) -> AnalysisState:
    """Set the tonal key. Anchors and corrections are left as they are."""
    return replace(state, key=key)


def clear_key(state: AnalysisState) -> AnalysisState:
    return set_key(state, None)


def clear_corrections(state: AnalysisState) -> AnalysisState:
    return replace(state, corrected_measures={}, selected_downbeat_index=None)


class AnalysisModel:
    """Applies annotation transitions and saves every result.

    Holds no annotation of its own: each call receives the current snapshot
    from the host and returns the next one. Calls must be serialized by the
    caller.
    """

    def __init__(self, save: SaveCallback | None = None) -> None:
        """Initialize the model.

        Args:
            save: Called with the full new state after every transition.
        """
        self.save = save

    def advance(
        self,
        note: Note,
        selected_downbeat_index: int | None,
        state: AnalysisState,
    ) -> AnalysisState:
        """Handle a note click. See ``advance_analysis``."""
        return self._commit(advance_analysis(note, selected_downbeat_index, state))

    def select_downbeat(self, state: AnalysisState, index: int | None) -> AnalysisState:
        return self._commit(select_downbeat(state, index))

    def set_key(self, state: AnalysisState, key: KeySignature | None) -> AnalysisState:
        return self._commit(set_key(state, key))

    def clear_key(self, state: AnalysisState) -> AnalysisState:
        return self._commit(clear_key(state))

    def clear_corrections(self, state: AnalysisState) -> AnalysisState:
        return self._commit(clear_corrections(state))

    def reset(self, state: AnalysisState) -> AnalysisState:
        """Drop anchors and corrections. Keeps the key."""
        return self._commit(replace(ANALYSIS_STUB, key=state.key))

    def _commit(self, new_state: AnalysisState) -> AnalysisState:
        logger.debug(
            "Analysis now %s (anchors=%s, corrections=%d, selected=%s)",
            new_state.phase.value,
            new_state.anchors,
            len(new_state.corrected_measures),
            new_state.selected_downbeat_index,
        )
        if self.save is not None:
            self.save(new_state)
        return new_state
