"""Tests for the downbeat-picking state machine."""

from dataclasses import FrozenInstanceError

import pytest

from chiptheory.models.analysis import AnalysisPhase, AnalysisState, KeySignature, Mode
from chiptheory.theory.analysis_model import (
    AnalysisModel,
    advance_analysis,
    clear_key,
    select_downbeat,
    set_key,
)

from conftest import make_note


class Recorder:
    """Save callback that remembers every state it receives."""

    def __init__(self):
        self.saved: list[AnalysisState] = []

    def __call__(self, state: AnalysisState) -> None:
        self.saved.append(state)


def seeded(first: float = 0.0, second: float = 2.0) -> AnalysisState:
    return AnalysisState(anchors=(first, second))


class TestPhases:
    """Tests for the derived phase."""

    def test_phases(self):
        assert AnalysisState().phase is AnalysisPhase.EMPTY
        assert AnalysisState(anchors=(1.0,)).phase is AnalysisPhase.ONE_ANCHOR
        assert seeded().phase is AnalysisPhase.SEEDED
        corrected = AnalysisState(anchors=(0.0, 2.0), corrected_measures={3: 6.1})
        assert corrected.phase is AnalysisPhase.CORRECTED

    def test_state_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            AnalysisState().anchors = (1.0,)  # type: ignore[misc]


class TestAdvance:
    """Tests for advance_analysis()."""

    def test_first_click_selects_candidate(self):
        state = advance_analysis(make_note(1.5, 2.0), None, AnalysisState())

        assert state.anchors == (1.5,)
        assert state.selected_downbeat_index == 0
        assert state.phase is AnalysisPhase.ONE_ANCHOR

    def test_second_click_commits_measure(self):
        state = advance_analysis(make_note(1.5, 2.0), None, AnalysisState())
        state = advance_analysis(make_note(3.5, 4.0), state.selected_downbeat_index, state)

        assert state.anchors == (1.5, 3.5)
        assert state.selected_downbeat_index is None
        assert state.phase is AnalysisPhase.SEEDED
        assert state.measure_length == pytest.approx(2.0)

    def test_second_click_earlier_is_sorted(self):
        state = AnalysisState(anchors=(3.5,), selected_downbeat_index=0)
        state = advance_analysis(make_note(1.5, 2.0), 0, state)
        assert state.anchors == (1.5, 3.5)

    def test_same_note_twice_deselects(self):
        state = AnalysisState(anchors=(1.5,), selected_downbeat_index=0)
        state = advance_analysis(make_note(1.5, 2.0), 0, state)

        assert state.anchors == (1.5,)
        assert state.selected_downbeat_index is None

    def test_one_anchor_without_selection_restarts(self):
        state = advance_analysis(make_note(5.0, 6.0), None, AnalysisState(anchors=(1.5,)))

        assert state.anchors == (5.0,)
        assert state.selected_downbeat_index == 0

    def test_stale_selection_on_empty(self):
        state = advance_analysis(make_note(1.0, 2.0), 7, AnalysisState())
        assert state.anchors == (1.0,)
        assert state.selected_downbeat_index == 0

    def test_seeded_click_selects_nearest_measure(self):
        state = advance_analysis(make_note(6.2, 6.5), None, seeded())

        assert state.selected_downbeat_index == 3
        assert state.anchors == (0.0, 2.0)
        assert state.corrected_measures == {}

    def test_correction(self):
        state = advance_analysis(make_note(6.2, 6.5), 3, seeded())

        assert state.corrected_measures == {3: 6.2}
        assert state.selected_downbeat_index is None
        assert state.anchors == (0.0, 2.0)
        assert state.phase is AnalysisPhase.CORRECTED

    def test_correction_keeps_existing(self):
        start = AnalysisState(anchors=(0.0, 2.0), corrected_measures={3: 6.2})
        state = advance_analysis(make_note(8.1, 8.5), 4, start)

        assert state.corrected_measures == {3: 6.2, 4: 8.1}
        assert start.corrected_measures == {3: 6.2}

    def test_reseed_second_anchor(self):
        """Selecting measure 1 and clicking moves the second anchor."""
        state = advance_analysis(make_note(2.4, 3.0), 1, seeded())

        assert state.anchors == (0.0, 2.4)
        assert state.selected_downbeat_index is None

    def test_reseed_first_anchor(self):
        state = advance_analysis(make_note(0.3, 1.0), 0, seeded())
        assert state.anchors == (0.3, 2.0)

    def test_reseed_collapse_is_ignored(self):
        state = advance_analysis(make_note(2.0, 3.0), 0, seeded())

        assert state.anchors == (0.0, 2.0)
        assert state.selected_downbeat_index is None

    def test_key_survives_clicks(self):
        key = KeySignature(root=9, mode=Mode.MINOR)
        state = advance_analysis(make_note(1.0, 2.0), None, AnalysisState(key=key))
        assert state.key == key

    def test_replay_is_deterministic(self):
        """Replaying the same clicks from the same start gives equal states."""
        start = AnalysisState(key=KeySignature(root=0))
        clicks = [make_note(0.5, 1.0), make_note(2.5, 3.0)]

        def replay() -> AnalysisState:
            state = start
            for note in clicks:
                state = advance_analysis(note, state.selected_downbeat_index, state)
            return state

        first = replay()
        assert first == replay()
        assert first.anchors == (0.5, 2.5)
        assert start == AnalysisState(key=KeySignature(root=0))


class TestOtherTransitions:
    """Tests for key and selection transitions."""

    def test_set_key(self):
        state = set_key(seeded(), KeySignature(root=2, mode=Mode.DORIAN))

        assert state.key == KeySignature(root=2, mode=Mode.DORIAN)
        assert state.anchors == (0.0, 2.0)

    def test_clear_key(self):
        start = AnalysisState(
            key=KeySignature(root=2), anchors=(0.0, 2.0), corrected_measures={3: 6.5}
        )
        state = clear_key(start)

        assert state.key is None
        assert state.anchors == start.anchors
        assert state.corrected_measures == {3: 6.5}

    def test_invalid_key_root(self):
        with pytest.raises(ValueError):
            KeySignature(root=12)

    def test_select_downbeat(self):
        assert select_downbeat(seeded(), 4).selected_downbeat_index == 4
        assert select_downbeat(seeded(), None).selected_downbeat_index is None


class TestAnalysisModel:
    """Tests for AnalysisModel's save callback."""

    def test_every_transition_is_saved(self):
        recorder = Recorder()
        model = AnalysisModel(save=recorder)

        state = model.advance(make_note(0.5, 1.0), None, AnalysisState())
        state = model.advance(make_note(2.5, 3.0), state.selected_downbeat_index, state)
        state = model.set_key(state, KeySignature(root=7))

        assert len(recorder.saved) == 3
        assert recorder.saved[-1] == state
        assert recorder.saved[1].anchors == (0.5, 2.5)

    def test_reset_keeps_key(self):
        recorder = Recorder()
        model = AnalysisModel(save=recorder)
        start = AnalysisState(
            key=KeySignature(root=4),
            anchors=(0.0, 2.0),
            corrected_measures={2: 4.2},
            selected_downbeat_index=3,
        )

        state = model.reset(start)

        assert state == AnalysisState(key=KeySignature(root=4))
        assert recorder.saved == [state]

    def test_clear_key_is_saved(self):
        recorder = Recorder()
        state = AnalysisModel(save=recorder).clear_key(AnalysisState(key=KeySignature(root=5)))

        assert state.key is None
        assert recorder.saved == [state]

    def test_clear_corrections(self):
        model = AnalysisModel()
        state = model.clear_corrections(
            AnalysisState(anchors=(0.0, 2.0), corrected_measures={2: 4.2})
        )
        assert state.corrected_measures == {}
        assert state.phase is AnalysisPhase.SEEDED

    def test_without_save_callback(self):
        state = AnalysisModel().advance(make_note(1.0, 2.0), None, AnalysisState())
        assert state.anchors == (1.0,)
