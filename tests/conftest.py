"""Pytest fixtures for Chiptheory tests."""

import json
from pathlib import Path

import pytest

from chiptheory import config
from chiptheory.config import configure
from chiptheory.models.analysis import Note, Pitch
from chiptheory.storage import MemoryStore


def make_note(start: float, end: float, midi_number: int = 60, name: str = "C4") -> Note:
    """Note with the given span, for tests that only care about timing."""
    return Note(
        pitch=Pitch(midi_number=midi_number, name=name),
        span=(start, end),
        raw_period=0,
    )


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Settings pointing every directory into tmp_path."""
    monkeypatch.setattr(config, "_settings", None)
    return configure(
        output_dir=tmp_path / "output",
        store_dir=tmp_path / "store",
        resolution_seconds=0.1,
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def track_notes() -> list[Note]:
    """Notes covering 0..10 seconds."""
    return [make_note(0.0, 2.5), make_note(2.5, 6.0, 62, "D4"), make_note(6.0, 10.0, 64, "E4")]


@pytest.fixture
def dump_path(tmp_path: Path) -> Path:
    """A small chip-state dump on disk."""
    dump = {
        "p1": [-1, -1, 100, 100, 100, 200, 200, -1],
        "p2": [253, 253, 253, 253, -1, -1, -1, -1],
        "t": [-1, 300, 300, 300, 300, 300, -1, -1],
        "n": [5, 5, 6, -1, -1, -1, -1, -1],
    }
    path = tmp_path / "song.json"
    path.write_text(json.dumps(dump))
    return path
