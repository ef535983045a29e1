"""Per-track persistence of AnalysisState.

The core only needs a get/set contract keyed by track identity. Two stores
are provided: a JSON file per track on disk, and an in-memory dict.
"""

import json
import logging
import os
import re
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from chiptheory.models.analysis import AnalysisState
from chiptheory.serialization import analysis_state_from_dict, to_serializable

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class AnalysisStoreError(Exception):
    """A saved analysis could not be written."""


class AnalysisStore(Protocol):
    """Load and save annotations keyed by track identity."""

    def get(self, track_id: str) -> AnalysisState | None: ...

    def set(self, track_id: str, state: AnalysisState) -> None: ...


def saver(store: AnalysisStore, track_id: str) -> Callable[[AnalysisState], None]:
    """Save callback bound to one track, for ``AnalysisModel(save=...)``."""

    def save(state: AnalysisState) -> None:
        store.set(track_id, state)

    return save


def load_or_default(store: AnalysisStore, track_id: str) -> AnalysisState:
    """Saved state of the track, or a fresh one if nothing is saved."""
    state = store.get(track_id)
    return state if state is not None else AnalysisState()


class MemoryStore:
    """Store that keeps annotations in a dict."""

    def __init__(self) -> None:
        self.states: dict[str, AnalysisState] = {}

    def get(self, track_id: str) -> AnalysisState | None:
        return self.states.get(track_id)

    def set(self, track_id: str, state: AnalysisState) -> None:
        self.states[track_id] = state


class JsonFileStore:
    """Store that writes one camelCase JSON file per track."""

    def __init__(self, directory: Path) -> None:
        """Initialize the store.

        Args:
            directory: Where analysis files live. Created on first save.
        """
        self.directory = Path(directory)

    def path_for(self, track_id: str) -> Path:
        """File holding the analysis of ``track_id``."""
        safe = _UNSAFE_CHARS.sub("_", track_id).strip("._") or "track"
        return self.directory / f"{safe}.json"

    def get(self, track_id: str) -> AnalysisState | None:
        """Load a saved analysis.

        Missing files and files that do not hold a valid analysis both read
        as "nothing saved"; the latter is logged.
        """
        path = self.path_for(track_id)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return analysis_state_from_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable analysis %s: %s", path, e)
            return None

    def set(self, track_id: str, state: AnalysisState) -> None:
        """Save an analysis, replacing the file atomically."""
        path = self.path_for(track_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(to_serializable(state), f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise AnalysisStoreError(f"Could not save analysis to {path}: {e}") from e
        logger.debug("Saved analysis for %s to %s", track_id, path)
