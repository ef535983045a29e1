"""JSON conversion of Chiptheory dataclasses.

Field names are written in camelCase so that files can be shared with the
browser front end.
"""

from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from chiptheory.models.analysis import AnalysisState, KeySignature, Mode


def to_serializable(obj: Any) -> Any:
    """Convert a dataclass hierarchy to a JSON-serializable structure.

    Handles nested dataclasses, lists, tuples, enums and paths.
    Converts all snake_case field names to camelCase.

    Args:
        obj: Object to serialize (dataclass, dict or plain value)

    Returns:
        JSON-serializable value
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return _convert_dict_keys(asdict(obj))
    return _process_value(obj)


def _convert_dict_keys(d: dict) -> dict:
    """Recursively convert dict keys from snake_case to camelCase."""
    result = {}
    for key, value in d.items():
        if isinstance(key, Enum):
            key = key.value
        # Only convert string keys that look like snake_case
        if isinstance(key, str) and "_" in key:
            camel_key = to_camel_case(key)
        elif isinstance(key, str):
            camel_key = key
        else:
            camel_key = str(key)

        result[camel_key] = _process_value(value)
    return result


def _process_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_serializable(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, dict):
        return _convert_dict_keys(value)
    elif isinstance(value, (list, tuple)):
        return [_process_value(item) for item in value]
    elif isinstance(value, Path):
        return str(value)
    else:
        return value


def to_camel_case(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def analysis_state_from_dict(data: dict) -> AnalysisState:
    """Rebuild an AnalysisState from its camelCase JSON form.

    Raises:
        ValueError, KeyError, TypeError: The data is not a saved analysis.
    """
    key_data = data.get("key")
    key = None
    if key_data is not None:
        key = KeySignature(root=int(key_data["root"]), mode=Mode(key_data["mode"]))

    anchors = tuple(float(t) for t in data.get("anchors", []))
    if len(anchors) > 2:
        raise ValueError(f"At most two anchors expected, got {len(anchors)}")

    corrected = {
        int(index): float(time)
        for index, time in (data.get("correctedMeasures") or {}).items()
    }

    selected = data.get("selectedDownbeatIndex")
    return AnalysisState(
        key=key,
        anchors=tuple(sorted(anchors)),
        corrected_measures=corrected,
        selected_downbeat_index=int(selected) if selected is not None else None,
    )
