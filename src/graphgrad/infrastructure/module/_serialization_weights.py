"""
JSON persistence for parameter states.

A state file holds a JSON list with one record per parameter:

    [{"name": "linear1.weight", "shape": [2, 3], "data": [...]}, ...]

Records are in `Module.parameters()` order; loading back into a module
matches them by position (see `Module.load_state_dict`).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from .._parameter import ParameterState

PathLike = Union[str, Path]


def states_to_payload(states: Sequence[ParameterState]) -> List[Dict[str, Any]]:
    """Convert states to JSON-serializable records."""
    return [s.to_dict() for s in states]


def payload_to_states(payload: Any) -> List[ParameterState]:
    """
    Convert decoded JSON records back to states.

    Raises
    ------
    ValueError
        If the payload is not a list of well-formed records.
    ShapeError
        If a record's data length does not match its shape.
    """
    if not isinstance(payload, list):
        raise ValueError(
            f"state payload must be a list of records, got {type(payload).__name__}"
        )
    states = []
    for i, rec in enumerate(payload):
        if not isinstance(rec, dict):
            raise ValueError(f"state record {i} is not an object")
        try:
            states.append(ParameterState.from_dict(rec))
        except KeyError as e:
            raise ValueError(f"state record {i} is missing key {e}") from e
    return states


def save_state_dict(path: PathLike, states: Sequence[ParameterState]) -> None:
    """
    Write `states` to `path` as JSON.
    """
    p = Path(path)
    p.write_text(json.dumps(states_to_payload(states)), encoding="utf-8")


def load_state_dict(path: PathLike) -> List[ParameterState]:
    """
    Read states written by `save_state_dict`.

    Raises
    ------
    OSError
        If the file cannot be read.
    ValueError
        If the file is not valid JSON or not a list of state records.
    """
    p = Path(path)
    return payload_to_states(json.loads(p.read_text(encoding="utf-8")))
