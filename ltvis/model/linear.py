"""Helpers shared by the list and stack simulators.

Linear node ids are positional (``"<sid>:<index>"``), so an insertion or
removal renames every downstream node. The mutation events below re-create
the shifted nodes and their links so that applying a step's events to the
previous view yields exactly the step's snapshot.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from . import errors
from .helpers import (
    create_node_event,
    error_step,
    format_value,
    highlight_event,
    link_event,
    step,
    tip_event,
    with_selection,
)
from .types import ID, OpStep, StateSnapshot, Value, VizEvent, is_value

INSERT_MARKER = "ins"


def node_index(structure_id: ID, node_id: ID) -> int:
    return int(node_id[len(structure_id) + 1 :])


def check_insert(op, length: int, snapshot: StateSnapshot) -> Tuple[Optional[OpStep], int]:
    """Validate an ``Insert`` against a structure of ``length`` values."""
    pos = length if op.pos is None else op.pos
    if op.value is None or not is_value(op.value):
        return error_step(errors.INVALID_VALUE, "Insert requires a value", snapshot), pos
    if pos < 0 or pos > length:
        return error_step(errors.OUT_OF_BOUNDS, f"Insert position {pos} is invalid", snapshot), pos
    return None, pos


def check_delete(op, length: int, snapshot: StateSnapshot) -> Tuple[Optional[OpStep], int]:
    """Validate a ``Delete``; the position defaults to the last index."""
    pos = length - 1 if op.pos is None else op.pos
    if pos < 0 or pos >= length:
        return error_step(errors.OUT_OF_BOUNDS, f"Delete position {pos} is invalid", snapshot), pos
    return None, pos


def traversal_steps(structure_id: ID, count: int, snapshot: StateSnapshot) -> List[OpStep]:
    """Return one highlight step per hop over indexes ``0..count-1``."""
    steps = []
    for idx in range(count):
        node_id = f"{structure_id}:{idx}"
        steps.append(
            step(
                [highlight_event(node_id, "traverse")],
                with_selection(snapshot, node_id),
                f"Traverse to index {idx}",
            )
        )
    return steps


def move_events(snapshot: StateSnapshot) -> List[VizEvent]:
    return [
        {"type": "Move", "id": node["id"], "x": idx, "y": 0}
        for idx, node in enumerate(snapshot["nodes"])
    ]


def shifted_events(structure_id: ID, snapshot: StateSnapshot, start: int) -> List[VizEvent]:
    """Re-create nodes from ``start`` onwards and the links that reach them."""
    events = [
        create_node_event(node)
        for node in snapshot["nodes"]
        if node_index(structure_id, node["id"]) >= start
    ]
    events.extend(
        link_event(edge)
        for edge in snapshot["edges"]
        if node_index(structure_id, edge["dst"]) >= start
    )
    return events


def insert_events(
    structure_id: ID, snapshot: StateSnapshot, pos: int, old_length: int, value: Value
) -> List[VizEvent]:
    """Events for a value inserted at ``pos`` into a chain of ``old_length``."""
    node_id = f"{structure_id}:{pos}"
    events: List[VizEvent] = []
    if 0 < pos < old_length:
        prev_id = f"{structure_id}:{pos - 1}"
        events.append({"type": "Unlink", "id": f"{prev_id}->{node_id}:next", "src": prev_id, "dst": node_id})
    events.extend(shifted_events(structure_id, snapshot, pos))
    events.extend(move_events(snapshot))
    events.append(tip_event(f"Inserted {format_value(value)} at {pos}", node_id))
    return events


def remove_events(
    structure_id: ID, snapshot: StateSnapshot, pos: int, old_length: int
) -> List[VizEvent]:
    """Events for the value removed at ``pos`` from a chain of ``old_length``."""
    removed_id = f"{structure_id}:{pos}"
    events: List[VizEvent] = [{"type": "RemoveNode", "id": removed_id}]
    last_id = f"{structure_id}:{old_length - 1}"
    if last_id != removed_id:
        events.append({"type": "RemoveNode", "id": last_id})
    events.extend(shifted_events(structure_id, snapshot, max(pos - 1, 0)))
    events.extend(move_events(snapshot))
    anchor = snapshot["nodes"][pos]["id"] if pos < len(snapshot["nodes"]) else None
    events.append(tip_event(f"Deleted index {pos}", anchor))
    return events


def insert_snapshot(structure_id: ID, snapshot: StateSnapshot, pos: int) -> StateSnapshot:
    """Mark ``snapshot`` as the result of an insertion at ``pos``."""
    result = with_selection(snapshot, f"{structure_id}:{INSERT_MARKER}")
    result["meta"]["inserted"] = f"{structure_id}:{pos}"
    return result


def find_step(structure_id: ID, values: Sequence[Value], key, snapshot: StateSnapshot) -> OpStep:
    """Linear scan for ``key``; returns a found step or a ``not_found`` error."""
    for idx, value in enumerate(values):
        if is_value(key) and value == key:
            node_id = f"{structure_id}:{idx}"
            events = [
                highlight_event(node_id, "found"),
                tip_event(f"Found {format_value(key)} at index {idx}", node_id),
            ]
            return step(events, with_selection(snapshot, node_id), f"Find {format_value(key)}")
    return error_step(errors.NOT_FOUND, f"Key {key} not found", snapshot)


def top_node_id(snapshot: StateSnapshot) -> Optional[ID]:
    nodes = snapshot["nodes"]
    return nodes[-1]["id"] if nodes else None
