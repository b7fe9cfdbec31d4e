"""Step and event builders shared by every simulator."""

from __future__ import annotations

import copy
from typing import Any, List, Optional

from . import errors
from .types import ID, EdgeState, NodeState, OpStep, StateSnapshot, VizEvent, is_value_list


def edge_id(src: ID, dst: ID, label: str) -> ID:
    """Return the deterministic id of the ``label`` edge from ``src`` to ``dst``."""
    return f"{src}->{dst}:{label}"


def make_edge(src: ID, dst: ID, label: str) -> EdgeState:
    return {"id": edge_id(src, dst, label), "src": src, "dst": dst, "label": label}


def tip_event(text: str, anchor: Optional[ID] = None) -> VizEvent:
    event: VizEvent = {"type": "Tip", "text": text}
    if anchor is not None:
        event["anchor"] = anchor
    return event


def highlight_event(node_id: ID, style: str = "focus") -> VizEvent:
    return {"type": "Highlight", "target": {"kind": "node", "id": node_id}, "style": style}


def create_node_event(node: NodeState) -> VizEvent:
    return {"type": "CreateNode", "node": dict(node)}


def link_event(edge: EdgeState) -> VizEvent:
    return {"type": "Link", "edge": dict(edge)}


def unlink_event(src: ID, dst: ID, label: str) -> VizEvent:
    return {"type": "Unlink", "id": edge_id(src, dst, label), "src": src, "dst": dst}


def events_for_snapshot(snapshot: StateSnapshot) -> List[VizEvent]:
    """Return ``CreateNode`` then ``Link`` events recreating ``snapshot``."""
    events = [create_node_event(node) for node in snapshot.get("nodes", [])]
    events.extend(link_event(edge) for edge in snapshot.get("edges", []))
    return events


def find_node(snapshot: StateSnapshot, node_id: ID) -> Optional[NodeState]:
    for node in snapshot.get("nodes", []):
        if node["id"] == node_id:
            return node
    return None


def with_selection(snapshot: StateSnapshot, selection: Optional[ID]) -> StateSnapshot:
    """Return a copy of ``snapshot`` whose ``meta.selection`` is ``selection``."""
    result = copy.deepcopy(snapshot)
    meta = dict(result.get("meta") or {})
    meta["selection"] = selection
    result["meta"] = meta
    return result


def step(
    events: List[VizEvent], snapshot: StateSnapshot, explain: Optional[str] = None
) -> OpStep:
    result: OpStep = {"events": events, "snapshot": snapshot}
    if explain is not None:
        result["explain"] = explain
    return result


def error_step(
    code: str, message: str, snapshot: StateSnapshot, detail: Any = None
) -> OpStep:
    """Return an error step carrying the unchanged ``snapshot``."""
    error = {"code": code, "message": message}
    if detail is not None:
        error["detail"] = detail
    return {"events": [tip_event(message)], "snapshot": snapshot, "error": error}


def format_value(value: Any) -> str:
    """Render ``value`` the way labels show it (``5`` rather than ``5.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def wrong_target_step(target: ID, structure_id: ID, snapshot: StateSnapshot) -> OpStep:
    return error_step(
        errors.WRONG_TARGET,
        f"Operation target {target} does not match {structure_id}",
        snapshot,
    )


def unsupported_step(kind: str, op_kind: str, snapshot: StateSnapshot) -> OpStep:
    return error_step(errors.UNSUPPORTED_OP, f"{kind} does not handle {op_kind}", snapshot)


def create_guard(kind: str, op: Any, snapshot: StateSnapshot) -> Optional[OpStep]:
    """Return an error step if ``op`` cannot create a structure of ``kind``."""
    if op.structure != kind:
        return error_step(errors.KIND_MISMATCH, f"Cannot create {op.structure} on {kind}", snapshot)
    if op.payload is not None and not is_value_list(op.payload):
        return error_step(
            errors.INVALID_PAYLOAD, "Create payload must be an array of numbers/strings", snapshot
        )
    return None


def removal_events(before: Optional[StateSnapshot], after: StateSnapshot) -> List[VizEvent]:
    """Return events clearing what ``before`` shows and ``after`` no longer does.

    Edges go first so endpoints that survive lose their stale links.
    """

    if not before:
        return []
    kept_edges = {edge["id"] for edge in after.get("edges", [])}
    kept_nodes = {node["id"] for node in after.get("nodes", [])}
    events: List[VizEvent] = [
        {"type": "Unlink", "id": edge["id"]}
        for edge in before.get("edges", [])
        if edge["id"] not in kept_edges
    ]
    events.extend(
        {"type": "RemoveNode", "id": node["id"]}
        for node in before.get("nodes", [])
        if node["id"] not in kept_nodes
    )
    return events


def created_step(
    kind: str,
    snapshot: StateSnapshot,
    note: Optional[str] = None,
    before: Optional[StateSnapshot] = None,
) -> OpStep:
    """Return the step replacing ``before`` wholesale with ``snapshot``."""
    text = f"Created {kind}" if note is None else f"Created {kind} ({note})"
    events = removal_events(before, snapshot)
    events.extend(events_for_snapshot(snapshot))
    events.append(tip_event(text, (snapshot.get("meta") or {}).get("selection")))
    return step(events, snapshot, f"Create {kind}")
