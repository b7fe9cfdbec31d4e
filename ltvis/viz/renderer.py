"""Headless renderer maintaining a view state from events and snapshots.

The renderer applies :data:`~ltvis.model.types.VizEvent` mappings to a
:class:`ViewState`. Every event is idempotent, so re-applying a prefix of
steps after seeding from a snapshot converges on the same view. Node
positions come only from events and snapshots; no layout is computed here.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..model.types import ID, OpStep, StateSnapshot, VizEvent


@dataclass
class ViewMeta:
    step_index: Optional[int] = None
    current_tip: Optional[str] = None
    explain: Optional[str] = None
    selection: Optional[ID] = None


@dataclass
class ViewState:
    nodes: Dict[ID, Dict[str, Any]] = field(default_factory=dict)
    edges: Dict[ID, Dict[str, Any]] = field(default_factory=dict)
    meta: ViewMeta = field(default_factory=ViewMeta)

    @classmethod
    def from_snapshot(cls, snapshot: Optional[StateSnapshot] = None) -> "ViewState":
        state = cls()
        if not snapshot:
            return state
        for node in snapshot.get("nodes", []):
            state.nodes[node["id"]] = dict(node)
        for edge in snapshot.get("edges", []):
            state.edges[edge["id"]] = dict(edge)
        meta = snapshot.get("meta") or {}
        state.meta.selection = meta.get("selection")
        state.meta.step_index = meta.get("step")
        return state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [dict(node) for node in self.nodes.values()],
            "edges": [dict(edge) for edge in self.edges.values()],
            "meta": {
                "stepIndex": self.meta.step_index,
                "currentTip": self.meta.current_tip,
                "explain": self.meta.explain,
                "selection": self.meta.selection,
            },
        }


def _remove_node(state: ViewState, event: VizEvent) -> None:
    node_id = event["id"]
    state.nodes.pop(node_id, None)
    for edge_id, edge in list(state.edges.items()):
        if edge["src"] == node_id or edge["dst"] == node_id:
            del state.edges[edge_id]


def _unlink(state: ViewState, event: VizEvent) -> None:
    if event.get("id"):
        state.edges.pop(event["id"], None)
        return
    src = event.get("src")
    dst = event.get("dst")
    for edge_id, edge in list(state.edges.items()):
        if (src and edge["src"] == src) or (dst and edge["dst"] == dst):
            del state.edges[edge_id]


def _move(state: ViewState, event: VizEvent) -> None:
    node = state.nodes.get(event["id"])
    if node is not None:
        node["x"] = event.get("x")
        node["y"] = event.get("y")


def _highlight(state: ViewState, event: VizEvent) -> None:
    target = event["target"]
    items = state.nodes if target.get("kind", "node") == "node" else state.edges
    item = items.get(target["id"])
    if item is not None:
        item["highlighted"] = True


def _swap(state: ViewState, event: VizEvent) -> None:
    a, b = event["a"], event["b"]
    node_a = state.nodes.get(a)
    node_b = state.nodes.get(b)
    if node_a is not None and node_b is not None:
        state.nodes[a] = {**node_b, "id": a}
        state.nodes[b] = {**node_a, "id": b}
    state.meta.current_tip = f"Swap {a} <-> {b}"


def apply_event(state: ViewState, event: VizEvent) -> None:
    """Apply one event to ``state`` in place. Unknown event types are ignored."""
    kind = event.get("type")
    if kind == "CreateNode":
        node = dict(event["node"])
        state.nodes[node["id"]] = node
    elif kind == "RemoveNode":
        _remove_node(state, event)
    elif kind == "Link":
        edge = dict(event["edge"])
        state.edges[edge["id"]] = edge
    elif kind == "Unlink":
        _unlink(state, event)
    elif kind == "Move":
        _move(state, event)
    elif kind == "Highlight":
        _highlight(state, event)
    elif kind == "Compare":
        state.meta.current_tip = f"Compare {event.get('a')} vs {event.get('b')}"
    elif kind == "Swap":
        _swap(state, event)
    elif kind in ("Rotate", "Rebalance"):
        state.meta.current_tip = kind
    elif kind == "Tip":
        state.meta.current_tip = event.get("text")
        anchor = event.get("anchor")
        if anchor is not None:
            state.meta.selection = anchor


def apply_step(state: ViewState, step: OpStep, index: int = 0) -> None:
    """Apply the events of ``step`` and update the step metadata."""
    for event in step.get("events", []):
        apply_event(state, event)
    snapshot = step.get("snapshot")
    if snapshot:
        selection = (snapshot.get("meta") or {}).get("selection")
        if selection is not None:
            state.meta.selection = selection
    state.meta.step_index = index
    state.meta.explain = step.get("explain")
    if state.meta.explain and not state.meta.current_tip:
        state.meta.current_tip = state.meta.explain


class Renderer:
    """Stateful wrapper around :class:`ViewState` used by playback."""

    def __init__(self, snapshot: Optional[StateSnapshot] = None) -> None:
        self._state = ViewState.from_snapshot(snapshot)

    def get_state(self) -> ViewState:
        return self._state

    def reset(self, snapshot: Optional[StateSnapshot] = None) -> None:
        self._state = ViewState.from_snapshot(snapshot)

    def apply_event(self, event: VizEvent) -> None:
        apply_event(self._state, event)

    def apply_step(self, step: OpStep, index: int = 0) -> None:
        apply_step(self._state, step, index)

    async def play(self, steps: List[OpStep], delay_ms: float = 0) -> None:
        for index, step in enumerate(steps):
            self.apply_step(step, index)
            if delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000.0)
