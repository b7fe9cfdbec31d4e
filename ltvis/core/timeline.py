"""Timeline of recorded operation steps with a scrub cursor.

The functions here are pure: each returns a new :class:`TimelineState` and
never mutates its argument. Entries are append-only and their step lists are
shared by reference between successive states.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..model.types import OpStep


@dataclass
class TimelineEntry:
    """Steps produced by one executed operation."""

    id: int
    steps: List[OpStep]
    label: Optional[str] = None
    op_meta: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "steps": self.steps}
        if self.label is not None:
            data["label"] = self.label
        if self.op_meta is not None:
            data["opMeta"] = self.op_meta
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimelineEntry":
        return cls(
            id=int(data["id"]),
            steps=list(data.get("steps", [])),
            label=data.get("label"),
            op_meta=data.get("opMeta"),
        )


@dataclass
class TimelineState:
    """Ordered entries plus a cursor over their flattened steps.

    ``current_step_index`` is ``-1`` only while the timeline is empty and is
    otherwise in ``[0, total_steps - 1]``.
    """

    entries: List[TimelineEntry] = field(default_factory=list)
    current_step_index: int = -1
    total_steps: int = 0


def create_empty() -> TimelineState:
    return TimelineState()


def append_entry(
    state: TimelineState,
    steps: List[OpStep],
    label: Optional[str] = None,
    op_meta: Optional[Dict[str, Any]] = None,
) -> TimelineState:
    """Return ``state`` with a new entry and the cursor on its last step."""
    entry_id = state.entries[-1].id + 1 if state.entries else 0
    entry = TimelineEntry(id=entry_id, steps=list(steps), label=label, op_meta=op_meta)
    total = state.total_steps + len(entry.steps)
    return TimelineState(
        entries=[*state.entries, entry],
        current_step_index=total - 1,
        total_steps=total,
    )


def flatten_steps(state: TimelineState) -> List[OpStep]:
    """Return every step of every entry in order."""
    return [step for entry in state.entries for step in entry.steps]


def can_step_forward(state: TimelineState) -> bool:
    return state.current_step_index < state.total_steps - 1


def can_step_back(state: TimelineState) -> bool:
    return state.current_step_index > 0


def step_forward(state: TimelineState) -> TimelineState:
    if not can_step_forward(state):
        return state
    return replace(state, current_step_index=state.current_step_index + 1)


def step_back(state: TimelineState) -> TimelineState:
    if not can_step_back(state):
        return state
    return replace(state, current_step_index=state.current_step_index - 1)


def jump_to(state: TimelineState, index: int) -> TimelineState:
    """Move the cursor to ``index`` clamped into the valid step range.

    An empty timeline has no valid range and is returned unchanged.
    """

    if state.total_steps == 0:
        return state
    clamped = max(0, min(index, state.total_steps - 1))
    return replace(state, current_step_index=clamped)
