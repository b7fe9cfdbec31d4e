"""Array-backed stack; the top is the last value."""

from __future__ import annotations

from typing import Iterable, List, Optional

from . import errors
from .codec import linear_snapshot, restore_linear_values
from .helpers import (
    create_guard,
    create_node_event,
    created_step,
    error_step,
    format_value,
    highlight_event,
    link_event,
    step,
    tip_event,
    unsupported_step,
    with_selection,
    wrong_target_step,
)
from .linear import top_node_id
from .operations import Operation, target_id
from .types import ID, OpStep, StateSnapshot, Value, is_value


class Stack:
    kind = "Stack"

    def __init__(self, structure_id: ID, initial: Optional[Iterable[Value]] = None) -> None:
        self.id = structure_id
        self.values: List[Value] = list(initial or [])

    def snapshot(self) -> StateSnapshot:
        return linear_snapshot(self.id, self.values)

    def reset(self) -> None:
        self.values = []

    def reset_from_snapshot(self, snapshot: StateSnapshot) -> None:
        self.values = restore_linear_values(self.id, snapshot)

    def apply(self, op: Operation) -> List[OpStep]:
        before = self.snapshot()
        if target_id(op) != self.id:
            return [wrong_target_step(target_id(op), self.id, before)]
        if op.kind == "Create":
            error = create_guard(self.kind, op, before)
            if error:
                return [error]
            self.values = list(op.payload or [])
            return [created_step(self.kind, self.snapshot(), before=before)]
        if op.kind == "Push":
            return self._push(op.value, before)
        if op.kind == "Pop":
            return self._pop(before)
        return [unsupported_step(self.kind, op.kind, before)]

    def _focus_top(self, before: StateSnapshot) -> List[OpStep]:
        top = top_node_id(before)
        if top is None:
            return []
        return [step([highlight_event(top, "focus")], with_selection(before, top), "Highlight top")]

    def _push(self, value, before: StateSnapshot) -> List[OpStep]:
        if value is None or not is_value(value):
            return [error_step(errors.INVALID_VALUE, "Push requires a value", before)]
        steps = self._focus_top(before)
        previous = top_node_id(before)
        self.values.append(value)
        after = self.snapshot()
        node = after["nodes"][-1]
        events = [create_node_event(node)]
        if previous is not None:
            events.append(link_event(after["edges"][-1]))
        events.append(tip_event(f"Pushed {format_value(value)}", node["id"]))
        steps.append(step(events, with_selection(after, node["id"]), "Push"))
        return steps

    def _pop(self, before: StateSnapshot) -> List[OpStep]:
        if not self.values:
            return [error_step(errors.EMPTY_STACK, "Cannot pop from an empty stack", before)]
        steps = self._focus_top(before)
        removed = top_node_id(before)
        value = self.values.pop()
        after = self.snapshot()
        new_top = top_node_id(after)
        events = [
            {"type": "RemoveNode", "id": removed},
            tip_event(f"Popped {format_value(value)}", new_top),
        ]
        steps.append(step(events, with_selection(after, new_top), "Pop"))
        return steps
