"""Array-backed sequential list."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .codec import linear_snapshot, restore_linear_values
from .helpers import create_guard, created_step, step, unsupported_step, wrong_target_step
from .linear import (
    check_delete,
    check_insert,
    find_step,
    insert_events,
    insert_snapshot,
    remove_events,
)
from .operations import Operation, target_id
from .types import ID, OpStep, StateSnapshot, Value


class SeqList:
    """Sequential list; random access means inserts and deletes are one step."""

    kind = "SeqList"

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
        if op.kind == "Insert":
            return [self._insert(op, before)]
        if op.kind == "Delete":
            return [self._delete(op, before)]
        if op.kind == "Find":
            return [find_step(self.id, self.values, op.key, before)]
        return [unsupported_step(self.kind, op.kind, before)]

    def _insert(self, op, before: StateSnapshot) -> OpStep:
        error, pos = check_insert(op, len(self.values), before)
        if error:
            return error
        old_length = len(self.values)
        self.values.insert(pos, op.value)
        after = self.snapshot()
        events = insert_events(self.id, after, pos, old_length, op.value)
        return step(events, insert_snapshot(self.id, after, pos), f"Insert at {pos}")

    def _delete(self, op, before: StateSnapshot) -> OpStep:
        error, pos = check_delete(op, len(self.values), before)
        if error:
            return error
        old_length = len(self.values)
        del self.values[pos]
        after = self.snapshot()
        return step(remove_events(self.id, after, pos, old_length), after, f"Delete at {pos}")
