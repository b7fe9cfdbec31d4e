"""General binary tree built in level order and grown with ``Attach``."""

from __future__ import annotations

from typing import Iterable, List, Optional

from . import errors
from .codec import LEFT, RIGHT, restore_tree, tree_snapshot
from .helpers import (
    create_guard,
    create_node_event,
    created_step,
    error_step,
    find_node,
    highlight_event,
    link_event,
    make_edge,
    step,
    tip_event,
    unsupported_step,
    with_selection,
    wrong_target_step,
)
from .operations import Operation, target_id
from .tree import TreeArena, TreeNode, build_level_order
from .tree_steps import traversal_steps
from .types import ID, OpStep, StateSnapshot, Value, is_value


class BinaryTree:
    kind = "BinaryTree"

    def __init__(self, structure_id: ID, initial: Optional[Iterable[Value]] = None) -> None:
        self.id = structure_id
        self.arena = build_level_order(structure_id, list(initial or []))

    def snapshot(self) -> StateSnapshot:
        return tree_snapshot(self.id, self.arena)

    def reset(self) -> None:
        self.arena = TreeArena()

    def reset_from_snapshot(self, snapshot: StateSnapshot) -> None:
        self.arena = restore_tree(self.id, snapshot)

    def apply(self, op: Operation) -> List[OpStep]:
        before = self.snapshot()
        if target_id(op) != self.id:
            return [wrong_target_step(target_id(op), self.id, before)]
        if op.kind == "Create":
            error = create_guard(self.kind, op, before)
            if error:
                return [error]
            self.arena = build_level_order(self.id, list(op.payload or []))
            return [created_step(self.kind, self.snapshot(), before=before)]
        if op.kind == "Traverse":
            return traversal_steps(self.kind, self.arena, op.order, before)
        if op.kind == "Attach":
            return self._attach(op, before)
        return [unsupported_step(self.kind, op.kind, before)]

    def _attach(self, op, before: StateSnapshot) -> List[OpStep]:
        if self.arena.root is None:
            return [error_step(errors.EMPTY_TREE, "Cannot attach to an empty tree", before)]
        parent = self.arena.get(op.parent)
        if parent is None:
            return [error_step(errors.NOT_FOUND, f"Parent {op.parent} not found", before)]
        slot = "left" if op.side == "left" else "right"
        if getattr(parent, slot) is not None:
            return [
                error_step(errors.OCCUPIED, f"{parent.id} already has a {slot} child", before)
            ]
        if op.child in self.arena:
            return [error_step(errors.DUPLICATE, f"Node {op.child} already exists", before)]
        value = op.value if op.value is not None else op.child.split(":")[-1]
        if not is_value(value):
            return [error_step(errors.INVALID_VALUE, "Attach value must be a number or string", before)]

        focus = step(
            [highlight_event(parent.id, "focus")],
            with_selection(before, parent.id),
            f"Locate parent {parent.id}",
        )
        self.arena.add(TreeNode(id=op.child, value=value))
        setattr(parent, slot, op.child)
        after = self.snapshot()
        label = LEFT if slot == "left" else RIGHT
        events = [
            create_node_event(find_node(after, op.child)),
            link_event(make_edge(parent.id, op.child, label)),
            tip_event(f"Attached {op.child} as {slot} child of {parent.id}", op.child),
        ]
        return [focus, step(events, with_selection(after, op.child), f"Attach {op.child}")]
