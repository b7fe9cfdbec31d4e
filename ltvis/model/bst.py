"""Binary search tree simulator.

Keys are either all numbers or all strings; mixing the two is rejected
because the descent needs a total order. Equal keys are rejected as
``duplicate`` rather than treated as updates.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from . import errors
from .codec import LEFT, RIGHT, restore_tree, tree_snapshot
from .helpers import (
    create_guard,
    create_node_event,
    created_step,
    error_step,
    find_node,
    format_value,
    highlight_event,
    link_event,
    make_edge,
    step,
    tip_event,
    unlink_event,
    unsupported_step,
    with_selection,
    wrong_target_step,
)
from .operations import Operation, target_id
from .tree import TreeArena, TreeNode, next_local_index
from .tree_steps import traversal_steps
from .types import ID, OpStep, StateSnapshot, Value, is_value


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def comparable(a: object, b: object) -> bool:
    """Return ``True`` if ``a`` and ``b`` can be ordered against each other."""
    return (_is_number(a) and _is_number(b)) or (isinstance(a, str) and isinstance(b, str))


class BST:
    kind = "BST"

    def __init__(self, structure_id: ID, initial: Optional[Iterable[Value]] = None) -> None:
        self.id = structure_id
        self.arena = TreeArena()
        self._counter = 0
        for value in initial or []:
            self._insert_leaf(value)

    def snapshot(self) -> StateSnapshot:
        return tree_snapshot(self.id, self.arena)

    def reset(self) -> None:
        self.arena = TreeArena()
        self._counter = 0

    def reset_from_snapshot(self, snapshot: StateSnapshot) -> None:
        self.arena = restore_tree(self.id, snapshot)
        self._counter = next_local_index(self.arena, self.id)

    def apply(self, op: Operation) -> List[OpStep]:
        before = self.snapshot()
        if target_id(op) != self.id:
            return [wrong_target_step(target_id(op), self.id, before)]
        if op.kind == "Create":
            return [self._create(op, before)]
        if op.kind == "Insert":
            return self._insert(op.value, before)
        if op.kind == "Find":
            return self._find(op.key, before)
        if op.kind == "Delete":
            return self._delete(op.key, before)
        if op.kind == "Traverse":
            return traversal_steps(self.kind, self.arena, op.order, before)
        return [unsupported_step(self.kind, op.kind, before)]

    # ------------------------------------------------------------------
    def _key_error(self, code: str, key, before: StateSnapshot) -> Optional[OpStep]:
        if key is None or not is_value(key):
            return error_step(code, "A number or string key is required", before)
        root = self.arena.get(self.arena.root)
        if root is not None and not comparable(key, root.value):
            return error_step(code, f"Key {key!r} cannot be compared with {root.value!r}", before)
        return None

    def _new_node(self, value: Value) -> TreeNode:
        node = TreeNode(id=f"{self.id}:{self._counter}", value=value)
        self._counter += 1
        return self.arena.add(node)

    def _insert_leaf(self, value: Value) -> Tuple[Optional[TreeNode], Optional[TreeNode], List[ID]]:
        """Insert ``value`` and return ``(new_node, parent, path)``.

        ``new_node`` is ``None`` when ``value`` is already present.
        """

        path: List[ID] = []
        current = self.arena.get(self.arena.root)
        if current is None:
            node = self._new_node(value)
            self.arena.root = node.id
            return node, None, path
        while True:
            path.append(current.id)
            if value == current.value:
                return None, current, path
            slot = "left" if value < current.value else "right"
            child = self.arena.get(getattr(current, slot))
            if child is None:
                node = self._new_node(value)
                setattr(current, slot, node.id)
                return node, current, path
            current = child

    def _create(self, op, before: StateSnapshot) -> OpStep:
        error = create_guard(self.kind, op, before)
        if error:
            return error
        payload = list(op.payload or [])
        if any(not comparable(v, payload[0]) for v in payload):
            return error_step(
                errors.INVALID_PAYLOAD, "BST keys must be all numbers or all strings", before
            )
        self.reset()
        skipped = []
        for value in payload:
            node, _parent, _path = self._insert_leaf(value)
            if node is None:
                skipped.append(format_value(value))
        note = f"skipped duplicates {', '.join(skipped)}" if skipped else None
        return created_step(self.kind, self.snapshot(), note, before)

    def _insert(self, value, before: StateSnapshot) -> List[OpStep]:
        error = self._key_error(errors.INVALID_VALUE, value, before)
        if error:
            return [error]
        node, parent, path = self._insert_leaf(value)
        if node is None:
            return [error_step(errors.DUPLICATE, f"Value {format_value(value)} already exists", before)]

        after = self.snapshot()
        steps: List[OpStep] = []
        if path:
            direction = "left" if parent.left == node.id else "right"
            steps.append(
                step(
                    [highlight_event(node_id, "traverse") for node_id in path],
                    with_selection(before, path[-1]),
                    f"Traverse {direction} from {parent.id}",
                )
            )
        events = [create_node_event(find_node(after, node.id))]
        if parent is not None:
            label = LEFT if parent.left == node.id else RIGHT
            events.append(link_event(make_edge(parent.id, node.id, label)))
        events.append(tip_event(f"Inserted {format_value(value)}", node.id))
        steps.append(step(events, with_selection(after, node.id), f"Insert {format_value(value)}"))
        return steps

    def _find(self, key, before: StateSnapshot) -> List[OpStep]:
        error = self._key_error(errors.INVALID_KEY, key, before)
        if error:
            return [error]
        steps: List[OpStep] = []
        current = self.arena.get(self.arena.root)
        while current is not None:
            events = [highlight_event(current.id, "traverse")]
            pinned = with_selection(before, current.id)
            if key == current.value:
                events.append(tip_event(f"Found {format_value(key)}", current.id))
                steps.append(step(events, pinned, f"Find {format_value(key)}"))
                return steps
            steps.append(step(events, pinned, f"Traverse for {format_value(key)}"))
            current = self.arena.get(current.left if key < current.value else current.right)
        steps.append(error_step(errors.NOT_FOUND, f"Key {format_value(key)} not found", before))
        return steps

    def _delete(self, key, before: StateSnapshot) -> List[OpStep]:
        error = self._key_error(errors.INVALID_KEY, key, before)
        if error:
            return [error]

        steps: List[OpStep] = []
        parent: Optional[TreeNode] = None
        current = self.arena.get(self.arena.root)
        while current is not None and current.value != key:
            steps.append(
                step(
                    [highlight_event(current.id, "traverse")],
                    with_selection(before, current.id),
                    f"Traverse for {format_value(key)}",
                )
            )
            parent = current
            current = self.arena.get(current.left if key < current.value else current.right)
        if current is None:
            return [error_step(errors.NOT_FOUND, f"Key {format_value(key)} not found", before)]

        events = []
        if current.left is not None and current.right is not None:
            succ_parent = current
            succ = self.arena.get(current.right)
            while succ.left is not None:
                succ_parent = succ
                succ = self.arena.get(succ.left)
            label = LEFT if succ_parent.left == succ.id else RIGHT
            events.append(unlink_event(succ_parent.id, succ.id, label))
            if succ.right is not None:
                events.append(unlink_event(succ.id, succ.right, RIGHT))
            current.value = succ.value
            if label == LEFT:
                succ_parent.left = succ.right
            else:
                succ_parent.right = succ.right
            self.arena.discard(succ.id)
            events.append({"type": "RemoveNode", "id": succ.id})
            after = self.snapshot()
            events.append(create_node_event(find_node(after, current.id)))
            if succ.right is not None:
                events.append(
                    link_event(make_edge(succ_parent.id, succ.right, label))
                )
            anchor = current.id
        else:
            child = current.left if current.left is not None else current.right
            if parent is None:
                self.arena.root = child
            else:
                label = LEFT if parent.left == current.id else RIGHT
                events.append(unlink_event(parent.id, current.id, label))
                if label == LEFT:
                    parent.left = child
                else:
                    parent.right = child
            self.arena.discard(current.id)
            events.append({"type": "RemoveNode", "id": current.id})
            after = self.snapshot()
            if parent is not None and child is not None:
                events.append(link_event(make_edge(parent.id, child, label)))
            anchor = parent.id if parent is not None else child

        events.append(tip_event(f"Deleted {format_value(key)}", anchor))
        steps.append(step(events, with_selection(after, anchor), f"Delete {format_value(key)}"))
        return steps
