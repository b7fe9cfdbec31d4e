"""Step builders shared by the tree simulators."""

from __future__ import annotations

from typing import List

from . import errors
from .helpers import error_step, highlight_event, step, tip_event, with_selection
from .tree import TreeArena, traverse
from .types import TRAVERSAL_ORDERS, OpStep, StateSnapshot


def traversal_steps(kind: str, arena: TreeArena, order: str, before: StateSnapshot) -> List[OpStep]:
    """Return one highlight step per node visited in ``order``."""
    if arena.root is None:
        return [error_step(errors.EMPTY_TREE, f"Cannot traverse an empty {kind}", before)]
    if order not in TRAVERSAL_ORDERS:
        return [error_step(errors.UNSUPPORTED_OP, f"Unknown traversal order {order}", before)]
    visited = traverse(arena, order)
    if not visited:
        return [error_step(errors.EMPTY_TRAVERSAL, "Traversal produced no steps", before)]
    steps = []
    for position, node_id in enumerate(visited, start=1):
        text = f"Visit {node_id} ({order} #{position})"
        events = [highlight_event(node_id, "visit"), tip_event(text, node_id)]
        steps.append(step(events, with_selection(before, node_id), text))
    return steps
