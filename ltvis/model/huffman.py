"""Huffman tree construction from a weight map."""

from __future__ import annotations

from typing import Dict, List, Optional

from . import errors
from .codec import LEFT, RIGHT, forest_snapshot, restore_tree, tree_snapshot
from .helpers import (
    create_node_event,
    error_step,
    find_node,
    format_value,
    highlight_event,
    link_event,
    make_edge,
    removal_events,
    step,
    tip_event,
    unsupported_step,
    wrong_target_step,
)
from .operations import Operation, target_id
from .tree import TreeArena, TreeNode
from .types import ID, OpStep, StateSnapshot


def _valid_weight(weight: object) -> bool:
    return isinstance(weight, (int, float)) and not isinstance(weight, bool) and weight >= 0


def huffman_codes(arena: TreeArena) -> Dict[str, str]:
    """Return the prefix code of every labelled leaf (left is ``0``)."""
    codes: Dict[str, str] = {}
    if arena.root is None:
        return codes
    stack = [(arena.root, "")]
    while stack:
        node_id, prefix = stack.pop()
        node = arena.get(node_id)
        if node is None:
            continue
        if node.left is None and node.right is None:
            if node.label is not None:
                codes[node.label] = prefix or "0"
            continue
        if node.right is not None:
            stack.append((node.right, prefix + "1"))
        if node.left is not None:
            stack.append((node.left, prefix + "0"))
    return codes


class HuffmanTree:
    """Huffman tree simulator.

    ``BuildHuffman`` seeds a forest of leaves and repeatedly merges the two
    lightest trees, emitting one step per merge. The forest lives in a scratch
    arena until the build completes, so a rejected build leaves the previous
    tree untouched.
    """

    kind = "Huffman"

    def __init__(self, structure_id: ID) -> None:
        self.id = structure_id
        self.arena = TreeArena()

    def snapshot(self) -> StateSnapshot:
        return tree_snapshot(self.id, self.arena)

    def reset(self) -> None:
        self.arena = TreeArena()

    def reset_from_snapshot(self, snapshot: StateSnapshot) -> None:
        self.arena = restore_tree(self.id, snapshot)

    def codes(self) -> Dict[str, str]:
        return huffman_codes(self.arena)

    def apply(self, op: Operation) -> List[OpStep]:
        before = self.snapshot()
        if target_id(op) != self.id:
            return [wrong_target_step(target_id(op), self.id, before)]
        if op.kind == "Create":
            return [self._create(op, before)]
        if op.kind == "BuildHuffman":
            return self._build(op.weights, before)
        return [unsupported_step(self.kind, op.kind, before)]

    def _create(self, op, before: StateSnapshot) -> OpStep:
        if op.structure != self.kind:
            return error_step(errors.KIND_MISMATCH, f"Cannot create {op.structure} on {self.kind}", before)
        if op.payload not in (None, [], ()):
            return error_step(
                errors.INVALID_PAYLOAD, "Huffman trees are built from weights with BuildHuffman", before
            )
        self.reset()
        snapshot = self.snapshot()
        events = removal_events(before, snapshot)
        events.append(tip_event("Created empty Huffman tree"))
        return step(events, snapshot, "Create Huffman")

    def _leaf_id(self, char: str) -> ID:
        return f"{self.id}:leaf-{char}"

    def _build(self, weights: Optional[Dict[str, object]], before: StateSnapshot) -> List[OpStep]:
        if not weights:
            return [error_step(errors.INVALID_PAYLOAD, "Weights map is empty", before)]
        bad = sorted(str(char) for char, weight in weights.items() if not _valid_weight(weight))
        if bad:
            return [
                error_step(
                    errors.INVALID_PAYLOAD,
                    f"Weights must be non-negative numbers (bad keys: {', '.join(bad)})",
                    before,
                )
            ]

        arena = TreeArena()
        forest: List[ID] = []
        for char, weight in weights.items():
            leaf = arena.add(TreeNode(id=self._leaf_id(str(char)), value=weight, label=str(char)))
            forest.append(leaf.id)
        seeded = forest_snapshot(self.id, arena, forest)
        events = removal_events(before, seeded)
        events.extend(create_node_event(node) for node in seeded["nodes"])
        steps = [step(events, seeded, "Init Huffman leaves")]

        counter = 0
        while len(forest) > 1:
            forest.sort(key=lambda node_id: arena.nodes[node_id].value)
            left = arena.nodes[forest.pop(0)]
            right = arena.nodes[forest.pop(0)]
            parent = arena.add(
                TreeNode(
                    id=f"{self.id}:node-{counter}",
                    value=left.value + right.value,
                    left=left.id,
                    right=right.id,
                )
            )
            counter += 1
            forest.append(parent.id)
            snapshot = forest_snapshot(self.id, arena, forest)
            left_name = left.label or left.id
            right_name = right.label or right.id
            events = [
                highlight_event(left.id, "compare"),
                highlight_event(right.id, "compare"),
                create_node_event(find_node(snapshot, parent.id)),
                link_event(make_edge(parent.id, left.id, LEFT)),
                link_event(make_edge(parent.id, right.id, RIGHT)),
                tip_event(
                    f"Merge {left_name} ({format_value(left.value)}) + "
                    f"{right_name} ({format_value(right.value)})",
                    parent.id,
                ),
            ]
            steps.append(step(events, snapshot, "Merge step"))

        arena.root = forest[0]
        self.arena = arena
        final = self.snapshot()
        final["meta"]["codes"] = self.codes()
        events = [link_event(edge) for edge in final["edges"]]
        events.append(tip_event("Huffman tree built", arena.root))
        steps.append(step(events, final, "Huffman tree built"))
        return steps
