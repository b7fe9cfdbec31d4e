"""Arena representation shared by the tree simulators.

Tree nodes live in a dictionary keyed by id and refer to their children by
id, so restoring from a snapshot is a pure map-building step and no object
graph can outlive a reset.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from .types import ID, Value


@dataclass
class TreeNode:
    """A binary tree node whose children are ids into the owning arena."""

    id: ID
    value: Value
    label: Optional[str] = None
    left: Optional[ID] = None
    right: Optional[ID] = None


@dataclass
class TreeArena:
    """Id-indexed store of :class:`TreeNode` objects with a root pointer."""

    nodes: Dict[ID, TreeNode] = field(default_factory=dict)
    root: Optional[ID] = None

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def get(self, node_id: Optional[ID]) -> Optional[TreeNode]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def add(self, node: TreeNode) -> TreeNode:
        self.nodes[node.id] = node
        return node

    def discard(self, node_id: ID) -> None:
        self.nodes.pop(node_id, None)

    def walk(self, root: Optional[ID] = None) -> Iterator[TreeNode]:
        """Yield the nodes reachable from ``root`` using an explicit stack."""
        start = self.root if root is None else root
        if start is None:
            return
        stack: List[ID] = [start]
        while stack:
            node = self.nodes.get(stack.pop())
            if node is None:
                continue
            yield node
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)


def build_level_order(structure_id: ID, values: Sequence[Value]) -> TreeArena:
    """Return an arena laid out as a complete tree in level order.

    Node ``i`` gets id ``"<structure_id>:<i>"`` with children ``2i+1`` and
    ``2i+2``.
    """

    arena = TreeArena()
    count = len(values)
    for idx, value in enumerate(values):
        left = 2 * idx + 1
        right = 2 * idx + 2
        arena.add(
            TreeNode(
                id=f"{structure_id}:{idx}",
                value=value,
                left=f"{structure_id}:{left}" if left < count else None,
                right=f"{structure_id}:{right}" if right < count else None,
            )
        )
    arena.root = f"{structure_id}:0" if count else None
    return arena


def traverse(arena: TreeArena, order: str) -> List[ID]:
    """Return node ids of ``arena`` in ``order``.

    ``preorder``, ``inorder`` and ``postorder`` follow the recursive visit
    order; ``levelorder`` is breadth first via a FIFO queue.
    """

    result: List[ID] = []
    if arena.root is None:
        return result
    if order == "levelorder":
        queue = deque([arena.root])
        while queue:
            node = arena.get(queue.popleft())
            if node is None:
                continue
            result.append(node.id)
            if node.left is not None:
                queue.append(node.left)
            if node.right is not None:
                queue.append(node.right)
        return result

    def visit(node_id: Optional[ID]) -> None:
        node = arena.get(node_id)
        if node is None:
            return
        if order == "preorder":
            result.append(node.id)
        visit(node.left)
        if order == "inorder":
            result.append(node.id)
        visit(node.right)
        if order == "postorder":
            result.append(node.id)

    visit(arena.root)
    return result


def next_local_index(arena: TreeArena, structure_id: ID) -> int:
    """Return one past the largest numeric local id in ``arena``."""
    prefix = f"{structure_id}:"
    highest = -1
    for node_id in arena.nodes:
        if node_id.startswith(prefix):
            local = node_id[len(prefix) :]
            if local.isdigit():
                highest = max(highest, int(local))
    return highest + 1
