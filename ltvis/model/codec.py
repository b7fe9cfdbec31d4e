"""Conversion between simulator representations and flat snapshots.

Linear structures are stored as value lists and tree structures as a
:class:`~ltvis.model.tree.TreeArena`. ``*_snapshot`` functions flatten them
into nodes, edges and meta; ``restore_*`` functions rebuild them. The pairs
are mutual inverses up to node and edge identity.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .helpers import format_value, make_edge
from .tree import TreeArena, TreeNode
from .types import ID, EdgeState, NodeState, StateSnapshot, Value, is_value

NEXT = "next"
LEFT = "L"
RIGHT = "R"


# ---------------------------------------------------------------------------
# Linear structures


def linear_snapshot(structure_id: ID, values: Sequence[Value]) -> StateSnapshot:
    """Return the snapshot of a list/stack holding ``values``."""
    nodes: List[NodeState] = [
        {
            "id": f"{structure_id}:{idx}",
            "label": format_value(value),
            "value": value,
            "x": idx,
            "y": 0,
        }
        for idx, value in enumerate(values)
    ]
    edges: List[EdgeState] = [
        make_edge(nodes[idx]["id"], nodes[idx + 1]["id"], NEXT)
        for idx in range(len(nodes) - 1)
    ]
    return {
        "nodes": nodes,
        "edges": edges,
        "meta": {"selection": nodes[0]["id"] if nodes else None},
    }


def _node_payload(node: NodeState) -> Any:
    value = node.get("value")
    if is_value(value):
        return value
    return node.get("label")


def _local_sort_key(structure_id: ID, node_id: ID) -> tuple:
    local = node_id[len(structure_id) + 1 :]
    if local.isdigit():
        return (0, int(local), local)
    return (1, 0, local)


def restore_linear_values(structure_id: ID, snapshot: StateSnapshot) -> List[Value]:
    """Rebuild the value order of a linear structure from ``snapshot``.

    The ``next`` chain is walked from the node without an incoming edge. If
    that walk does not reach every node (for example a hand-built snapshot
    without edges) the nodes are ordered by their numeric local id instead;
    this fallback is best effort only.
    """

    prefix = f"{structure_id}:"
    nodes = [n for n in snapshot.get("nodes", []) if n["id"].startswith(prefix)]
    if not nodes:
        return []

    by_id = {n["id"]: n for n in nodes}
    outgoing: Dict[ID, ID] = {}
    incoming: Dict[ID, ID] = {}
    for edge in snapshot.get("edges", []):
        if edge.get("label", NEXT) != NEXT:
            continue
        if edge["src"] not in by_id or edge["dst"] not in by_id:
            continue
        outgoing[edge["src"]] = edge["dst"]
        incoming[edge["dst"]] = edge["src"]

    ordered: List[Value] = []
    heads = [n["id"] for n in nodes if n["id"] not in incoming]
    if len(heads) == 1:
        seen = set()
        current: Optional[ID] = heads[0]
        while current is not None and current not in seen:
            seen.add(current)
            ordered.append(_node_payload(by_id[current]))
            current = outgoing.get(current)

    if len(ordered) == len(nodes):
        return ordered
    nodes.sort(key=lambda n: _local_sort_key(structure_id, n["id"]))
    return [_node_payload(n) for n in nodes]


# ---------------------------------------------------------------------------
# Tree structures


def _tree_node_state(node: TreeNode) -> NodeState:
    props: Dict[str, Any] = {"weight": node.value}
    if node.label is not None:
        props["char"] = node.label
    return {
        "id": node.id,
        "label": node.label if node.label is not None else format_value(node.value),
        "value": node.value,
        "props": props,
    }


def _collect(arena: TreeArena, root: ID, nodes: List[NodeState], edges: List[EdgeState]) -> None:
    for node in arena.walk(root):
        nodes.append(_tree_node_state(node))
        if node.left is not None:
            edges.append(make_edge(node.id, node.left, LEFT))
        if node.right is not None:
            edges.append(make_edge(node.id, node.right, RIGHT))


def tree_snapshot(structure_id: ID, arena: TreeArena) -> StateSnapshot:
    """Return the snapshot of the tree rooted at ``arena.root``."""
    nodes: List[NodeState] = []
    edges: List[EdgeState] = []
    if arena.root is not None:
        _collect(arena, arena.root, nodes, edges)
    return {"nodes": nodes, "edges": edges, "meta": {"selection": arena.root}}


def forest_snapshot(structure_id: ID, arena: TreeArena, roots: Sequence[ID]) -> StateSnapshot:
    """Return the snapshot of every tree in a transient forest."""
    nodes: List[NodeState] = []
    edges: List[EdgeState] = []
    for root in roots:
        _collect(arena, root, nodes, edges)
    return {
        "nodes": nodes,
        "edges": edges,
        "meta": {"selection": None, "forest": list(roots)},
    }


def node_weight(node: NodeState) -> Value:
    """Return the domain value of a tree node.

    Huffman leaves carry a character label next to a numeric weight while
    internal nodes carry only the weight, hence the layered lookup.
    """

    value = node.get("value")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    props = node.get("props") or {}
    if is_value(props.get("weight")):
        return props["weight"]
    if isinstance(value, str):
        return value
    return node.get("label")


def restore_tree(structure_id: ID, snapshot: StateSnapshot) -> TreeArena:
    """Rebuild a :class:`TreeArena` from ``snapshot``.

    The root is the node without an incoming ``L``/``R`` edge, or the first
    node if every node has one.
    """

    arena = TreeArena()
    snap_nodes = snapshot.get("nodes", [])
    if not snap_nodes:
        return arena
    for node in snap_nodes:
        props = node.get("props") or {}
        arena.add(TreeNode(id=node["id"], value=node_weight(node), label=props.get("char")))

    incoming = set()
    for edge in snapshot.get("edges", []):
        parent = arena.get(edge["src"])
        if parent is None or edge["dst"] not in arena:
            continue
        if edge.get("label") == LEFT:
            parent.left = edge["dst"]
        elif edge.get("label") == RIGHT:
            parent.right = edge["dst"]
        else:
            continue
        incoming.add(edge["dst"])

    roots = [n["id"] for n in snap_nodes if n["id"] not in incoming]
    arena.root = roots[0] if roots else snap_nodes[0]["id"]
    return arena
