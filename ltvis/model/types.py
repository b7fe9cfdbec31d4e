from __future__ import annotations

from typing import Any, Dict, List, Literal, TypedDict, Union

# Reusable typed mappings for snapshots, events and steps. The field names
# are the wire names shared with renderers and project files.

ID = str
Value = Union[int, float, str]

StructureKind = Literal["SeqList", "LinkedList", "Stack", "BinaryTree", "BST", "Huffman"]
TraversalOrder = Literal["preorder", "inorder", "postorder", "levelorder"]

STRUCTURE_KINDS = ("SeqList", "LinkedList", "Stack", "BinaryTree", "BST", "Huffman")
TRAVERSAL_ORDERS = ("preorder", "inorder", "postorder", "levelorder")

NodeState = TypedDict(
    "NodeState",
    {
        "id": str,
        "label": str,
        "value": Value,
        "x": float,
        "y": float,
        "pinned": bool,
        "props": Dict[str, Any],
    },
    total=False,
)

EdgeState = TypedDict(
    "EdgeState",
    {
        "id": str,
        "src": str,
        "dst": str,
        "label": str,
        "props": Dict[str, Any],
    },
    total=False,
)

StateSnapshot = TypedDict(
    "StateSnapshot",
    {
        "nodes": List[NodeState],
        "edges": List[EdgeState],
        "meta": Dict[str, Any],
    },
    total=False,
)

# Every event is a plain mapping tagged by ``type``; see
# :mod:`ltvis.viz.renderer` for how each one is applied.
VizEvent = Dict[str, Any]

EVENT_TYPES = (
    "CreateNode",
    "RemoveNode",
    "Link",
    "Unlink",
    "Move",
    "Highlight",
    "Compare",
    "Swap",
    "Rotate",
    "Rebalance",
    "Tip",
)

StepError = TypedDict(
    "StepError",
    {
        "code": str,
        "message": str,
        "detail": Any,
    },
    total=False,
)

OpStep = TypedDict(
    "OpStep",
    {
        "events": List[VizEvent],
        "explain": str,
        "snapshot": StateSnapshot,
        "error": StepError,
    },
    total=False,
)


def is_value(obj: Any) -> bool:
    """Return ``True`` when ``obj`` is a number or string scalar."""
    if isinstance(obj, bool):
        return False
    return isinstance(obj, (int, float, str))


def is_value_list(payload: Any) -> bool:
    """Return ``True`` when ``payload`` is a list of number/string scalars."""
    return isinstance(payload, (list, tuple)) and all(is_value(v) for v in payload)
