"""Common simulator interface and the kind-to-class factory."""

from __future__ import annotations

from typing import Dict, List, Protocol, Type, runtime_checkable

from .binary_tree import BinaryTree
from .bst import BST
from .huffman import HuffmanTree
from .linked_list import LinkedList
from .operations import Operation
from .seq_list import SeqList
from .stack import Stack
from .types import ID, OpStep, StateSnapshot


@runtime_checkable
class Structure(Protocol):
    """Protocol implemented by every data-structure simulator."""

    kind: str
    id: ID

    def snapshot(self) -> StateSnapshot:
        """Return a fresh snapshot of the current state."""

    def reset(self) -> None:
        """Discard all state."""

    def reset_from_snapshot(self, snapshot: StateSnapshot) -> None:
        """Rebuild the internal state from ``snapshot``."""

    def apply(self, op: Operation) -> List[OpStep]:
        """Apply ``op`` and return the steps it produced."""


STRUCTURE_CLASSES: Dict[str, Type] = {
    "SeqList": SeqList,
    "LinkedList": LinkedList,
    "Stack": Stack,
    "BinaryTree": BinaryTree,
    "BST": BST,
    "Huffman": HuffmanTree,
}


def create_structure(kind: str, structure_id: ID) -> Structure:
    """Return an empty simulator of ``kind`` identified by ``structure_id``."""
    try:
        cls = STRUCTURE_CLASSES[kind]
    except KeyError:
        raise ValueError(f"Unknown structure kind: {kind}") from None
    return cls(structure_id)
