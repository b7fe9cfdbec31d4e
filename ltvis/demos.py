"""Built-in demo scenarios and scenario file loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml

DEMOS: Dict[str, List[Dict[str, Any]]] = {
    "linked-list": [
        {"kind": "Create", "id": "LL", "structure": "LinkedList", "payload": [1, 3, 4]},
        {"kind": "Insert", "target": "LL", "pos": 1, "value": 2},
    ],
    "bst": [
        {"kind": "Create", "id": "BST", "structure": "BST", "payload": [5, 3, 7, 2, 4, 6, 8]},
        {"kind": "Delete", "target": "BST", "key": 7},
    ],
    "huffman": [
        {
            "kind": "BuildHuffman",
            "target": "HUF",
            "weights": {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45},
        },
    ],
}


def demo_operations(name: str) -> List[Dict[str, Any]]:
    """Return a fresh copy of the operation list of demo ``name``."""
    if name not in DEMOS:
        raise ValueError(f"Unknown demo: {name} (choose from {', '.join(DEMOS)})")
    return json.loads(json.dumps(DEMOS[name]))


def load_scenario(path: str) -> List[Dict[str, Any]]:
    """Load the operation list from a YAML or JSON scenario file.

    The file holds either a list of operation mappings or a mapping with an
    ``operations`` list.
    """

    src = Path(path)
    with src.open(encoding="utf-8") as fh:
        if src.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(fh)
        else:
            data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("operations")
    if not isinstance(data, list) or not all(isinstance(op, dict) for op in data):
        raise ValueError(f"{path} must contain a list of operations")
    return data
