import pytest

from ltvis.model.huffman import HuffmanTree
from ltvis.model.operations import parse_operation
from ltvis.viz.renderer import ViewState, apply_step

WEIGHTS = {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45}


def build(weights):
    tree = HuffmanTree("H1")
    steps = tree.apply(parse_operation({"kind": "BuildHuffman", "target": "H1", "weights": weights}))
    return tree, steps


def root_weight(snapshot):
    root = snapshot["meta"]["selection"]
    return next(n["value"] for n in snapshot["nodes"] if n["id"] == root)


def test_build_canonical_example():
    tree, steps = build(WEIGHTS)
    final = steps[-1]["snapshot"]
    assert len(final["nodes"]) == 11
    assert root_weight(final) == 100
    # seed step, one step per merge, final step
    assert len(steps) == 1 + 5 + 1
    assert all("error" not in s for s in steps)


def test_codes_follow_merge_order():
    tree, steps = build(WEIGHTS)
    assert tree.codes() == {
        "f": "0",
        "c": "100",
        "d": "101",
        "a": "1100",
        "b": "1101",
        "e": "111",
    }
    assert steps[-1]["snapshot"]["meta"]["codes"] == tree.codes()


def test_first_merge_takes_two_lightest():
    _, steps = build(WEIGHTS)
    merge = steps[1]
    compared = [e["target"]["id"] for e in merge["events"] if e["type"] == "Highlight"]
    assert compared == ["H1:leaf-a", "H1:leaf-b"]
    created = next(e["node"] for e in merge["events"] if e["type"] == "CreateNode")
    assert created["value"] == 14


def test_ties_keep_insertion_order():
    _, steps = build({"x": 1, "y": 1, "z": 1})
    compared = [e["target"]["id"] for e in steps[1]["events"] if e["type"] == "Highlight"]
    assert compared == ["H1:leaf-x", "H1:leaf-y"]


def test_single_weight():
    tree, steps = build({"a": 3})
    assert len(steps) == 2
    assert len(steps[-1]["snapshot"]["nodes"]) == 1
    assert tree.codes() == {"a": "0"}


def test_invalid_weights_leave_tree_untouched():
    tree, _ = build(WEIGHTS)
    before = tree.snapshot()
    for weights in ({}, {"a": "x"}, {"a": True}, {"a": -1}):
        steps = tree.apply(
            parse_operation({"kind": "BuildHuffman", "target": "H1", "weights": weights})
        )
        assert [s["error"]["code"] for s in steps] == ["invalid_payload"]
        assert tree.snapshot() == before


def test_create_accepts_only_empty_payload():
    tree = HuffmanTree("H1")
    ok = tree.apply(parse_operation({"kind": "Create", "id": "H1", "structure": "Huffman"}))
    assert "error" not in ok[0]
    bad = tree.apply(
        parse_operation({"kind": "Create", "id": "H1", "structure": "Huffman", "payload": [1]})
    )
    assert bad[0]["error"]["code"] == "invalid_payload"


def test_snapshot_round_trip():
    tree, _ = build(WEIGHTS)
    snap = tree.snapshot()
    other = HuffmanTree("H1")
    other.reset_from_snapshot(snap)
    assert other.snapshot() == snap
    assert other.codes() == tree.codes()


def matches(view, snapshot):
    return set(view.nodes) == {n["id"] for n in snapshot["nodes"]} and set(view.edges) == {
        e["id"] for e in snapshot["edges"]
    }


def test_rebuild_removes_previous_tree():
    tree, _ = build({"a": 1, "b": 2, "c": 3})
    view = ViewState.from_snapshot(tree.snapshot())
    steps = tree.apply(parse_operation({"kind": "BuildHuffman", "target": "H1", "weights": {"x": 4, "y": 5}}))
    for index, step in enumerate(steps):
        apply_step(view, step, index)
    assert matches(view, steps[-1]["snapshot"])
    assert set(view.nodes) == {"H1:leaf-x", "H1:leaf-y", "H1:node-0"}


def test_create_clears_built_tree():
    tree, _ = build(WEIGHTS)
    view = ViewState.from_snapshot(tree.snapshot())
    steps = tree.apply(parse_operation({"kind": "Create", "id": "H1", "structure": "Huffman"}))
    apply_step(view, steps[0])
    assert view.nodes == {}
    assert view.edges == {}


@pytest.mark.parametrize(
    "weights",
    [
        {"a": 0, "b": 0},
        {"a": 1, "b": 1, "c": 1, "d": 1},
        {"a": 0, "b": 3, "c": 0, "d": 7, "e": 2},
        {"p": 0.5, "q": 0.25, "r": 0.25},
        {f"k{i}": i for i in range(1, 9)},
        {chr(97 + i): (i * 7) % 5 for i in range(12)},
        {"z": 0},
    ],
)
def test_build_shape_over_weight_maps(weights):
    tree, steps = build(weights)
    n = len(weights)
    final = steps[-1]["snapshot"]
    assert all("error" not in s for s in steps)
    assert len(steps) == 1 + (n - 1) + 1
    assert len(final["nodes"]) == 2 * n - 1
    assert len(final["edges"]) == 2 * (n - 1)
    assert root_weight(final) == sum(weights.values())

    codes = tree.codes()
    assert set(codes) == set(weights)
    for code in codes.values():
        assert not any(other != code and other.startswith(code) for other in codes.values())
