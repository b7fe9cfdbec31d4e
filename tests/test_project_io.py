import json

import pytest

from ltvis.io import load_project, save_project


def _populated(session):
    session.add_structure("LinkedList", "LL", [1, 3, 4])
    session.execute_operation({"kind": "Insert", "target": "LL", "pos": 1, "value": 2})
    session.execute_operation(
        {"kind": "BuildHuffman", "target": "H", "weights": {"a": 1, "b": 2, "c": 3}}
    )
    return session


def test_save_and_load_roundtrip(session, tmp_path):
    _populated(session)
    path = tmp_path / "project.json"
    save_project(str(path), session, title="demo")

    data = json.loads(path.read_text())
    assert data["meta"]["version"] == "1.0"
    assert data["meta"]["title"] == "demo"
    assert [s["id"] for s in data["structures"]] == ["LL", "H"]
    assert [e["label"] for e in data["timeline"]] == ["Create LinkedList", "Insert", "Create Huffman", "BuildHuffman"]

    loaded = load_project(str(path))
    assert loaded.structure_ids() == ["LL", "H"]
    assert loaded.peek_snapshot("LL")["nodes"] == session.peek_snapshot("LL")["nodes"]
    assert loaded.peek_snapshot("H") == session.peek_snapshot("H")
    timeline = loaded.get_timeline()
    assert timeline.total_steps == session.get_timeline().total_steps
    assert timeline.current_step_index == timeline.total_steps - 1
    assert timeline.entries[1].op_meta["kind"] == "Insert"


def test_loaded_session_keeps_operating(session, tmp_path):
    _populated(session)
    path = tmp_path / "p.json"
    save_project(str(path), session)
    loaded = load_project(str(path))
    steps = loaded.execute_operation({"kind": "Delete", "target": "LL", "pos": 0})
    assert [n["value"] for n in steps[-1]["snapshot"]["nodes"]] == [2, 3, 4]


def test_save_does_not_reset_timeline(session, tmp_path):
    _populated(session)
    save_project(str(tmp_path / "p.json"), session)
    assert len(session.get_timeline().entries) == 4


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"structures": []},
        {"meta": {}, "structures": []},
        {"meta": {"version": "1.0"}, "structures": {}},
        {"meta": {"version": "1.0"}, "structures": [{"id": "X", "kind": "Queue", "snapshot": {"nodes": []}}]},
        {"meta": {"version": "1.0"}, "structures": [{"id": "X", "kind": "Stack"}]},
        {"meta": {"version": "1.0"}, "structures": [], "timeline": [{"id": 0}]},
    ],
)
def test_load_rejects_malformed(tmp_path, doc):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(doc))
    with pytest.raises(ValueError):
        load_project(str(path))
