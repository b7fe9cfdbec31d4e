import asyncio

from ltvis.viz.renderer import Renderer, ViewState, apply_event, apply_step


def _node(node_id, value):
    return {"id": node_id, "label": str(value), "value": value}


def _edge(src, dst, label="next"):
    return {"id": f"{src}->{dst}:{label}", "src": src, "dst": dst, "label": label}


def test_events_are_idempotent():
    events = [
        {"type": "CreateNode", "node": _node("A", 1)},
        {"type": "CreateNode", "node": _node("B", 2)},
        {"type": "Link", "edge": _edge("A", "B")},
        {"type": "Highlight", "target": {"kind": "node", "id": "A"}, "style": "focus"},
        {"type": "Move", "id": "B", "x": 3, "y": 1},
        {"type": "Tip", "text": "hello", "anchor": "B"},
    ]
    once = ViewState()
    for event in events:
        apply_event(once, event)
    twice = ViewState()
    for event in events + events:
        apply_event(twice, event)
    assert once == twice
    assert once.nodes["A"]["highlighted"] is True
    assert (once.nodes["B"]["x"], once.nodes["B"]["y"]) == (3, 1)
    assert once.meta.current_tip == "hello"
    assert once.meta.selection == "B"


def test_remove_node_prunes_edges():
    state = ViewState()
    apply_event(state, {"type": "CreateNode", "node": _node("A", 1)})
    apply_event(state, {"type": "CreateNode", "node": _node("B", 2)})
    apply_event(state, {"type": "Link", "edge": _edge("A", "B")})
    apply_event(state, {"type": "RemoveNode", "id": "B"})
    assert state.edges == {}
    apply_event(state, {"type": "RemoveNode", "id": "B"})
    assert list(state.nodes) == ["A"]


def test_unlink_by_id_and_by_endpoints():
    state = ViewState()
    apply_event(state, {"type": "Link", "edge": _edge("A", "B")})
    apply_event(state, {"type": "Link", "edge": _edge("B", "C")})
    apply_event(state, {"type": "Unlink", "id": "A->B:next"})
    assert list(state.edges) == ["B->C:next"]
    apply_event(state, {"type": "Unlink", "src": "B"})
    assert state.edges == {}


def test_swap_and_compare_set_tip():
    state = ViewState()
    apply_event(state, {"type": "CreateNode", "node": _node("A", 1)})
    apply_event(state, {"type": "CreateNode", "node": _node("B", 2)})
    apply_event(state, {"type": "Swap", "a": "A", "b": "B"})
    assert state.nodes["A"]["value"] == 2 and state.nodes["A"]["id"] == "A"
    assert state.meta.current_tip == "Swap A <-> B"
    apply_event(state, {"type": "Compare", "a": "A", "b": "B"})
    assert state.meta.current_tip == "Compare A vs B"
    apply_event(state, {"type": "Rotate"})
    assert state.meta.current_tip == "Rotate"


def test_apply_step_updates_meta():
    state = ViewState()
    step = {
        "events": [{"type": "CreateNode", "node": _node("A", 1)}],
        "explain": "Create A",
        "snapshot": {"nodes": [_node("A", 1)], "edges": [], "meta": {"selection": "A"}},
    }
    apply_step(state, step, 4)
    assert state.meta.step_index == 4
    assert state.meta.explain == "Create A"
    assert state.meta.current_tip == "Create A"
    assert state.meta.selection == "A"


def test_reset_from_snapshot():
    snapshot = {
        "nodes": [_node("A", 1), _node("B", 2)],
        "edges": [_edge("A", "B")],
        "meta": {"selection": "B", "step": 7},
    }
    renderer = Renderer()
    renderer.reset(snapshot)
    state = renderer.get_state()
    assert set(state.nodes) == {"A", "B"}
    assert state.meta.selection == "B"
    assert state.meta.step_index == 7
    state.nodes["A"]["value"] = 99
    assert snapshot["nodes"][0]["value"] == 1
    renderer.reset()
    assert renderer.get_state() == ViewState()


def test_play_applies_all_steps():
    renderer = Renderer()
    steps = [
        {"events": [{"type": "CreateNode", "node": _node(f"N{i}", i)}], "snapshot": {}}
        for i in range(3)
    ]
    asyncio.run(renderer.play(steps))
    assert list(renderer.get_state().nodes) == ["N0", "N1", "N2"]
    assert renderer.get_state().meta.step_index == 2
