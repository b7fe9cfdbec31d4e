import asyncio

import pytest

from ltvis.config import Config
from ltvis.core.playback import SPEED_FLOOR, PlaybackController
from ltvis.core.session import Session
from ltvis.viz.renderer import Renderer


def _session():
    session = Session()
    session.add_structure("Stack", "S", [1])
    session.execute_operation({"kind": "Push", "target": "S", "value": 2})
    return session


def _controller(session, renderer=None, **kwargs):
    renderer = renderer or Renderer()
    return PlaybackController(renderer, session.get_timeline, base_delay_ms=0, **kwargs)


def test_jump_then_step_forward_matches_direct_jump():
    session = _session()
    assert [len(e.steps) for e in session.get_timeline().entries] == [1, 2]

    stepped = Renderer()
    a = _controller(session, stepped)
    a.jump_to(0)
    a.step_forward()
    a.step_forward()
    assert session.get_timeline().current_step_index == 2

    direct = Renderer()
    b = _controller(session, direct)
    b.jump_to(2)
    assert session.get_timeline().current_step_index == 2
    assert stepped.get_state() == direct.get_state()


def test_step_forward_at_end_is_noop():
    session = _session()
    renderer = Renderer()
    calls = []
    controller = _controller(session, renderer, on_step_applied=lambda s, i: calls.append(i))
    controller.jump_to(2)
    calls.clear()
    before = renderer.get_state()
    controller.step_forward()
    assert calls == []
    assert renderer.get_state() is before
    assert session.get_timeline().current_step_index == 2


def test_step_back_at_start_is_noop():
    session = _session()
    renderer = Renderer()
    controller = _controller(session, renderer)
    controller.jump_to(0)
    state = renderer.get_state()
    controller.step_back()
    assert renderer.get_state() is state
    assert controller.current_index == 0


def test_step_back_restores_snapshot_and_replays():
    session = _session()
    seeded = []
    renderer = Renderer()

    def reset_to(snapshot):
        seeded.append(snapshot)
        renderer.reset(snapshot)

    calls = []
    controller = _controller(
        session, renderer, reset_to_snapshot=reset_to, on_step_applied=lambda s, i: calls.append(i)
    )
    controller.step_back()
    steps = [s for e in session.get_timeline().entries for s in e.steps]
    assert seeded == [steps[1]["snapshot"]]
    assert calls == [0, 1]
    assert controller.current_index == 1
    assert renderer.get_state().meta.step_index == 1


def test_jump_to_clamps_index():
    session = _session()
    controller = _controller(session)
    controller.jump_to(50)
    assert controller.current_index == 2
    controller.jump_to(-3)
    assert controller.current_index == 0


def test_jump_to_on_empty_timeline_is_noop():
    session = Session()
    controller = _controller(session)
    controller.jump_to(4)
    assert controller.current_index == -1
    assert session.get_timeline().current_step_index == -1


def test_play_applies_every_step_and_returns_to_idle():
    session = _session()
    calls = []
    controller = _controller(session, on_step_applied=lambda s, i: calls.append(i))
    asyncio.run(controller.play())
    assert calls == [0, 1, 2]
    assert controller.state == "idle"
    assert session.get_timeline().current_step_index == 2


def test_play_with_explicit_steps():
    session = _session()
    renderer = Renderer()
    controller = _controller(session, renderer)
    steps = session.get_timeline().entries[0].steps
    asyncio.run(controller.play(steps))
    assert renderer.get_state().meta.step_index == 0


def test_pause_stops_at_next_boundary():
    session = _session()
    calls = []

    def on_step(step, index):
        calls.append(index)
        if index == 0:
            controller.pause()

    controller = _controller(session, on_step_applied=on_step)
    asyncio.run(controller.play())
    assert calls == [0]
    assert controller.state == "idle"
    assert controller.current_index == 0


def test_set_speed_clamps_to_minimum():
    controller = _controller(Session())
    controller.set_speed(0)
    assert controller.speed == 0.1
    controller.set_speed(4)
    assert controller.speed == 4
    controller.base_delay_ms = 200
    assert controller.delay_seconds == 0.05


def test_replay_after_recreate_and_rebuild_matches_snapshots():
    session = Session()
    session.add_structure("LinkedList", "L", [1, 2, 3])
    session.add_structure("LinkedList", "L", [9])
    session.execute_operation({"kind": "BuildHuffman", "target": "H", "weights": {"a": 1, "b": 2, "c": 3}})
    session.execute_operation({"kind": "BuildHuffman", "target": "H", "weights": {"x": 4, "y": 5}})
    renderer = Renderer()
    controller = _controller(session, renderer)

    controller.jump_to(1)
    assert set(renderer.get_state().nodes) == {"L:0"}
    assert renderer.get_state().edges == {}

    last = session.get_timeline().total_steps - 1
    controller.jump_to(last)
    linked = session.peek_snapshot("L")
    huffman = session.peek_snapshot("H")
    state = renderer.get_state()
    assert set(state.nodes) == {n["id"] for n in linked["nodes"] + huffman["nodes"]}
    assert set(state.edges) == {e["id"] for e in linked["edges"] + huffman["edges"]}
    assert state.nodes["H:node-0"]["value"] == 9


def test_play_returns_to_idle_when_hook_raises():
    session = _session()

    def on_step(step, index):
        raise RuntimeError("boom")

    controller = _controller(session, on_step_applied=on_step)
    with pytest.raises(RuntimeError):
        asyncio.run(controller.play())
    assert controller.state == "idle"


def test_play_returns_to_idle_when_cancelled():
    session = _session()
    controller = PlaybackController(Renderer(), session.get_timeline, base_delay_ms=10_000)

    async def run():
        task = asyncio.create_task(controller.play())
        await asyncio.sleep(0)
        assert controller.state == "playing"
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(run())
    assert controller.state == "idle"


def test_speed_floor_survives_non_positive_config_minimum():
    Config.playback["min_speed"] = 0
    controller = _controller(Session())
    controller.set_speed(0)
    assert controller.speed == SPEED_FLOOR
    controller.base_delay_ms = 200
    assert controller.delay_seconds > 0
