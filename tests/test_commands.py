import asyncio

import pytest

from ltvis.core.commands import handle_command, handle_playback
from ltvis.core.playback import PlaybackController
from ltvis.viz.renderer import Renderer


@pytest.fixture
def controller(session):
    return PlaybackController(Renderer(), session.get_timeline, base_delay_ms=0)


def test_create_and_run_operation(session, controller):
    handle_command(session, controller, {"type": "CreateStructure", "kind": "Stack", "id": "S", "payload": [1]})
    steps = handle_command(
        session, controller, {"type": "RunOperation", "op": {"kind": "Push", "target": "S", "value": 2}}
    )
    assert [n["value"] for n in steps[-1]["snapshot"]["nodes"]] == [1, 2]


def test_load_demo(session, controller):
    handle_command(session, controller, {"type": "LoadDemo", "name": "bst"})
    snap = session.peek_snapshot("BST")
    assert sorted(n["value"] for n in snap["nodes"]) == [2, 3, 4, 5, 6, 8]


def test_reset_structure_clears_timeline(session, controller):
    handle_command(session, controller, {"type": "LoadDemo", "name": "linked-list"})
    snap = handle_command(session, controller, {"type": "ResetStructure", "id": "LL"})
    assert [n["value"] for n in snap["nodes"]] == [1, 2, 3, 4]
    assert session.get_timeline().entries == []


def test_unknown_command_is_ignored(session, controller):
    assert handle_command(session, controller, {"type": "Dance"}) is None


def test_playback_steps_and_speed(session, controller):
    handle_command(session, controller, {"type": "LoadDemo", "name": "linked-list"})
    handle_playback(controller, "stepBack")
    assert controller.current_index == session.get_timeline().total_steps - 2
    handle_playback(controller, "stepForward", speed=2)
    assert controller.current_index == session.get_timeline().total_steps - 1
    assert controller.speed == 2
    handle_playback(controller, None, index=0)
    assert controller.current_index == 0


def test_playback_play_without_loop_runs_to_completion(session, controller):
    handle_command(session, controller, {"type": "LoadDemo", "name": "huffman"})
    assert handle_playback(controller, "play") is None
    assert controller.current_index == session.get_timeline().total_steps - 1
    assert controller.state == "idle"


def test_playback_play_inside_loop_returns_task(session, controller):
    handle_command(session, controller, {"type": "LoadDemo", "name": "huffman"})

    async def run():
        task = handle_playback(controller, "play")
        assert isinstance(task, asyncio.Task)
        await task

    asyncio.run(run())
    assert controller.state == "idle"


def test_playback_rejects_unknown_action(controller):
    with pytest.raises(ValueError):
        handle_playback(controller, "rewind")
