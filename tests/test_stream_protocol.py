"""Contract tests for the step and timeline MessagePack helpers."""

from __future__ import annotations

import msgpack
import pytest

from ltvis.core import timeline as tl
from ltvis.stream.protocol import pack_step, pack_timeline, unpack_step, unpack_timeline

STEP = {
    "events": [{"type": "Tip", "text": "hi"}],
    "explain": "Create",
    "snapshot": {"nodes": [{"id": "S:0", "value": 1.5}], "edges": [], "meta": {"selection": "S:0"}},
}


def test_pack_unpack_step() -> None:
    step, index = unpack_step(pack_step(STEP, 3))
    assert index == 3
    assert step == STEP


def test_pack_unpack_timeline() -> None:
    state = tl.append_entry(tl.create_empty(), [STEP, STEP], label="Create", op_meta={"kind": "Create"})
    result = unpack_timeline(pack_timeline(state))
    assert result == state


def test_unpack_step_unknown_version() -> None:
    raw = msgpack.packb({"type": "Step", "v": 99, "index": 0, "step": STEP}, use_bin_type=True)
    with pytest.raises(ValueError):
        unpack_step(raw)


def test_unpack_step_missing_v() -> None:
    raw = msgpack.packb({"type": "Step", "index": 0, "step": STEP}, use_bin_type=True)
    with pytest.raises(ValueError):
        unpack_step(raw)


def test_unpack_wrong_type() -> None:
    with pytest.raises(ValueError):
        unpack_timeline(pack_step(STEP, 0))


def test_unpack_timeline_bad_cursor() -> None:
    raw = msgpack.packb(
        {"type": "Timeline", "v": 1, "entries": [], "currentStepIndex": 3, "totalSteps": 0},
        use_bin_type=True,
    )
    with pytest.raises(ValueError):
        unpack_timeline(raw)
