"""MessagePack helpers for streaming steps and timelines to a renderer.

Payloads carry a ``type`` discriminator and a ``v`` version field. Unknown
types, missing versions or unsupported versions raise ``ValueError`` so a
mismatched consumer fails loudly instead of misreading a message.
"""

from __future__ import annotations

from typing import Any, Dict, List

import msgpack  # type: ignore[import-untyped]

from ..config import Config
from ..core.timeline import TimelineEntry, TimelineState
from ..model.types import OpStep

STEP = "Step"
TIMELINE = "Timeline"


def _version() -> int:
    return int(Config.stream.get("version", 1))


def _pack(kind: str, data: Dict[str, Any]) -> bytes:
    payload = {"type": kind, "v": _version(), **data}
    return msgpack.packb(payload, use_bin_type=True)


def _unpack(kind: str, raw: bytes) -> Dict[str, Any]:
    msg = msgpack.unpackb(raw, raw=False)
    if not isinstance(msg, dict):
        raise ValueError("expected a mapping message")
    if msg.get("type") != kind:
        raise ValueError(f"expected type '{kind}'")
    if "v" not in msg:
        raise ValueError("missing 'v' field")
    if msg["v"] != _version():
        raise ValueError(f"unsupported {kind} version: {msg['v']}")
    msg.pop("type", None)
    msg.pop("v", None)
    return msg


def pack_step(step: OpStep, index: int) -> bytes:
    """Return a msgpack-encoded ``Step`` message for global step ``index``."""
    return _pack(STEP, {"index": index, "step": step})


def unpack_step(raw: bytes) -> tuple[OpStep, int]:
    """Decode a ``Step`` message into ``(step, index)``."""
    msg = _unpack(STEP, raw)
    if "step" not in msg or "index" not in msg:
        raise ValueError("Step message requires 'step' and 'index'")
    return msg["step"], int(msg["index"])


def pack_timeline(state: TimelineState) -> bytes:
    """Return a msgpack-encoded ``Timeline`` message."""
    entries: List[Dict[str, Any]] = [entry.to_dict() for entry in state.entries]
    return _pack(
        TIMELINE,
        {
            "entries": entries,
            "currentStepIndex": state.current_step_index,
            "totalSteps": state.total_steps,
        },
    )


def unpack_timeline(raw: bytes) -> TimelineState:
    """Decode a ``Timeline`` message into a :class:`TimelineState`."""
    msg = _unpack(TIMELINE, raw)
    entries = [TimelineEntry.from_dict(entry) for entry in msg.get("entries", [])]
    total = sum(len(entry.steps) for entry in entries)
    if msg.get("totalSteps", total) != total:
        raise ValueError("totalSteps does not match the entries")
    current = int(msg.get("currentStepIndex", total - 1))
    valid = current == -1 if total == 0 else 0 <= current < total
    if not valid:
        raise ValueError(f"currentStepIndex {current} out of range")
    return TimelineState(entries=entries, current_step_index=current, total_steps=total)
