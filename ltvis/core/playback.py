"""Playback state machine driving a renderer over a recorded timeline."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Literal, Optional, Protocol, runtime_checkable

from ..config import Config
from ..model.types import OpStep, StateSnapshot
from .timeline import TimelineState, flatten_steps

logger = logging.getLogger(__name__)

PlaybackState = Literal["idle", "playing", "paused"]

# floor applied even when the configured minimum is not positive
SPEED_FLOOR = 1e-3


def _clamp_speed(multiplier: float) -> float:
    return max(Config.playback["min_speed"], multiplier, SPEED_FLOOR)


@runtime_checkable
class StepRenderer(Protocol):
    """The part of a renderer the playback controller drives."""

    def reset(self, snapshot: Optional[StateSnapshot] = None) -> None:
        """Clear the view, optionally seeding it from ``snapshot``."""

    def apply_step(self, step: OpStep, index: int) -> None:
        """Apply every event of ``step`` recorded at global ``index``."""


class PlaybackController:
    """Play, pause and scrub through the steps of a timeline.

    Parameters
    ----------
    renderer:
        Object implementing :class:`StepRenderer`.
    timeline:
        Callable returning the current :class:`TimelineState`. It is called
        on every action so the controller always sees the latest entries;
        cursor moves are written back onto the returned state.
    reset_to_snapshot:
        Callback used by :meth:`step_back` and :meth:`jump_to` to seed the
        view from a recorded snapshot. Defaults to ``renderer.reset``.
    on_step_applied:
        Optional hook called as ``on_step_applied(step, index)`` after each
        step is applied.
    base_delay_ms:
        Delay between auto-played steps at speed ``1.0``. Defaults to
        ``Config.playback["base_delay_ms"]``.
    """

    def __init__(
        self,
        renderer: StepRenderer,
        timeline: Callable[[], TimelineState],
        reset_to_snapshot: Optional[Callable[[StateSnapshot], None]] = None,
        on_step_applied: Optional[Callable[[OpStep, int], None]] = None,
        base_delay_ms: Optional[float] = None,
    ) -> None:
        self.renderer = renderer
        self._timeline = timeline
        self._reset_to_snapshot = reset_to_snapshot or renderer.reset
        self._on_step_applied = on_step_applied
        self.base_delay_ms = (
            Config.playback["base_delay_ms"] if base_delay_ms is None else base_delay_ms
        )
        self.speed = _clamp_speed(Config.playback.get("speed", 1.0))
        self._status: PlaybackState = "idle"
        self._current_index = -1

    # ------------------------------------------------------------------
    @property
    def state(self) -> PlaybackState:
        return self._status

    status = state

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def delay_seconds(self) -> float:
        return self.base_delay_ms / self.speed / 1000.0

    # ------------------------------------------------------------------
    def _set_status(self, status: PlaybackState) -> None:
        if status != self._status:
            logger.debug("playback %s -> %s", self._status, status)
        self._status = status

    def _apply(self, step: OpStep, index: int) -> None:
        self.renderer.apply_step(step, index)
        if self._on_step_applied is not None:
            self._on_step_applied(step, index)

    def _move_cursor(self, index: int) -> None:
        self._current_index = index
        self._timeline().current_step_index = index

    def _replay(self, steps: List[OpStep], last: int) -> None:
        for index, step in enumerate(steps[: last + 1]):
            self._apply(step, index)
        self._move_cursor(last)

    # ------------------------------------------------------------------
    async def play(self, steps: Optional[List[OpStep]] = None) -> None:
        """Auto-advance from step 0 until the end or until paused.

        Status is checked before each step, so :meth:`pause` takes effect at
        the next delay boundary. The controller returns to ``idle`` whichever
        way the loop ends, including errors raised by the renderer or the hook
        and cancellation.
        """

        self._set_status("playing")
        queue = steps if steps is not None else flatten_steps(self._timeline())
        try:
            for index, step in enumerate(queue):
                if self._status != "playing":
                    break
                self.renderer.apply_step(step, index)
                self._move_cursor(index)
                if self._on_step_applied is not None:
                    self._on_step_applied(step, index)
                await asyncio.sleep(self.delay_seconds)
        finally:
            self._set_status("idle")

    def pause(self) -> None:
        self._set_status("paused")

    def step_forward(self) -> None:
        tl = self._timeline()
        if tl.current_step_index >= tl.total_steps - 1:
            return
        index = tl.current_step_index + 1
        self._apply(flatten_steps(tl)[index], index)
        self._move_cursor(index)

    def step_back(self) -> None:
        """Move one step back, seeding the view from the target's snapshot."""
        tl = self._timeline()
        if tl.current_step_index <= 0:
            return
        target = tl.current_step_index - 1
        steps = flatten_steps(tl)
        snapshot = steps[target].get("snapshot")
        if snapshot is not None:
            self._reset_to_snapshot(snapshot)
        else:
            logger.debug("step %d has no snapshot; replaying from 0", target)
            self.renderer.reset()
        self._replay(steps, target)

    def jump_to(self, index: int) -> None:
        """Replay deterministically from step 0 through ``index`` (clamped)."""
        tl = self._timeline()
        if tl.total_steps == 0:
            return
        clamped = max(0, min(index, tl.total_steps - 1))
        steps = flatten_steps(tl)
        self.renderer.reset()
        snapshot = steps[clamped].get("snapshot")
        if snapshot is not None:
            self._reset_to_snapshot(snapshot)
        self._replay(steps, clamped)

    def set_speed(self, multiplier: float) -> None:
        self.speed = _clamp_speed(multiplier)
        logger.debug("playback speed set to %s", self.speed)
