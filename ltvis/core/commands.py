"""Dispatch of command-layer messages onto a session and its playback."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from ..demos import demo_operations
from .playback import PlaybackController
from .session import Session

logger = logging.getLogger(__name__)

PLAYBACK_ACTIONS = ("play", "pause", "stepForward", "stepBack")


def handle_playback(
    controller: PlaybackController,
    action: Optional[str],
    index: Optional[int] = None,
    speed: Optional[float] = None,
) -> Optional[asyncio.Task]:
    """Apply a playback command.

    ``index`` triggers a jump after ``action`` and a truthy ``speed`` updates
    the multiplier. ``play`` is scheduled as a task when an event loop is
    running and the task is returned; otherwise it is run to completion.
    """

    task = None
    if action is not None and action not in PLAYBACK_ACTIONS:
        raise ValueError(f"Unknown playback action: {action}")
    if action == "play":
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(controller.play())
        else:
            task = asyncio.create_task(controller.play())
    elif action == "pause":
        controller.pause()
    elif action == "stepForward":
        controller.step_forward()
    elif action == "stepBack":
        controller.step_back()
    if index is not None:
        controller.jump_to(index)
    if speed:
        controller.set_speed(speed)
    return task


def handle_command(
    session: Session, controller: PlaybackController, cmd: Mapping[str, Any]
) -> Any:
    """Route one command-layer message by its ``type``.

    Supported types are ``CreateStructure``, ``RunOperation``,
    ``ResetStructure``, ``LoadDemo`` and ``Playback``. Unknown types are
    ignored.
    """

    kind = cmd.get("type")
    if kind == "CreateStructure":
        return session.add_structure(cmd["kind"], cmd["id"], cmd.get("payload"))
    if kind == "RunOperation":
        return session.execute_operation(cmd["op"])
    if kind == "ResetStructure":
        return session.get_snapshot(cmd["id"])
    if kind == "LoadDemo":
        for op in demo_operations(cmd["name"]):
            session.execute_operation(op)
        return session.get_timeline()
    if kind == "Playback":
        return handle_playback(controller, cmd.get("action"), cmd.get("index"), cmd.get("speed"))
    logger.debug("ignoring command %r", kind)
    return None
