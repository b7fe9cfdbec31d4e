"""Session, timeline and playback."""

from .commands import handle_command, handle_playback
from .playback import PlaybackController
from .session import Session
from .timeline import TimelineEntry, TimelineState

__all__ = [
    "PlaybackController",
    "Session",
    "TimelineEntry",
    "TimelineState",
    "handle_command",
    "handle_playback",
]
