"""Headless view state and renderer."""

from .renderer import Renderer, ViewState, apply_event, apply_step

__all__ = ["Renderer", "ViewState", "apply_event", "apply_step"]
