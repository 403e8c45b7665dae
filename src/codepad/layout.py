"""Editor panel layout: drag-to-resize and fullscreen."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_PANEL_HEIGHT = 200
MAX_PANEL_HEIGHT = 800
DEFAULT_PANEL_HEIGHT = 400


def clamp_height(height: float) -> int:
    return int(max(MIN_PANEL_HEIGHT, min(MAX_PANEL_HEIGHT, height)))


@dataclass
class LayoutState:
    panel_height_px: int = DEFAULT_PANEL_HEIGHT
    is_fullscreen: bool = False
    is_dragging: bool = False


class LayoutController:
    """Tracks the resize handle drag and the fullscreen flag.

    A drag starts on pointer-down over the handle, updates the height on
    every pointer move and ends on pointer-up.  Fullscreen is independent of
    dragging.
    """

    def __init__(self, panel_height_px: int = DEFAULT_PANEL_HEIGHT) -> None:
        self.state = LayoutState(panel_height_px=clamp_height(panel_height_px))
        self._start_y = 0.0
        self._start_height = self.state.panel_height_px

    def pointer_down(self, y: float) -> LayoutState:
        self._start_y = y
        self._start_height = self.state.panel_height_px
        self.state.is_dragging = True
        return self.state

    def pointer_move(self, y: float) -> LayoutState:
        if not self.state.is_dragging:
            return self.state
        self.state.panel_height_px = clamp_height(self._start_height + (y - self._start_y))
        return self.state

    def pointer_up(self) -> LayoutState:
        if self.state.is_dragging:
            logger.debug("Panel resized to %spx", self.state.panel_height_px)
        self.state.is_dragging = False
        return self.state

    def toggle_fullscreen(self) -> bool:
        return self.set_fullscreen(not self.state.is_fullscreen)

    def set_fullscreen(self, enabled: bool) -> bool:
        self.state.is_fullscreen = bool(enabled)
        return self.state.is_fullscreen

    def reset(self) -> LayoutState:
        self.state = LayoutState()
        return self.state
