"""Keyboard handling for the editor.

Two global shortcuts are recognised: Ctrl+Enter (Cmd+Enter on macOS) runs
the active document and F11 toggles fullscreen.  Inside the text area, Tab
inserts two spaces instead of moving focus.  Every other key is left to the
text area.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

INDENT = "  "

SHORTCUTS_HELP = [
    {"keys": "Ctrl+Enter", "action": "run code"},
    {"keys": "F11", "action": "fullscreen"},
]


class Shortcut(str, Enum):
    RUN = "run"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False


def match_shortcut(event: KeyEvent) -> Optional[Shortcut]:
    if event.key == "Enter" and (event.ctrl or event.meta):
        return Shortcut.RUN
    if event.key == "F11":
        return Shortcut.TOGGLE_FULLSCREEN
    return None


def insert_indent(text: str, start: int, end: Optional[int] = None) -> Tuple[str, int]:
    """Replace the selection ``[start, end)`` with two spaces.

    Returns the new text and the caret position just after the inserted
    spaces.  Out of range positions are clamped to the text.
    """
    if end is None:
        end = start
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    return text[:start] + INDENT + text[end:], start + len(INDENT)
