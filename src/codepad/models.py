"""Pydantic models for request and response bodies.

These models express the structure exchanged with the browser front end.
Internal state objects (``RunState``, ``LayoutState``) are dataclasses; the
``from_*`` helpers project them onto the wire format.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .keyboard import SHORTCUTS_HELP
from .languages import Language
from .layout import LayoutState
from .notices import Notice
from .run import RunState


class LanguageInfo(BaseModel):
    value: str
    label: str
    icon: str

    @classmethod
    def from_language(cls, language: Language) -> "LanguageInfo":
        return cls(value=language.value, label=language.label, icon=language.icon)


class DocumentUpdate(BaseModel):
    """Request body for replacing the active document's text."""

    text: str = Field(..., description="Full text of the editor buffer.")


class IndentRequest(BaseModel):
    """Request body for a Tab key press inside the text area."""

    selection_start: int = Field(..., ge=0)
    selection_end: Optional[int] = Field(
        default=None, ge=0, description="End of the selection; defaults to the caret."
    )


class IndentResponse(BaseModel):
    text: str
    caret: int


class LanguageSwitchRequest(BaseModel):
    language: str = Field(..., description="One of javascript, python, cpp, java.")


class DocumentInfo(BaseModel):
    language: str
    label: str
    text: str
    pending_save: bool = False


class RunInfo(BaseModel):
    phase: str
    is_running: bool
    language: Optional[str] = None
    output: Optional[str] = None
    error: Optional[str] = None
    duration_ms: Optional[int] = None

    @classmethod
    def from_state(cls, state: RunState) -> "RunInfo":
        return cls(
            phase=state.phase.value,
            is_running=state.is_running,
            language=state.language.value if state.language else None,
            output=state.output,
            error=state.error,
            duration_ms=state.duration_ms,
        )


class RunResponse(BaseModel):
    accepted: bool
    run: RunInfo


class LayoutInfo(BaseModel):
    panel_height_px: int
    is_fullscreen: bool
    is_dragging: bool

    @classmethod
    def from_state(cls, state: LayoutState) -> "LayoutInfo":
        return cls(
            panel_height_px=state.panel_height_px,
            is_fullscreen=state.is_fullscreen,
            is_dragging=state.is_dragging,
        )


class PointerEvent(BaseModel):
    y: float = Field(..., description="Pointer Y coordinate in CSS pixels.")


class FullscreenRequest(BaseModel):
    enabled: Optional[bool] = Field(
        default=None, description="Target state; toggles when omitted."
    )


class KeyEventRequest(BaseModel):
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False


class KeyEventResponse(BaseModel):
    handled: bool


class ThemeInfo(BaseModel):
    theme: str


class CopyResponse(BaseModel):
    copied: bool


class NoticeInfo(BaseModel):
    level: str
    message: str
    duration_ms: int

    @classmethod
    def from_notice(cls, notice: Notice) -> "NoticeInfo":
        return cls(level=notice.level, message=notice.message, duration_ms=notice.duration_ms)


class ShortcutInfo(BaseModel):
    keys: str
    action: str


class SessionSnapshot(BaseModel):
    """Everything a front end needs to render the editor."""

    document: DocumentInfo
    theme: str
    run: RunInfo
    layout: LayoutInfo
    show_output: bool
    persistence_degraded: bool
    languages: List[LanguageInfo] = Field(
        default_factory=lambda: [LanguageInfo.from_language(lang) for lang in Language]
    )
    shortcuts: List[ShortcutInfo] = Field(
        default_factory=lambda: [ShortcutInfo(**item) for item in SHORTCUTS_HELP]
    )
