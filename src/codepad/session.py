"""Editor session orchestration.

An :class:`EditorSession` ties together the document model, the run
controller, the layout controller, the clipboard and the theme preference.
It is the object a front end talks to: it reacts to language switches and
keyboard shortcuts, and it turns collaborator failures into notices.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .clipboard import Clipboard, MemoryClipboard
from .document import Document, DocumentModel
from .errors import PersistenceError, UnknownLanguageError
from .executor import CodeExecutor, SimulatedExecutor
from .keyboard import KeyEvent, Shortcut, insert_indent, match_shortcut
from .languages import Language
from .layout import LayoutController
from .notices import NoticeBoard
from .run import RunController
from .storage import THEME_KEY, StorageBackend

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

DEGRADED_MESSAGE = "Storage unavailable; changes are kept for this session only"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


class EditorSession:
    """One user's editor.

    ``flush_on_switch`` selects what happens to a pending save when the
    language changes: ``True`` writes it before switching, ``False`` lets it
    fire on its own timer for the language that was left.
    """

    def __init__(
        self,
        store: StorageBackend,
        executor: CodeExecutor,
        clipboard: Optional[Clipboard] = None,
        *,
        language: Language = Language.JAVASCRIPT,
        save_delay: float = 1.0,
        run_timeout: Optional[float] = 30,
        flush_on_switch: bool = True,
    ) -> None:
        self.store = store
        self.flush_on_switch = flush_on_switch
        self.notices = NoticeBoard()
        self.documents = DocumentModel(
            store,
            language=language,
            save_delay=save_delay,
            on_persistence_error=self._persistence_failed,
        )
        self.runner = RunController(executor, self.notices, timeout=run_timeout)
        self.layout = LayoutController()
        self.clipboard = clipboard or MemoryClipboard()
        self.theme = self._load_theme()

    @classmethod
    def from_config(
        cls,
        config: Config,
        store: StorageBackend,
        executor: Optional[CodeExecutor] = None,
        clipboard: Optional[Clipboard] = None,
    ) -> "EditorSession":
        if executor is None:
            executor = SimulatedExecutor(config.exec_min_delay_ms, config.exec_max_delay_ms)
        return cls(
            store,
            executor,
            clipboard,
            language=config.default_language,
            save_delay=config.save_debounce_ms / 1000,
            run_timeout=config.run_timeout_seconds,
            flush_on_switch=config.flush_on_switch,
        )

    @property
    def language(self) -> Language:
        return self.documents.language

    @property
    def text(self) -> str:
        return self.documents.text

    def edit(self, text: str) -> None:
        self.documents.edit(text)

    def indent(self, start: int, end: Optional[int] = None) -> int:
        """Handle Tab in the text area and return the new caret position."""
        text, caret = insert_indent(self.documents.text, start, end)
        self.documents.edit(text)
        return caret

    def switch_language(self, language: object) -> Document:
        parsed = Language.parse(language)
        if parsed is None:
            raise UnknownLanguageError(language)
        if parsed is self.language:
            return self.documents.active
        previous = self.language
        if self.flush_on_switch:
            self.documents.flush(previous)
        document = self.documents.activate(parsed)
        logger.info("Switched language %s -> %s", previous.value, parsed.value)
        return document

    def toggle_theme(self) -> Theme:
        self.theme = Theme.LIGHT if self.theme is Theme.DARK else Theme.DARK
        try:
            self.store.write_string(THEME_KEY, self.theme.value)
        except PersistenceError as exc:
            logger.warning("Theme not persisted: %s", exc.reason)
            self.notices.warning(DEGRADED_MESSAGE)
        return self.theme

    def run(self) -> bool:
        return self.runner.run(self.documents.text, self.language)

    async def copy(self) -> bool:
        try:
            await self.clipboard.copy(self.documents.text)
        except Exception as exc:
            logger.warning("Copy to clipboard failed: %s", exc)
            self.notices.error("Failed to copy code")
            return False
        self.notices.success("Code copied to clipboard!")
        return True

    def handle_key(self, event: KeyEvent) -> bool:
        """Dispatch a global key press.  Returns ``True`` if it was consumed."""
        shortcut = match_shortcut(event)
        if shortcut is Shortcut.RUN:
            self.run()
            return True
        if shortcut is Shortcut.TOGGLE_FULLSCREEN:
            self.layout.toggle_fullscreen()
            return True
        return False

    def reset(self) -> None:
        """Return run and layout state to their initial values.

        Documents and preferences are kept; pending saves are written first.
        """
        self.documents.flush()
        self.runner.reset()
        self.layout.reset()
        self.notices.drain()

    def close(self) -> None:
        self.documents.flush()
        self.runner.reset()

    def _load_theme(self) -> Theme:
        saved = self.store.read_string(THEME_KEY)
        try:
            return Theme(saved) if saved else Theme.DARK
        except ValueError:
            logger.warning("Ignoring unknown stored theme %r", saved)
            return Theme.DARK

    def _persistence_failed(self, exc: PersistenceError) -> None:
        self.notices.warning(DEGRADED_MESSAGE)
