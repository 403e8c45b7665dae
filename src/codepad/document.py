"""In-memory document buffer with debounced persistence.

One :class:`Document` is active at a time.  Edits replace its text
synchronously; saving is debounced so a burst of keystrokes produces a single
write once the user pauses.  Each document owns its own timer, so a save
that is still pending for a language keeps the text that language had when
it was switched away from.

Timers are scheduled on the running asyncio loop, so :meth:`DocumentModel.edit`
must be called from inside a coroutine or a loop callback.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .errors import PersistenceError, UnknownLanguageError
from .languages import Language, default_text
from .storage import StorageBackend

logger = logging.getLogger(__name__)


@dataclass
class Document:
    language: str
    text: str


class Debouncer:
    """Cancelable timer that runs ``callback`` once after a quiet period.

    Re-arming cancels the previous timer, so only the last call in a burst
    takes effect.
    """

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run the callback now if a timer is pending."""
        if self._handle is None:
            return
        self.cancel()
        self._callback()

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class DocumentModel:
    """Owns the active document and its per-language persistence."""

    def __init__(
        self,
        store: StorageBackend,
        language: Language = Language.JAVASCRIPT,
        save_delay: float = 1.0,
        on_persistence_error: Optional[Callable[[PersistenceError], None]] = None,
    ) -> None:
        self.store = store
        self.save_delay = save_delay
        self._on_persistence_error = on_persistence_error
        # Keyed by language value.
        self._timers: Dict[str, Debouncer] = {}
        # Text that could not be written; authoritative for this session only.
        self._session_only: Dict[str, str] = {}
        self.active = self.load(language)

    @property
    def degraded(self) -> bool:
        """True while some document exists only in memory."""
        return bool(self._session_only)

    @property
    def text(self) -> str:
        return self.active.text

    @property
    def language(self) -> Language:
        return Language(self.active.language)

    def load(self, language: object) -> Document:
        parsed = Language.parse(language)
        if parsed is None:
            return Document(language=str(language), text=default_text(language))

        self.flush(parsed)
        if parsed.value in self._session_only:
            return Document(language=parsed, text=self._session_only[parsed.value])
        saved = self.store.read_string(parsed.storage_key)
        if saved:
            return Document(language=parsed, text=saved)
        return Document(language=parsed, text=parsed.template)

    def activate(self, language: object) -> Document:
        parsed = Language.parse(language)
        if parsed is None:
            raise UnknownLanguageError(language)
        self.active = self.load(parsed)
        return self.active

    def edit(self, new_text: str) -> None:
        self.active.text = new_text
        self.schedule_save()

    def schedule_save(self) -> None:
        document = self.active
        name = Language(document.language).value
        timer = self._timers.get(name)
        if timer is None or not timer.pending:
            timer = Debouncer(self.save_delay, lambda: self._save(document))
            self._timers[name] = timer
        timer.arm()

    def _timer_for(self, language: object) -> Optional[Debouncer]:
        parsed = Language.parse(language)
        if parsed is None:
            return None
        return self._timers.get(parsed.value)

    def has_pending_save(self, language: object = None) -> bool:
        if language is None:
            return any(timer.pending for timer in self._timers.values())
        timer = self._timer_for(language)
        return timer is not None and timer.pending

    def flush(self, language: object = None) -> None:
        """Write pending saves now, for one language or for all of them."""
        if language is None:
            for timer in list(self._timers.values()):
                timer.flush()
            return
        timer = self._timer_for(language)
        if timer is not None:
            timer.flush()

    def cancel_pending(self) -> None:
        for timer in self._timers.values():
            timer.cancel()

    def _save(self, document: Document) -> None:
        language = Language(document.language)
        text = document.text
        if not text.strip():
            logger.debug("Skipping save of empty %s document", language.value)
            return
        try:
            self.store.write_string(language.storage_key, text)
        except PersistenceError as exc:
            first_failure = not self._session_only
            self._session_only[language.value] = text
            logger.warning("Keeping %s in memory only: %s", language.storage_key, exc.reason)
            if first_failure and self._on_persistence_error is not None:
                self._on_persistence_error(exc)
            return
        self._session_only.pop(language.value, None)
        logger.debug("Saved %s (%d chars)", language.storage_key, len(text))
