"""Clipboard collaborators.

Copying can fail (for instance when a browser denies permission), so callers
must treat :meth:`Clipboard.copy` as fallible.
"""

from __future__ import annotations

from typing import Optional


class ClipboardError(RuntimeError):
    pass


class Clipboard:
    """Protocol for clipboard implementations."""

    async def copy(self, text: str) -> None:
        raise NotImplementedError


class MemoryClipboard(Clipboard):
    """Holds the last copied text.  ``denied`` simulates a permission refusal."""

    def __init__(self) -> None:
        self.content: Optional[str] = None
        self.denied = False

    async def copy(self, text: str) -> None:
        if self.denied:
            raise ClipboardError("clipboard permission denied")
        self.content = text
