"""Exceptions raised by the editor engine."""

from __future__ import annotations


class CodepadError(Exception):
    """Base class for all codepad errors."""


class PersistenceError(CodepadError):
    """A value could not be written to the persistence store."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Unable to persist {key!r}: {reason}")
        self.key = key
        self.reason = reason


class UnknownLanguageError(CodepadError, ValueError):
    """The requested language is not one of the supported tags."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unsupported language: {value}")
        self.value = value
