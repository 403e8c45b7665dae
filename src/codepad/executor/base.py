"""
Base interfaces and dataclasses for execution backends.

All concrete executors should inherit from :class:`CodeExecutor` and
implement the :meth:`execute` coroutine.  The returned
:class:`ExecutionResult` carries either program output or an error
message; exactly one of the two is set.

Executors may also raise.  The run controller treats any exception as a
transport failure and reports a generic error instead of crashing the
session.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Optional

from ..languages import Language


@dataclass
class ExecutionResult:
    """Result of running a code snippet.

    Attributes
    ----------
    output: str, optional
        Text the program printed.  ``None`` when the run failed.
    error: str, optional
        Error message.  ``None`` when the run succeeded.
    duration_ms: int
        Wall‑clock execution time in milliseconds.
    """

    output: Optional[str]
    error: Optional[str]
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class CodeExecutor(abc.ABC):
    """
    Abstract base class defining the interface for code executors.

    Subclasses override :meth:`execute`.  Executors do not enforce a
    timeout themselves; the caller decides how long it is willing to wait.
    """

    @abc.abstractmethod
    async def execute(self, code: str, language: Language) -> ExecutionResult:
        """Run ``code`` written in ``language``.

        Parameters
        ----------
        code: str
            The user supplied source text.
        language: Language
            Language tag selected in the editor.

        Returns
        -------
        ExecutionResult
            Output or error, plus the elapsed time.
        """
        raise NotImplementedError
