"""Run lifecycle: idle, running, settled.

:class:`RunController` keeps at most one execution in flight.  ``run`` is the
only side-effecting entry point; everything else reads or resets state.
Front ends subscribe to transitions rather than polling.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from .errors import UnknownLanguageError
from .executor import CodeExecutor, ExecutionResult
from .languages import Language
from .notices import NoticeBoard

logger = logging.getLogger(__name__)

EMPTY_SOURCE_MESSAGE = "Please write some code first!"
SUCCESS_MESSAGE = "Code executed successfully!"
FAILURE_MESSAGE = "Failed to execute code"


class RunPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SETTLED = "settled"


@dataclass(frozen=True)
class RunState:
    phase: RunPhase = RunPhase.IDLE
    source: Optional[str] = None
    language: Optional[Language] = None
    output: Optional[str] = None
    error: Optional[str] = None
    duration_ms: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self.phase is RunPhase.RUNNING

    @property
    def has_result(self) -> bool:
        return bool(self.output) or bool(self.error)


Listener = Callable[[RunState], None]


class RunController:
    """State machine around a single :class:`CodeExecutor`.

    ``timeout`` bounds how long a run may take, in seconds.  ``None`` (or 0)
    waits forever, in which case a backend that never answers leaves the
    controller running until :meth:`reset` is called.
    """

    def __init__(
        self,
        executor: CodeExecutor,
        notices: Optional[NoticeBoard] = None,
        timeout: Optional[float] = 30,
    ) -> None:
        self.executor = executor
        self.notices = notices or NoticeBoard()
        self.timeout = timeout or None
        self._state = RunState()
        self._listeners: List[Listener] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def run(self, text: str, language: object) -> bool:
        """Start executing ``text``.

        Returns ``False`` without side effects on the executor when the text
        is blank or a run is already in flight.
        """
        parsed = Language.parse(language)
        if parsed is None:
            raise UnknownLanguageError(language)
        if self.is_running:
            logger.info("Run requested while another run is in flight; ignoring")
            return False
        if not text.strip():
            self.notices.error(EMPTY_SOURCE_MESSAGE)
            return False

        loop = asyncio.get_running_loop()
        self._transition(RunState(phase=RunPhase.RUNNING, source=text, language=parsed))
        self.notices.loading(f"Running {parsed.value} code...")
        logger.info("Starting %s run (%d chars)", parsed.value, len(text))
        self._task = loop.create_task(self._execute(text, parsed))
        return True

    async def wait(self) -> RunState:
        """Wait for the in-flight run, if any, and return the resulting state."""
        if self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    def clear(self) -> None:
        """Hide the settled output without starting a new run."""
        if self.is_running:
            return
        self._transition(RunState())

    def reset(self) -> None:
        if self._task is not None and not self._task.done():
            logger.info("Abandoning in-flight run on reset")
            self._task.cancel()
        self._task = None
        self._transition(RunState())

    async def _execute(self, text: str, language: Language) -> None:
        try:
            if self.timeout is None:
                result = await self.executor.execute(text, language)
            else:
                result = await asyncio.wait_for(
                    self.executor.execute(text, language), self.timeout
                )
        except asyncio.TimeoutError:
            message = f"Execution timed out after {self.timeout:g} seconds."
            logger.warning("%s run timed out after %ss", language.value, self.timeout)
            self.notices.error(FAILURE_MESSAGE)
            self._settle(ExecutionResult(output=None, error=message))
        except Exception as exc:
            logger.exception("Executor failed for %s run: %s", language.value, exc)
            self.notices.error(FAILURE_MESSAGE)
            self._settle(ExecutionResult(output=None, error=FAILURE_MESSAGE))
        else:
            if result.error is not None:
                self.notices.error(FAILURE_MESSAGE)
            else:
                self.notices.success(SUCCESS_MESSAGE)
            self._settle(result)

    def _settle(self, result: ExecutionResult) -> None:
        if result.error is not None:
            output, error = None, result.error
        else:
            output, error = result.output, None
        logger.info(
            "Run settled: error=%s, duration_ms=%s", error is not None, result.duration_ms
        )
        self._transition(
            replace(
                self._state,
                phase=RunPhase.SETTLED,
                output=output,
                error=error,
                duration_ms=result.duration_ms,
            )
        )

    def _transition(self, state: RunState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Run state listener %r failed", listener)
