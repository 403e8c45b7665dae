from __future__ import annotations

import asyncio
import os
from typing import List, Optional, Tuple

import pytest

# Keep the module level API session off the filesystem.
os.environ.setdefault("CODEPAD_STORAGE_BACKEND", "memory")

from codepad.executor import CodeExecutor, ExecutionResult  # noqa: E402
from codepad.storage import MemoryStorageBackend  # noqa: E402


class ScriptedExecutor(CodeExecutor):
    """Executor whose answer and timing are controlled by the test.

    Calls block until ``release()`` when ``gated`` is set; ``hang`` never
    answers; ``fail`` raises instead of answering.
    """

    def __init__(
        self,
        output: Optional[str] = "55",
        error: Optional[str] = None,
        *,
        gated: bool = False,
        hang: bool = False,
        fail: bool = False,
    ) -> None:
        self.output = output
        self.error = error
        self.gated = gated
        self.hang = hang
        self.fail = fail
        self.calls: List[Tuple[str, str]] = []
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def execute(self, code, language):
        self.calls.append((code, language.value))
        if self.hang:
            await asyncio.Event().wait()
        if self.gated:
            await self._gate.wait()
        if self.fail:
            raise ConnectionError("backend unreachable")
        return ExecutionResult(output=self.output, error=self.error, duration_ms=1)


@pytest.fixture
def store() -> MemoryStorageBackend:
    return MemoryStorageBackend()


@pytest.fixture
def executor() -> ScriptedExecutor:
    return ScriptedExecutor()
