"""
Executor that pretends to run code.

No compiler or interpreter is invoked.  After a random delay the executor
answers with output derived from the source text: for JavaScript it echoes
the arguments of ``console.log`` calls, for every other language it returns
a fixed greeting.  This keeps the editor usable end to end without a
sandbox.
"""

from __future__ import annotations

import asyncio
import random
import re
import time
from typing import Optional

from ..languages import Language
from .base import CodeExecutor, ExecutionResult

_CONSOLE_LOG_RE = re.compile(r"console\.log\((.*?)\)")
_QUOTES_RE = re.compile(r"['\"]")


def simulate_output(code: str, language: Language) -> str:
    if language is Language.JAVASCRIPT:
        if "console.log" not in code:
            return "Code executed successfully"
        lines = [_QUOTES_RE.sub("", match) for match in _CONSOLE_LOG_RE.findall(code)]
        return "\n".join(lines) or "No output"
    return f"{language.value} code executed successfully!\nHello, World!\nFibonacci(10): 55"


class SimulatedExecutor(CodeExecutor):
    """Return canned output after a delay drawn from ``[min_delay_ms, max_delay_ms]``."""

    def __init__(
        self,
        min_delay_ms: int = 1000,
        max_delay_ms: int = 2000,
        rng: Optional[random.Random] = None,
    ) -> None:
        if max_delay_ms < min_delay_ms:
            raise ValueError("max_delay_ms must not be lower than min_delay_ms")
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self.rng = rng or random.Random()

    async def execute(self, code: str, language: Language) -> ExecutionResult:
        start_time = time.perf_counter()
        delay_ms = self.rng.uniform(self.min_delay_ms, self.max_delay_ms)
        await asyncio.sleep(delay_ms / 1000)
        output = simulate_output(code, Language(language))
        duration = int((time.perf_counter() - start_time) * 1000)
        return ExecutionResult(output=output, error=None, duration_ms=duration)
