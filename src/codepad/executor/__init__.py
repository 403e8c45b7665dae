"""
Execution backends for the editor.

The run controller talks to a single :class:`CodeExecutor`.  The only
concrete backend today is :class:`SimulatedExecutor`, which returns canned
output after a delay; a real sandbox can be plugged in later by
implementing the ``CodeExecutor`` interface from ``base.py``.
"""

from .base import ExecutionResult, CodeExecutor
from .simulated_executor import SimulatedExecutor, simulate_output

__all__ = [
    "ExecutionResult",
    "CodeExecutor",
    "SimulatedExecutor",
    "simulate_output",
]
