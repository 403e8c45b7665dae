"""Code editor session package.

This package holds the state engine behind a small multi-language code
editor: the active document and its per-language persistence, the run
lifecycle against a (simulated) execution backend, and the resizable
output panel.  It is exposed to a browser front end through a FastAPI
application.

The top‑level modules include:

* ``config`` – configuration handling for environment variables.
* ``languages`` – the supported languages and their starter templates.
* ``storage`` – pluggable backends for persisted documents and preferences.
* ``document`` – the active document and its debounced saving.
* ``run`` – the run controller state machine.
* ``layout`` – panel resizing and fullscreen.
* ``keyboard`` – shortcuts and Tab indentation.
* ``session`` – the orchestrator composing all of the above.
* ``executor`` – execution backends.
* ``models`` – Pydantic models defining request and response schemas.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""

from .languages import Language
from .session import EditorSession

__all__ = ["EditorSession", "Language"]
