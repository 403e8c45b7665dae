"""
HTTP surface of the editor.

``app`` serves the routes a browser front end uses to drive one editor
session: document edits and Tab indentation, language switching, the theme
toggle, runs against the configured executor, panel resizing and
fullscreen, keyboard shortcuts, copy, and the notice queue.  Serve it with
``python -m codepad.api`` or point Uvicorn at ``codepad.api:app``.
"""

from .main import app

__all__ = ["app"]
