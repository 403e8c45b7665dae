"""
FastAPI application for the editor service.

This module configures the FastAPI application, builds the editor session
from the environment configuration, registers the routes a browser front end
uses to drive the editor, and enforces authentication via an API key.

All routes are ``async`` so that the debounced save timers and in-flight runs
live on the server's event loop.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, List

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from ..config import Config
from ..errors import UnknownLanguageError
from ..keyboard import KeyEvent
from ..languages import Language
from ..models import (
    CopyResponse,
    DocumentInfo,
    DocumentUpdate,
    FullscreenRequest,
    IndentRequest,
    IndentResponse,
    KeyEventRequest,
    KeyEventResponse,
    LanguageInfo,
    LanguageSwitchRequest,
    LayoutInfo,
    NoticeInfo,
    PointerEvent,
    RunInfo,
    RunResponse,
    SessionSnapshot,
    ThemeInfo,
)
from ..session import EditorSession
from ..storage import StorageBackend, build_storage


logger = logging.getLogger("codepad")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[codepad] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


config = Config.from_env()

logger.info(
    "Loaded config: storage_backend=%s, storage_path=%s, debounce_ms=%s, run_timeout=%s, flush_on_switch=%s",
    config.storage_backend,
    config.storage_path,
    config.save_debounce_ms,
    config.run_timeout_seconds,
    config.flush_on_switch,
)

storage: StorageBackend = build_storage(config)
session = EditorSession.from_config(config, storage)


def get_session() -> EditorSession:
    return session


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Shutting down; flushing pending saves")
    session.close()


app = FastAPI(title="Code Editor Service", version="0.1.0", lifespan=lifespan)


@app.middleware("http")
async def authenticate(request, call_next):
    """Middleware to enforce API key authentication on all requests."""
    path = request.url.path
    method = request.method
    client = getattr(request.client, "host", "unknown")

    logger.info("Incoming request: %s %s from %s", method, path, client)

    provided_key = request.headers.get("x-api-key")
    if config.api_key and provided_key != config.api_key:
        logger.warning("Invalid API key for %s %s from %s", method, path, client)
        return JSONResponse(status_code=401, content={"detail": "Invalid API key"})

    response = await call_next(request)
    logger.info("Response: %s %s -> %s", method, path, response.status_code)
    return response


@app.exception_handler(UnknownLanguageError)
async def unknown_language(request: Request, exc: UnknownLanguageError) -> JSONResponse:
    logger.warning("Rejected unsupported language %r", exc.value)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def _document_info(editor: EditorSession) -> DocumentInfo:
    return DocumentInfo(
        language=editor.language.value,
        label=editor.language.label,
        text=editor.text,
        pending_save=editor.documents.has_pending_save(editor.language),
    )


@app.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}


@app.get("/v1/languages", response_model=List[LanguageInfo])
async def list_languages() -> List[LanguageInfo]:
    return [LanguageInfo.from_language(language) for language in Language]


@app.get("/v1/session", response_model=SessionSnapshot)
async def get_snapshot(editor: EditorSession = Depends(get_session)) -> SessionSnapshot:
    """Return the full editor state for rendering."""
    run_state = editor.runner.state
    return SessionSnapshot(
        document=_document_info(editor),
        theme=editor.theme.value,
        run=RunInfo.from_state(run_state),
        layout=LayoutInfo.from_state(editor.layout.state),
        show_output=run_state.has_result,
        persistence_degraded=editor.documents.degraded,
    )


@app.put("/v1/session/document", response_model=DocumentInfo)
async def update_document(
    req: DocumentUpdate, editor: EditorSession = Depends(get_session)
) -> DocumentInfo:
    editor.edit(req.text)
    return _document_info(editor)


@app.post("/v1/session/document/indent", response_model=IndentResponse)
async def indent_document(
    req: IndentRequest, editor: EditorSession = Depends(get_session)
) -> IndentResponse:
    caret = editor.indent(req.selection_start, req.selection_end)
    return IndentResponse(text=editor.text, caret=caret)


@app.put("/v1/session/language", response_model=DocumentInfo)
async def switch_language(
    req: LanguageSwitchRequest, editor: EditorSession = Depends(get_session)
) -> DocumentInfo:
    editor.switch_language(req.language)
    return _document_info(editor)


@app.post("/v1/session/theme/toggle", response_model=ThemeInfo)
async def toggle_theme(editor: EditorSession = Depends(get_session)) -> ThemeInfo:
    return ThemeInfo(theme=editor.toggle_theme().value)


@app.post("/v1/session/run", response_model=RunResponse)
async def run_code(wait: bool = False, editor: EditorSession = Depends(get_session)) -> RunResponse:
    """Run the active document.

    With ``wait=true`` the response is sent once the run has settled;
    otherwise it returns immediately in the running state.
    """
    accepted = editor.run()
    if accepted and wait:
        await editor.runner.wait()
    return RunResponse(accepted=accepted, run=RunInfo.from_state(editor.runner.state))


@app.get("/v1/session/run", response_model=RunInfo)
async def get_run(editor: EditorSession = Depends(get_session)) -> RunInfo:
    return RunInfo.from_state(editor.runner.state)


@app.delete("/v1/session/run", response_model=RunInfo)
async def clear_run(editor: EditorSession = Depends(get_session)) -> RunInfo:
    editor.runner.clear()
    return RunInfo.from_state(editor.runner.state)


@app.post("/v1/session/layout/drag/start", response_model=LayoutInfo)
async def drag_start(req: PointerEvent, editor: EditorSession = Depends(get_session)) -> LayoutInfo:
    return LayoutInfo.from_state(editor.layout.pointer_down(req.y))


@app.post("/v1/session/layout/drag/move", response_model=LayoutInfo)
async def drag_move(req: PointerEvent, editor: EditorSession = Depends(get_session)) -> LayoutInfo:
    return LayoutInfo.from_state(editor.layout.pointer_move(req.y))


@app.post("/v1/session/layout/drag/end", response_model=LayoutInfo)
async def drag_end(editor: EditorSession = Depends(get_session)) -> LayoutInfo:
    return LayoutInfo.from_state(editor.layout.pointer_up())


@app.post("/v1/session/layout/fullscreen", response_model=LayoutInfo)
async def fullscreen(
    req: FullscreenRequest, editor: EditorSession = Depends(get_session)
) -> LayoutInfo:
    if req.enabled is None:
        editor.layout.toggle_fullscreen()
    else:
        editor.layout.set_fullscreen(req.enabled)
    return LayoutInfo.from_state(editor.layout.state)


@app.post("/v1/session/keys", response_model=KeyEventResponse)
async def key_press(
    req: KeyEventRequest, editor: EditorSession = Depends(get_session)
) -> KeyEventResponse:
    handled = editor.handle_key(KeyEvent(**req.model_dump()))
    return KeyEventResponse(handled=handled)


@app.post("/v1/session/copy", response_model=CopyResponse)
async def copy_code(editor: EditorSession = Depends(get_session)) -> CopyResponse:
    return CopyResponse(copied=await editor.copy())


@app.get("/v1/session/notices", response_model=List[NoticeInfo])
async def drain_notices(editor: EditorSession = Depends(get_session)) -> List[NoticeInfo]:
    """Return and forget the notices posted since the last call."""
    return [NoticeInfo.from_notice(notice) for notice in editor.notices.drain()]


@app.post("/v1/session/reset", response_model=SessionSnapshot)
async def reset_session(editor: EditorSession = Depends(get_session)) -> SessionSnapshot:
    editor.reset()
    return await get_snapshot(editor)
