"""FastAPI application serving the chat widget and its session API."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from .config import load_config, typing_delay
from .responder import classify, reply_for
from .session import ChatSession, SessionRegistry
from .widget import widget_info

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"
INDEX_FILE = STATIC_DIR / "index.html"


# -----------------------------
# Pydantic request/response
# -----------------------------
class MessageOut(BaseModel):
    id: str
    role: str
    content: str
    timestamp: str
    time: str


class SessionOut(BaseModel):
    id: str
    typing: bool
    messages: List[MessageOut]


class SubmitIn(BaseModel):
    text: str = Field(default="", description="Raw input line; blank input is ignored.")
    wait: bool = Field(default=False, description="Return only after the reply is appended.")


class SubmitOut(BaseModel):
    accepted: bool
    session: SessionOut


class RespondIn(BaseModel):
    message: str


class RespondOut(BaseModel):
    category: str
    reply: str


# -----------------------------
# Utilities
# -----------------------------
def _session_out(session: ChatSession) -> SessionOut:
    return SessionOut(**session.snapshot())


def _make_registry(cfg: Dict[str, Any]) -> SessionRegistry:
    max_sessions = int(cfg.get("server", {}).get("max_sessions", 500))
    return SessionRegistry(delay=typing_delay(cfg), max_sessions=max_sessions)


# -----------------------------
# App factory
# -----------------------------
def create_app(
    config_path: Optional[str] = None,
    registry: Optional[SessionRegistry] = None,
) -> FastAPI:
    cfg = load_config(config_path)
    sessions = registry or _make_registry(cfg)
    info = widget_info(cfg)
    info["typing_delay"] = sessions.delay

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Replies are never dropped: finish whatever is still typing.
        await sessions.drain_all()

    app = FastAPI(title=f"{info['name']} Server", version="0.1.0", lifespan=lifespan)
    app.state.sessions = sessions

    cors_origins = cfg.get("server", {}).get("cors_origins", ["*"])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _get(session_id: str) -> ChatSession:
        try:
            return sessions.get(session_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="Session not found.")

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "sessions": len(sessions)}

    @app.get("/")
    def root():
        if INDEX_FILE.exists():
            return FileResponse(str(INDEX_FILE))
        return JSONResponse({"ok": True, "msg": f"{info['name']} API is running. No UI found."})

    @app.get("/widget")
    def widget() -> Dict[str, Any]:
        return info

    @app.post("/respond", response_model=RespondOut)
    def respond_once(req: RespondIn):
        msg = (req.message or "").strip()
        if not msg:
            raise HTTPException(status_code=400, detail="Message cannot be empty.")
        category = classify(req.message)
        return RespondOut(category=category, reply=reply_for(category))

    @app.post("/sessions", response_model=SessionOut, status_code=201)
    async def create_session():
        return _session_out(sessions.create())

    @app.get("/sessions/{session_id}", response_model=SessionOut)
    async def get_session(session_id: str):
        return _session_out(_get(session_id))

    @app.post("/sessions/{session_id}/messages", response_model=SubmitOut)
    async def submit(session_id: str, req: SubmitIn):
        session = _get(session_id)
        task = session.submit(req.text)
        if task is not None and req.wait:
            await task
        return SubmitOut(accepted=task is not None, session=_session_out(session))

    @app.get("/sessions/{session_id}/transcript", response_class=PlainTextResponse)
    async def transcript(session_id: str):
        return _get(session_id).store.export_text()

    @app.delete("/sessions/{session_id}")
    async def close_session(session_id: str) -> Dict[str, Any]:
        if not sessions.drop(session_id):
            raise HTTPException(status_code=404, detail="Session not found.")
        return {"ok": True}

    return app
