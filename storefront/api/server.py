"""
FastAPI server for the storefront voice assistant.

The front end runs the browser speech recognizer and posts each finalized
utterance here; the listening loop consumes them in the background.

Usage:
    python -m storefront.api.server
    # or
    uvicorn storefront.api.server:app --reload --port 8000
"""
import asyncio
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()

from storefront import __version__
from storefront.api.models import (
    ActionLogItem,
    HealthResponse,
    StatusResponse,
    UtteranceRequest,
    UtteranceResponse,
)
from storefront.core.capture import QueueCaptureSource
from storefront.core.config import get_config
from storefront.core.events import STATUS
from storefront.core.listener import ListeningLoop
from storefront.core.state import AssistantState
from storefront.utils.logger import get_logger
from storefront.utils.redact import redact_sensitive_data
from voice_agent import InterpreterContext, create_dispatcher

logger = get_logger("api.server")

config = get_config()
context = InterpreterContext.in_memory(config=config)
assistant_state = AssistantState(log_size=config.action_log_size)
capture = QueueCaptureSource()
dispatcher = create_dispatcher(context, assistant_state)
listener = ListeningLoop(dispatcher, capture, assistant_state, events=context.events, config=config)

_listener_task: Optional[asyncio.Task] = None

# Initialize FastAPI app
app = FastAPI(
    title="Storefront Voice API",
    description="Continuous voice-command interpreter for the storefront",
    version=__version__,
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Start the listening loop in the background."""
    global _listener_task
    if os.environ.get("VOICE_SKIP_LISTENER", "").lower() in ("1", "true", "yes"):
        logger.info("Listening loop SKIPPED (VOICE_SKIP_LISTENER=1)")
        return
    _listener_task = asyncio.create_task(listener.run())
    logger.info("Listening loop started")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop capture and let an in-flight command finish before exiting."""
    global _listener_task
    if _listener_task is None:
        listener.stop()
    else:
        await listener.drain(_listener_task, timeout=config.request_timeout)
        _listener_task = None
    logger.info("Listening loop stopped")


# API Endpoints

@app.get("/", response_model=HealthResponse)
async def root():
    """Health check endpoint."""
    return HealthResponse(
        status="online",
        service="Storefront Voice API",
        version=__version__,
        config={
            "model": config.model,
            "recovery_threshold": config.recovery_threshold,
            "listener_state": listener.status.value,
        },
    )


@app.post("/voice/utterances", response_model=UtteranceResponse)
async def post_utterance(request: UtteranceRequest):
    """Queue one finalized utterance for the listening loop."""
    capture.push(request.text)
    return UtteranceResponse(queued=True, pending=capture.pending())


@app.get("/voice/status", response_model=StatusResponse)
async def voice_status(limit: int = 10):
    """Assistant state, recent commands and the storefront state they produced."""
    statuses = context.events.history(STATUS)
    return StatusResponse(
        listener_state=listener.status.value,
        recovery_counter=assistant_state.recovery_counter,
        action_log=[ActionLogItem(**e.to_dict()) for e in assistant_state.recent(limit)],
        last_status=statuses[-1].data["message"] if statuses else None,
        filters=context.filters.snapshot().to_dict(),
        profile=redact_sensitive_data(context.profile.read_snapshot().model_dump()),
        page=context.navigator.path,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
