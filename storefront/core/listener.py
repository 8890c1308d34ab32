"""
Listening loop and recovery supervisor.

Explicit state machine over the capture collaborator:

    IDLE ──start──> LISTENING ──result──> PROCESSING ──done──> LISTENING
                       │  ▲                                      │
           error/end   │  │ new session                          │ failures
                       ▼  │                                      ▼ reach threshold
                     RESTARTING <────────────────────────────────┘

- Capture is paused while an utterance is dispatched and resumed afterwards,
  whether dispatch succeeded, failed or raised.
- A recognizer error other than "aborted" drops the session and reopens one
  after error_resume_delay. "aborted" is expected during restarts and ignored.
- recovery_threshold consecutive failures (commands or recognizer errors)
  tear the session down and open a fresh one after restart_delay; the
  counter resets when the fresh session starts.
- A natural end of session restarts capture immediately unless stop() was
  called, in which case the loop stays IDLE.

Timers are plain awaited sleeps in run(); the sleep function is injectable
so tests drive the machine without waiting.
"""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

from voice_agent.errors import CaptureUnavailable, RecognitionError
from storefront.core.capture import CaptureEvent, CaptureEventKind, CaptureSession, CaptureSource
from storefront.core.config import VoiceConfig, get_config
from storefront.core.events import ASSISTANT_RESTARTED, EventBus
from storefront.core.state import AssistantState
from storefront.utils.logger import get_logger
from storefront.utils.redact import redact_utterance

logger = get_logger("core.listener")

RESTARTED_MESSAGE = "Voice assistant restarted"
COMMAND_ERROR_MESSAGE = "Sorry, something went wrong with that command"


class ListenerState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    PROCESSING = "processing"
    RESTARTING = "restarting"


class ListeningLoop:
    """
    Owns the capture session, the action log and the failure counter.

    The dispatcher is anything with ``async dispatch(text)`` returning an
    object with a ``handled`` attribute.
    """

    def __init__(
        self,
        dispatcher,
        capture: CaptureSource,
        state: AssistantState,
        events: Optional[EventBus] = None,
        config: Optional[VoiceConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.dispatcher = dispatcher
        self.capture = capture
        self.state = state
        self.events = events if events is not None else EventBus()
        self.config = config if config is not None else get_config()
        self._sleep = sleep

        self._status = ListenerState.IDLE
        self._session: Optional[CaptureSession] = None
        self._running = False
        self._restarting = False
        self._resume_delay = 0.0

    # ── State ────────────────────────────────────────────────────

    @property
    def status(self) -> ListenerState:
        return self._status

    @property
    def running(self) -> bool:
        return self._running

    @property
    def session(self) -> Optional[CaptureSession]:
        return self._session

    def _set_status(self, status: ListenerState) -> None:
        if status != self._status:
            logger.debug(f"Listener {self._status.value} -> {status.value}")
            self._status = status

    # ── Lifecycle ────────────────────────────────────────────────

    def start(self) -> None:
        """IDLE -> LISTENING."""
        if self._running:
            return
        self._running = True
        self._open_session()

    def stop(self) -> None:
        """Stop capture for good. An in-flight dispatch finishes but does not re-arm capture."""
        self._running = False
        self._teardown_session()
        self._set_status(ListenerState.IDLE)
        logger.info("Voice recognition stopped")

    async def drain(self, task: "asyncio.Task[None]", timeout: float) -> None:
        """
        stop() and wait for run() to return. A command that is mid-dispatch
        finishes; the task is cancelled only if it outlives timeout.
        """
        self.stop()
        try:
            await asyncio.wait_for(task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Listening loop still busy after {timeout}s, cancelled")

    async def run(self) -> None:
        """Start (if needed) and consume capture events until stop()."""
        self.start()
        while self._running:
            session = self._session
            if session is None:
                delay, self._resume_delay = self._resume_delay, 0.0
                await self._sleep(delay)
                if self._running and self._session is None:
                    self._open_session()
                continue

            replaced = False
            try:
                async for event in session.events():
                    await self.handle_event(event)
                    if self._session is not session or not self._running:
                        replaced = True
                        break
            except RecognitionError as e:
                # Backends may raise instead of yielding an error event
                await self.handle_event(CaptureEvent.error(e.reason))
                replaced = self._session is not session or not self._running
            if not replaced and self._running and self._session is session:
                # Event stream ran dry without an explicit end event
                await self.handle_event(CaptureEvent.ended())
                await asyncio.sleep(0)

    def _open_session(self) -> None:
        session = self.capture.open_session()
        try:
            session.start()
        except CaptureUnavailable as e:
            logger.error(f"Failed to start recognition: {e}")
            self._session = None
            self._schedule_resume(self.config.error_resume_delay)
            return
        self._session = session
        self._set_status(ListenerState.LISTENING)
        if self._restarting:
            self._restarting = False
            self.state.reset_counter()
            logger.info("Fresh capture session started, recovery counter reset")

    def _teardown_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            session.close()

    def _schedule_resume(self, delay: float) -> None:
        self._resume_delay = delay
        self._set_status(ListenerState.RESTARTING)

    # ── Events ───────────────────────────────────────────────────

    async def handle_event(self, event: CaptureEvent) -> None:
        if event.kind == CaptureEventKind.STARTED:
            self._set_status(ListenerState.LISTENING)
            logger.info("Voice recognition activated")
        elif event.kind == CaptureEventKind.RESULT:
            await self._process(event.text or "")
        elif event.kind == CaptureEventKind.ERROR:
            self._on_error(event)
        elif event.kind == CaptureEventKind.ENDED:
            self._on_end()

    async def _process(self, text: str) -> None:
        utterance = text.strip().lower()
        session = self._session
        if not utterance or session is None:
            return

        self._set_status(ListenerState.PROCESSING)
        session.pause()
        safe_text = redact_utterance(utterance)
        logger.info(f"Processing command: {safe_text}")
        handled = False
        try:
            outcome = await self.dispatcher.dispatch(utterance)
            handled = bool(outcome.handled)
        except Exception:
            logger.exception(f"Command processing failed: {safe_text}")
            self.state.record(f"Error processing '{safe_text}'", success=False)
            self.events.status(COMMAND_ERROR_MESSAGE, success=False)
        finally:
            if self._running and self._session is session:
                session.resume()
                self._set_status(ListenerState.LISTENING)

        if not self._running:
            return
        if handled:
            self.state.mark_success()
        else:
            self.state.mark_failure()
            self._check_recovery()

    def _on_error(self, event: CaptureEvent) -> None:
        if event.is_abort:
            logger.debug("Recognition aborted")
            return
        reason = event.reason or "unknown"
        logger.error(f"Error occurred in recognition: {reason}")
        self.state.record(f"Recognition error: {reason}", success=False)
        self.state.mark_failure()
        if self._check_recovery():
            return
        self._teardown_session()
        if self._running:
            self._schedule_resume(self.config.error_resume_delay)

    def _on_end(self) -> None:
        session = self._session
        if not self._running or session is None:
            self._set_status(ListenerState.IDLE)
            return
        try:
            session.start()
        except CaptureUnavailable as e:
            logger.error(f"Restart failed: {e}")
            self._teardown_session()
            self._schedule_resume(self.config.end_restart_delay)

    # ── Recovery ─────────────────────────────────────────────────

    def _check_recovery(self) -> bool:
        """Restart the session when failures cluster. Returns True if it did."""
        if self.state.recovery_counter < self.config.recovery_threshold:
            return False
        self.restart()
        return True

    def restart(self) -> None:
        """Tear down the current session and schedule a fresh one."""
        logger.warning(
            f"{self.state.recovery_counter} consecutive failures, restarting voice recognition"
        )
        self._teardown_session()
        self._restarting = True
        self._schedule_resume(self.config.restart_delay)
        self.state.record("Assistant restarted", success=True)
        self.events.publish(ASSISTANT_RESTARTED, {"failures": self.state.recovery_counter})
        self.events.status(RESTARTED_MESSAGE, success=True)
