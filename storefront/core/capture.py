"""
Speech capture collaborator.

Speech-to-text itself lives outside this project (browser recognizer, a
Whisper worker, a test script). The listening loop only sees a session
object that can be started, paused, resumed and closed, and that yields
discrete events:

    started  -> the recognizer is live
    result   -> one finalized utterance (text)
    error    -> a recognizer fault with a reason code ("aborted" is expected)
    ended    -> the recognizer stopped on its own

QueueCaptureSource is the in-process implementation: finalized utterances are
pushed onto an asyncio queue (by the HTTP API or the demo script) and handed
out by whichever session is currently open.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Optional, Protocol

from voice_agent.errors import ABORTED, CaptureUnavailable
from storefront.utils.logger import get_logger
from storefront.utils.redact import redact_utterance

logger = get_logger("core.capture")


class CaptureEventKind(str, Enum):
    STARTED = "started"
    RESULT = "result"
    ERROR = "error"
    ENDED = "ended"


@dataclass(frozen=True)
class CaptureEvent:
    kind: CaptureEventKind
    text: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def started(cls) -> "CaptureEvent":
        return cls(CaptureEventKind.STARTED)

    @classmethod
    def result(cls, text: str) -> "CaptureEvent":
        return cls(CaptureEventKind.RESULT, text=text)

    @classmethod
    def error(cls, reason: str) -> "CaptureEvent":
        return cls(CaptureEventKind.ERROR, reason=reason)

    @classmethod
    def ended(cls) -> "CaptureEvent":
        return cls(CaptureEventKind.ENDED)

    @property
    def is_abort(self) -> bool:
        return self.kind == CaptureEventKind.ERROR and self.reason == ABORTED


class CaptureSession(Protocol):
    def start(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def close(self) -> None: ...

    def events(self) -> AsyncIterator[CaptureEvent]: ...


class CaptureSource(Protocol):
    def open_session(self) -> CaptureSession: ...


class QueueCaptureSession:
    """A capture session reading finalized utterances from a shared queue."""

    def __init__(self, queue: "asyncio.Queue[Optional[str]]"):
        self._queue = queue
        self._started = False
        self._closed = False
        self._announce_start = False
        self._resumed = asyncio.Event()
        self._resumed.set()

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self._closed:
            raise CaptureUnavailable("session already closed")
        self._started = True
        self._announce_start = True

    def pause(self) -> None:
        self._resumed.clear()

    def resume(self) -> None:
        self._resumed.set()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._resumed.set()
        # Wake a reader blocked on the queue; sentinels are skipped by open sessions
        self._queue.put_nowait(None)

    async def events(self) -> AsyncIterator[CaptureEvent]:
        while not self._closed:
            if self._announce_start:
                self._announce_start = False
                yield CaptureEvent.started()
                continue
            await self._resumed.wait()
            text = await self._queue.get()
            if self._closed:
                if text is not None:
                    # Not ours to consume; leave it for the next session
                    self._queue.put_nowait(text)
                break
            if text is None:
                continue
            yield CaptureEvent.result(text)


class QueueCaptureSource:
    """Capture source fed by push(); survives session restarts."""

    def __init__(self, maxsize: int = 0):
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=maxsize)

    def push(self, text: str) -> None:
        """Queue one finalized utterance (lower-cased, stripped)."""
        utterance = (text or "").strip().lower()
        if not utterance:
            return
        self._queue.put_nowait(utterance)
        logger.debug(f"Queued utterance: {redact_utterance(utterance)}")

    def pending(self) -> int:
        return self._queue.qsize()

    def open_session(self) -> QueueCaptureSession:
        return QueueCaptureSession(self._queue)
