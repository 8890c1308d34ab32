"""
Failure types for the voice command pipeline.

TransportFailure is raised inside the classifier gateway and converted to a
sentinel before returning. ParseFailure is a returned value, never raised.
RecognitionError and CaptureUnavailable come from the capture layer.
"""
from dataclasses import dataclass

ABORTED = "aborted"


class TransportFailure(Exception):
    """The text-generation service was unreachable, timed out, or errored."""


@dataclass(frozen=True)
class ParseFailure:
    """The classifier answer was not usable structured data."""
    reason: str
    raw: str = ""

    def __bool__(self) -> bool:
        return False


class RecognitionError(Exception):
    """Capture-layer fault, tagged with the recognizer's reason code."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    @property
    def is_abort(self) -> bool:
        return self.reason == ABORTED


class CaptureUnavailable(Exception):
    """A capture session could not be started."""
