"""
Assistant state owned by the listening loop.

The action log and the recovery counter live here instead of in module
globals. The listening loop owns both; the dispatcher receives the same
object and only appends to the log.
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, List

DEFAULT_LOG_SIZE = 50


@dataclass
class ActionLogEntry:
    """One processed command or capture fault."""
    description: str
    success: bool
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, object]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "success": self.success,
        }


class AssistantState:
    """Bounded action log plus the consecutive-failure counter."""

    def __init__(self, log_size: int = DEFAULT_LOG_SIZE):
        self._log: Deque[ActionLogEntry] = deque(maxlen=log_size)
        self._failures = 0

    @property
    def recovery_counter(self) -> int:
        return self._failures

    def record(self, description: str, success: bool) -> ActionLogEntry:
        """Append to the action log (oldest entries are evicted)."""
        entry = ActionLogEntry(description=description, success=success)
        self._log.append(entry)
        return entry

    def mark_success(self) -> None:
        self._failures = 0

    def mark_failure(self) -> int:
        self._failures += 1
        return self._failures

    def reset_counter(self) -> None:
        self._failures = 0

    def recent(self, limit: int = 10) -> List[ActionLogEntry]:
        return list(self._log)[-limit:]

    def __len__(self) -> int:
        return len(self._log)
