"""
Status and change notifications.

The assistant never renders anything itself. It publishes discrete events
that a UI (toast, status line, HTTP poller) can subscribe to:

- status: one per processed utterance, describing what happened
- profile_updated: fields captured from speech, with a readable summary
- assistant_restarted: the listening session was torn down and recreated
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional

from storefront.utils.logger import get_logger

logger = get_logger("core.events")

STATUS = "status"
PROFILE_UPDATED = "profile_updated"
ASSISTANT_RESTARTED = "assistant_restarted"


@dataclass
class Event:
    """Single notification."""
    event_type: str
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.event_type,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


EventHandler = Callable[[Event], None]


class EventBus:
    """Synchronous pub/sub. Subscriber errors never block the publisher."""

    def __init__(self, history_size: int = 100) -> None:
        self._subscribers: Dict[str, List[EventHandler]] = {}
        self._history: Deque[Event] = deque(maxlen=history_size)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: str, data: Optional[Dict[str, Any]] = None) -> Event:
        event = Event(event_type=event_type, data=data or {})
        self._history.append(event)
        for handler in list(self._subscribers.get(event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Subscriber for '{event_type}' failed: {e}")
        return event

    def status(self, message: str, success: bool) -> Event:
        return self.publish(STATUS, {"message": message, "success": success})

    def history(self, event_type: Optional[str] = None) -> List[Event]:
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.event_type == event_type]
