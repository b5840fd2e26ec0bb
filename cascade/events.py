from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple

__all__ = ['SESSION_CHANGED', 'Event', 'EventBus', 'Handler']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], Any]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[Any]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        for handler in list(self._subscribers[name]):
            results.append(handler(event, payload))
        return results

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)

    def handlers(self, name: str) -> List[Handler]:
        return list(self._subscribers.get(name, ()))


# payload: {"user": User | None}
SESSION_CHANGED = "SESSION_CHANGED"
