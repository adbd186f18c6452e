from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'Event', 'EventBus',
    'RECORDS_CHANGED', 'GOAL_CHANGED', 'MONTH_SELECTED', 'TODAY_CHANGED', 'DASHBOARD_UPDATED',
    'INPUT_EVENTS',
]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = list(self._subscribers.get(name, ()))
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, ()):
            self._subscribers[name].remove(handler)


RECORDS_CHANGED = "RECORDS_CHANGED"
GOAL_CHANGED = "GOAL_CHANGED"
MONTH_SELECTED = "MONTH_SELECTED"
TODAY_CHANGED = "TODAY_CHANGED"
DASHBOARD_UPDATED = "DASHBOARD_UPDATED"

# anything the dashboard derives from
INPUT_EVENTS = (RECORDS_CHANGED, GOAL_CHANGED, MONTH_SELECTED, TODAY_CHANGED)
