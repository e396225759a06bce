from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

__all__ = [
    'event_bus', 'Event', 'EventBus', 'register_default_handlers',
    'TRANSACTIONS_REPLACED', 'SELECTION_CHANGED',
    'FETCH_FAILED', 'DECRYPTION_FAILED', 'CONFIGURATION_FAILED',
    'FETCH_FAILURE_MESSAGE',
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
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        return [handler(event, payload) for handler in list(self._subscribers[name])]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


TRANSACTIONS_REPLACED = "TRANSACTIONS_REPLACED"
SELECTION_CHANGED = "SELECTION_CHANGED"
FETCH_FAILED = "FETCH_FAILED"
DECRYPTION_FAILED = "DECRYPTION_FAILED"
CONFIGURATION_FAILED = "CONFIGURATION_FAILED"

FETCH_FAILURE_MESSAGE = "❎ Error fetching transactions. Please, try again later."

event_bus = EventBus()


def fetch_failure_notification(event: Event, payload: dict) -> dict:
    return {"notification": FETCH_FAILURE_MESSAGE}


def configuration_failure_notification(event: Event, payload: dict) -> dict:
    return {"notification": f"❎ {payload.get('reason', 'Invalid dashboard settings')}"}


def register_default_handlers(bus: EventBus = event_bus) -> None:
    bus.subscribe(FETCH_FAILED, fetch_failure_notification)
    bus.subscribe(CONFIGURATION_FAILED, configuration_failure_notification)


register_default_handlers()
