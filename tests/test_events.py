from finboard.events import (
    CONFIGURATION_FAILED, FETCH_FAILED, FETCH_FAILURE_MESSAGE, SELECTION_CHANGED,
    Event, EventBus, register_default_handlers,
)


def test_publish_without_subscribers():
    assert EventBus().publish(FETCH_FAILED, {}) == []


def test_subscribe_publish_unsubscribe():
    bus = EventBus()
    seen = []

    def handler(event: Event, payload: dict) -> dict:
        seen.append(event)
        return {"processed": True}

    bus.subscribe(SELECTION_CHANGED, handler)
    assert bus.publish(SELECTION_CHANGED, {"to": "YEAR"}) == [{"processed": True}]
    assert seen[0].name == SELECTION_CHANGED
    assert seen[0].payload["to"] == "YEAR"

    bus.unsubscribe(SELECTION_CHANGED, handler)
    assert bus.publish(SELECTION_CHANGED, {}) == []


def test_default_notifications():
    bus = EventBus()
    register_default_handlers(bus)

    assert bus.publish(FETCH_FAILED, {"reason": "x"}) == [{"notification": FETCH_FAILURE_MESSAGE}]
    out = bus.publish(CONFIGURATION_FAILED, {"reason": "Unsupported currency preference 'gbp'"})
    assert "gbp" in out[0]["notification"]
