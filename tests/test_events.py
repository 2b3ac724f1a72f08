import logging

from pointforge.events import EventBus, PointsChanged, PrestigePointsChanged


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    seen = []
    bus.subscribe(PointsChanged, lambda e: seen.append(("a", e.current)))
    bus.subscribe(PointsChanged, lambda e: seen.append(("b", e.current)))
    bus.emit(PointsChanged(3))
    assert seen == [("a", 3), ("b", 3)]


def test_dispatch_is_by_event_class():
    bus = EventBus()
    seen = []
    bus.subscribe(PointsChanged, seen.append)
    bus.emit(PrestigePointsChanged(1))
    assert seen == []


def test_subscribing_to_a_base_class_receives_everything():
    bus = EventBus()
    seen = []
    bus.subscribe(object, seen.append)
    bus.emit(PointsChanged(1))
    bus.emit(PrestigePointsChanged(2))
    assert seen == [PointsChanged(1), PrestigePointsChanged(2)]


def test_unsubscribe():
    bus = EventBus()
    seen = []
    bus.subscribe(PointsChanged, seen.append)
    bus.unsubscribe(PointsChanged, seen.append)
    bus.unsubscribe(PointsChanged, seen.append)
    bus.emit(PointsChanged(1))
    assert seen == []


def test_failing_handler_is_logged_and_others_still_run(caplog):
    bus = EventBus()
    seen = []

    def boom(event):
        raise RuntimeError("boom")

    bus.subscribe(PointsChanged, boom)
    bus.subscribe(PointsChanged, seen.append)
    with caplog.at_level(logging.ERROR, logger="pointforge.events"):
        bus.emit(PointsChanged(7))

    assert seen == [PointsChanged(7)]
    assert any("Error in handler for PointsChanged" in r.message for r in caplog.records)


def test_nested_emit_is_delivered_inline():
    bus = EventBus()
    order = []

    def first(event):
        order.append(("first", event.current))
        if event.current == 1:
            bus.emit(PointsChanged(2))

    bus.subscribe(PointsChanged, first)
    bus.subscribe(PointsChanged, lambda e: order.append(("second", e.current)))
    bus.emit(PointsChanged(1))

    assert order == [("first", 1), ("first", 2), ("second", 2), ("second", 1)]
