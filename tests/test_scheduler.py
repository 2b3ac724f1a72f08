import pytest

from pointforge.scheduler import TickScheduler


def test_update_fires_whole_intervals():
    calls = []
    scheduler = TickScheduler(calls.append, interval=1.0)
    scheduler.start()

    assert scheduler.update(0.5) == 0
    assert scheduler.update(0.6) == 1
    assert scheduler.update(2.0) == 2
    assert calls == [1.0, 1.0, 1.0]
    assert scheduler.ticks == 3


def test_catch_up_is_capped_and_backlog_dropped():
    calls = []
    scheduler = TickScheduler(calls.append, interval=1.0, max_catch_up=3)
    scheduler.start()

    assert scheduler.update(10.0) == 3
    assert scheduler.update(0.5) == 0
    assert len(calls) == 3


def test_stopped_scheduler_does_nothing():
    calls = []
    scheduler = TickScheduler(calls.append)
    assert scheduler.update(5.0) == 0
    scheduler.start()
    scheduler.stop()
    assert scheduler.running is False
    assert scheduler.update(5.0) == 0
    assert calls == []


def test_run_stops_after_max_ticks():
    calls = []
    sleeps = []
    scheduler = TickScheduler(calls.append, interval=0.25)
    scheduler.run(max_ticks=4, sleep=sleeps.append)
    assert scheduler.ticks >= 4
    assert scheduler.running is False
    assert all(s == 0.25 for s in sleeps)


def test_invalid_interval():
    with pytest.raises(ValueError):
        TickScheduler(lambda dt: None, interval=0)
