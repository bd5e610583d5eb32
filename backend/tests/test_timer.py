from sequence_memory.services.sequence import RoundTimer


def _sync_spawn(target, *args):
    target(*args)


def test_ticks_every_second_including_start_then_expires():
    events, sleeps = [], []
    timer = RoundTimer(spawn=_sync_spawn, sleep=sleeps.append, interval=1.0)

    timer.start(5, events.append, lambda: events.append('expired'))

    assert events == [5, 4, 3, 2, 1, 0, 'expired']
    assert sleeps == [1.0] * 5


def test_zero_seconds_expires_right_after_first_tick():
    events = []
    timer = RoundTimer(spawn=_sync_spawn, sleep=lambda _s: None)
    timer.start(0, events.append, lambda: events.append('expired'))
    assert events == [0, 'expired']


def test_superseded_countdown_delivers_nothing(spawner):
    first, second = [], []
    timer = RoundTimer(spawn=spawner, sleep=lambda _s: None)

    timer.start(5, first.append, lambda: first.append('expired'))
    timer.start(3, second.append, lambda: second.append('expired'))
    spawner.run_all()

    assert first == []
    assert second == [3, 2, 1, 0, 'expired']


def test_cancel_mid_countdown_stops_ticks_and_expiry():
    events = []
    timer = RoundTimer(spawn=_sync_spawn, sleep=lambda _s: timer.cancel() if len(events) == 2 else None)

    timer.start(5, events.append, lambda: events.append('expired'))

    assert events == [5, 4]


def test_cancel_is_idempotent(spawner):
    events = []
    timer = RoundTimer(spawn=spawner, sleep=lambda _s: None)
    timer.start(2, events.append, lambda: events.append('expired'))
    timer.cancel()
    timer.cancel()
    spawner.run_all()
    assert events == []

    timer.start(1, events.append, lambda: events.append('expired'))
    spawner.run_all()
    assert events == [1, 0, 'expired']
