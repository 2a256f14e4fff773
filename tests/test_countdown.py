from sunsar.services.countdown_service import CountdownTimer
from sunsar.websocket import handlers


class Recorder:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))


def test_timer_ticks_until_stopped(day_keys, clock):
    emit = Recorder()
    timer = None

    def sleep(seconds):
        clock.advance(seconds=seconds)
        if len(emit.events) == 3:
            timer.stop()

    timer = CountdownTimer(day_keys, emit, sleep, interval=1)
    timer.run()

    assert [event for event, _ in emit.events] == ["countdown"] * 3
    assert [payload["display"] for _, payload in emit.events] == ["21:00:00", "20:59:59", "20:59:58"]
    assert timer.stopped


def test_timer_ends_on_rollover(day_keys, clock):
    emit = Recorder()
    clock.advance(hours=20, minutes=59, seconds=58)

    timer = CountdownTimer(day_keys, emit, lambda seconds: clock.advance(seconds=seconds), interval=1)
    timer.run()

    assert emit.events[-1] == ("rollover", {"day_key": "2025-03-11"})
    assert [event for event, _ in emit.events[:-1]] == ["countdown", "countdown"]
    assert timer.stopped


def test_stopped_timer_does_not_emit(day_keys):
    emit = Recorder()
    timer = CountdownTimer(day_keys, emit, lambda seconds: None)
    timer.stop()
    timer.run()
    assert emit.events == []


def test_socket_countdown_lifecycle(app):
    socketio = app.socketio
    client = socketio.test_client(app)

    client.emit("start_countdown")
    received = client.get_received()
    assert any(message["name"] == "countdown" for message in received)
    assert len(handlers.countdown_timers) == 1
    timer = next(iter(handlers.countdown_timers.values()))

    client.disconnect()
    assert timer.stopped
    assert handlers.countdown_timers == {}
