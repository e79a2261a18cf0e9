import pytest

from dirloader.events import EventEmitter


def test_emit_calls_listeners_in_registration_order():
    emitter = EventEmitter()
    calls = []
    emitter.on("loaded", lambda value: calls.append(("first", value)))
    emitter.on("loaded", lambda value: calls.append(("second", value)))

    assert emitter.emit("loaded", 1) is True
    assert calls == [("first", 1), ("second", 1)]


def test_emit_without_listeners_returns_false():
    assert EventEmitter().emit("nothing") is False


def test_once_listener_runs_a_single_time():
    emitter = EventEmitter()
    calls = []
    emitter.once("loaded", calls.append)

    emitter.emit("loaded", "a")
    emitter.emit("loaded", "b")
    assert calls == ["a"]
    assert emitter.listeners("loaded") == []


def test_off_removes_plain_and_once_listeners():
    emitter = EventEmitter()
    calls = []
    emitter.on("loaded", calls.append)
    emitter.once("loaded", calls.append)

    emitter.off("loaded", calls.append)
    emitter.off("loaded", calls.append)
    emitter.off("unknown", calls.append)

    assert emitter.emit("loaded", 1) is False
    assert calls == []


def test_listener_may_unsubscribe_during_emit():
    emitter = EventEmitter()
    calls = []

    def first(value):
        calls.append("first")
        emitter.off("loaded", first)

    emitter.on("loaded", first)
    emitter.on("loaded", lambda value: calls.append("second"))

    emitter.emit("loaded", None)
    emitter.emit("loaded", None)
    assert calls == ["first", "second", "second"]


def test_listener_exceptions_propagate():
    emitter = EventEmitter()

    def boom(value):
        raise ValueError("listener failed")

    emitter.on("loaded", boom)
    with pytest.raises(ValueError, match="listener failed"):
        emitter.emit("loaded", 1)


def test_emitters_do_not_share_listeners():
    a, b = EventEmitter(), EventEmitter()
    calls = []
    a.on("loaded", calls.append)

    b.emit("loaded", "from b")
    assert calls == []
