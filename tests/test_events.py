"""Tests for the event emitter."""

import logging

import pytest

from events import EventEmitter, IdleEvent, Subscriber


@pytest.fixture
def emitter() -> EventEmitter:
    return EventEmitter()


class TestSubscribe:
    """Tests for subscribe and publish ordering."""

    def test_publish_calls_in_registration_order(self, emitter: EventEmitter):
        calls: list[str] = []
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append("first"))
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append("second"))
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append("third"))

        emitter.publish(IdleEvent.IDLE)

        assert calls == ["first", "second", "third"]

    def test_publish_only_reaches_matching_kind(self, emitter: EventEmitter):
        calls: list[str] = []
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append("idle"))
        emitter.subscribe(IdleEvent.ACTIVE, lambda: calls.append("active"))

        emitter.publish(IdleEvent.ACTIVE)

        assert calls == ["active"]

    def test_publish_without_subscribers(self, emitter: EventEmitter):
        emitter.publish(IdleEvent.IDLE)  # no error

    def test_duplicate_subscription_called_twice(self, emitter: EventEmitter):
        calls: list[int] = []

        def callback() -> None:
            calls.append(1)

        emitter.subscribe(IdleEvent.IDLE, callback)
        emitter.subscribe(IdleEvent.IDLE, callback)
        emitter.publish(IdleEvent.IDLE)

        assert len(calls) == 2
        assert emitter.count(IdleEvent.IDLE) == 2

    def test_string_kinds_are_accepted(self, emitter: EventEmitter):
        calls: list[int] = []
        emitter.subscribe("idle", lambda: calls.append(1))
        emitter.publish(IdleEvent.IDLE)
        emitter.publish("idle")
        assert calls == [1, 1]

    def test_unknown_kind_raises(self, emitter: EventEmitter):
        with pytest.raises(ValueError, match="Unknown event kind"):
            emitter.subscribe("sleepy", lambda: None)

    def test_context_is_bound_as_first_argument(self, emitter: EventEmitter):
        class Screen:
            dimmed = False

        def dim(self) -> None:
            self.dimmed = True

        screen = Screen()
        emitter.subscribe(IdleEvent.IDLE, dim, screen)
        emitter.publish(IdleEvent.IDLE)

        assert screen.dimmed is True

    def test_subscriber_without_context_gets_no_arguments(self):
        received: list[tuple] = []
        Subscriber(lambda *args: received.append(args)).invoke()
        assert received == [()]

    def test_context_requires_callback_taking_it(self, emitter: EventEmitter):
        hits: list[int] = []
        with pytest.raises(TypeError, match="does not accept one argument"):
            emitter.subscribe("idle", lambda: hits.append(1), object())

        assert emitter.count(IdleEvent.IDLE) == 0
        emitter.publish(IdleEvent.IDLE)
        assert hits == []

    def test_context_with_variadic_callback(self, emitter: EventEmitter):
        received: list[tuple] = []
        marker = object()
        emitter.subscribe(IdleEvent.ACTIVE, lambda *args: received.append(args), marker)
        emitter.publish(IdleEvent.ACTIVE)
        assert received == [(marker,)]


class TestUnsubscribe:
    """Tests for unsubscribe semantics."""

    def test_unsubscribe_removes_first_match_only(self, emitter: EventEmitter):
        calls: list[int] = []

        def callback() -> None:
            calls.append(1)

        emitter.subscribe(IdleEvent.IDLE, callback)
        emitter.subscribe(IdleEvent.IDLE, callback)
        emitter.unsubscribe(IdleEvent.IDLE, callback)
        emitter.publish(IdleEvent.IDLE)

        assert len(calls) == 1

    def test_unsubscribe_keeps_other_callbacks_in_order(self, emitter: EventEmitter):
        calls: list[str] = []

        def a() -> None:
            calls.append("a")

        def b() -> None:
            calls.append("b")

        def c() -> None:
            calls.append("c")

        for callback in (a, b, c, b):
            emitter.subscribe(IdleEvent.ACTIVE, callback)

        emitter.unsubscribe(IdleEvent.ACTIVE, b)
        emitter.publish(IdleEvent.ACTIVE)

        assert calls == ["a", "c", "b"]

    def test_unsubscribe_without_callback_removes_all(self, emitter: EventEmitter):
        calls: list[int] = []
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append(1))
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append(2))

        emitter.unsubscribe(IdleEvent.IDLE)
        emitter.publish(IdleEvent.IDLE)

        assert calls == []
        assert emitter.count(IdleEvent.IDLE) == 0

    def test_unsubscribe_all_leaves_other_kind(self, emitter: EventEmitter):
        calls: list[str] = []
        emitter.subscribe(IdleEvent.ACTIVE, lambda: calls.append("active"))
        emitter.unsubscribe(IdleEvent.IDLE)
        emitter.publish(IdleEvent.ACTIVE)
        assert calls == ["active"]

    def test_unsubscribe_unknown_is_noop(self, emitter: EventEmitter):
        emitter.unsubscribe(IdleEvent.IDLE)
        emitter.unsubscribe(IdleEvent.IDLE, lambda: None)

        emitter.subscribe(IdleEvent.IDLE, lambda: None)
        emitter.unsubscribe(IdleEvent.IDLE, lambda: None)
        assert emitter.count(IdleEvent.IDLE) == 1

    def test_unsubscribe_bound_method(self, emitter: EventEmitter):
        class Listener:
            def __init__(self) -> None:
                self.calls = 0

            def on_idle(self) -> None:
                self.calls += 1

        listener = Listener()
        emitter.subscribe(IdleEvent.IDLE, listener.on_idle)
        emitter.subscribe(IdleEvent.IDLE, listener.on_idle)
        emitter.unsubscribe(IdleEvent.IDLE, listener.on_idle)
        assert emitter.count(IdleEvent.IDLE) == 1

        emitter.unsubscribe(IdleEvent.IDLE, listener.on_idle)
        emitter.publish(IdleEvent.IDLE)
        assert emitter.count(IdleEvent.IDLE) == 0
        assert listener.calls == 0

    def test_unsubscribe_other_instance_method_is_noop(self, emitter: EventEmitter):
        class Listener:
            def on_idle(self) -> None:
                pass

        emitter.subscribe(IdleEvent.IDLE, Listener().on_idle)
        emitter.unsubscribe(IdleEvent.IDLE, Listener().on_idle)
        assert emitter.count(IdleEvent.IDLE) == 1


class TestPublishIsolation:
    """Tests for failure isolation and mutation during dispatch."""

    def test_failing_subscriber_does_not_block_others(self, emitter: EventEmitter, caplog):
        calls: list[str] = []

        def broken() -> None:
            raise RuntimeError("boom")

        emitter.subscribe(IdleEvent.IDLE, broken)
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append("after"))

        with caplog.at_level(logging.ERROR, logger="events"):
            emitter.publish(IdleEvent.IDLE)

        assert calls == ["after"]
        assert "Error in idle subscriber" in caplog.text

    def test_self_unsubscribe_during_publish(self, emitter: EventEmitter):
        calls: list[str] = []

        def once() -> None:
            calls.append("once")
            emitter.unsubscribe(IdleEvent.IDLE, once)

        emitter.subscribe(IdleEvent.IDLE, once)
        emitter.subscribe(IdleEvent.IDLE, lambda: calls.append("other"))

        emitter.publish(IdleEvent.IDLE)
        emitter.publish(IdleEvent.IDLE)

        assert calls == ["once", "other", "other"]

    def test_unsubscribing_later_subscriber_still_runs_it_this_time(self, emitter: EventEmitter):
        calls: list[str] = []

        def second() -> None:
            calls.append("second")

        def first() -> None:
            calls.append("first")
            emitter.unsubscribe(IdleEvent.IDLE, second)

        emitter.subscribe(IdleEvent.IDLE, first)
        emitter.subscribe(IdleEvent.IDLE, second)

        emitter.publish(IdleEvent.IDLE)
        emitter.publish(IdleEvent.IDLE)

        assert calls == ["first", "second", "first"]

    def test_subscribe_during_publish_applies_next_time(self, emitter: EventEmitter):
        calls: list[str] = []

        def late() -> None:
            calls.append("late")

        def adder() -> None:
            calls.append("adder")
            emitter.subscribe(IdleEvent.IDLE, late)

        emitter.subscribe(IdleEvent.IDLE, adder)
        emitter.publish(IdleEvent.IDLE)
        assert calls == ["adder"]
