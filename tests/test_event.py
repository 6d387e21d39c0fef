"""Tests for the event channel and its producers."""

import threading
from queue import Empty

import pytest

from event import ChannelClosed, Config, Event, EventKind, Events, \
    input_loop, tick_loop


def scripted_keys(keys):
    """A read_key that replays keys, then reports the terminal gone."""
    remaining = list(keys)

    def read_key():
        if not remaining:
            raise EOFError("stdin closed")
        return remaining.pop(0)

    return read_key


class TestChannel:

    def test_fifo_order(self):
        events = Events()
        sender = events.sender()
        for key in "abc":
            sender.send(Event(EventKind.KeyInput, key))
        assert [event.data for event in events.pending()] == list("abc")

    def test_next_times_out(self):
        with pytest.raises(Empty):
            Events().next(timeout=0.05)

    def test_default_tick_rate(self):
        assert Events().config.tick_rate == 0.25

    def test_send_after_close_fails(self):
        events = Events()
        events.close()
        assert events.sender().send(Event(EventKind.Tick)) is False
        with pytest.raises(ChannelClosed):
            events.put(Event(EventKind.Tick))
        assert events.pending() == []


class TestProducers:

    def test_input_loop_sends_each_key(self):
        events = Events()
        input_loop(scripted_keys(["a", None, "\x1b[A"]), events.sender())
        assert events.pending() == [
            Event(EventKind.KeyInput, "a"),
            Event(EventKind.KeyInput, "\x1b[A"),
        ]

    def test_input_loop_stops_when_closed(self):
        events = Events()
        events.close()
        input_loop(scripted_keys(["a", "b"]), events.sender())
        assert events.pending() == []

    def test_tick_loop_stops_when_closed(self):
        events = Events()
        events.close()
        tick_loop(0.01, events.sender())
        assert events.pending() == []

    def test_tick_loop_keeps_ticking(self):
        events = Events()
        thread = threading.Thread(target=tick_loop,
                                  args=(0.01, events.sender()),
                                  daemon=True)
        thread.start()
        assert events.next(timeout=1).kind == EventKind.Tick
        assert events.next(timeout=1).kind == EventKind.Tick
        events.close()
        thread.join(timeout=1)
        assert not thread.is_alive()

    def test_start_interleaves_producers(self):
        events = Events(Config(tick_rate=10))
        events.start(scripted_keys(["x", "y"]))

        received = [events.next(timeout=1) for _ in range(3)]
        events.close()

        keys = [event.data for event in received
                if event.kind == EventKind.KeyInput]
        ticks = [event for event in received
                 if event.kind == EventKind.Tick]
        assert keys == ["x", "y"]
        assert len(ticks) == 1
