import time
import logging
import threading
from enum import Enum
from queue import Queue, Empty
from dataclasses import dataclass
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)

TICK_RATE = 0.25        # Seconds between Tick events


class EventKind(Enum):
    # EventKind {{{
    KeyInput = 0        # data: raw key sequence
    Tick = 1
    Quit = 2
    SetQuery = 3        # data: (source ComponentPosition, query text)
    Request = 4
    Response = 5        # data: HttpResponse or RequestFailure
    ChangeFocus = 6     # data: ComponentPosition
    # }}}


@dataclass(frozen=True)
class Event:
    # Event {{{
    kind: EventKind
    data: Any = None
    # }}}


@dataclass
class Config:
    # Config {{{
    tick_rate: float = TICK_RATE
    # }}}


class ChannelClosed(Exception):
    pass


class EventSender:
    """
    Handle given to producers and components, the
    only way anything outside the main loop reaches it.
    """
    # EventSender {{{

    def __init__(self, events: "Events") -> None:
        self._events = events

    def send(self, event: Event) -> bool:
        # send {{{
        try:
            self._events.put(event)
        except ChannelClosed as error:
            logger.error("%s not delivered: %s", event.kind.name, error)
            return False
        return True
        # }}}
    # }}}


class Events:
    """
    Single consumer, multi producer event channel. Events
    from one producer arrive in the order they were sent.
    """
    # Events {{{

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config if config is not None else Config()
        self._queue = Queue()
        self._closed = threading.Event()
        self._threads = {}

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def start(self, read_key: Callable[[], Optional[str]]) -> None:
        """
        Spawns the input and tick producers. Both are
        daemon threads and are never joined.
        """
        # start {{{
        self._threads["input_thread"] = threading.Thread(
            target=input_loop,
            args=(read_key, self.sender()),
            daemon=True
        )
        self._threads["tick_thread"] = threading.Thread(
            target=tick_loop,
            args=(self.config.tick_rate, self.sender()),
            daemon=True
        )
        for thread in self._threads.values():
            thread.start()
        # }}}

    def put(self, event: Event) -> None:
        # put {{{
        if self.closed:
            raise ChannelClosed("event channel is closed")
        self._queue.put(event)
        # }}}

    def next(self, timeout: Optional[float] = None) -> Event:
        """
        Blocks until the next event arrives. The main loop waits
        without a timeout; with one, queue.Empty is raised when
        it expires.
        """
        # next {{{
        return self._queue.get(timeout=timeout)
        # }}}

    def pending(self) -> list[Event]:
        """
        Drains whatever is queued right now without blocking. The
        main loop never calls it, it lets a caller run events by
        hand, the way the tests drive the app without producers.
        """
        # pending {{{
        drained = []
        while True:
            try:
                drained.append(self._queue.get_nowait())
            except Empty:
                return drained
        # }}}

    def sender(self) -> EventSender:
        # sender {{{
        return EventSender(self)
        # }}}

    def close(self) -> None:
        # close {{{
        self._closed.set()
        # }}}
    # }}}


def input_loop(read_key: Callable[[], Optional[str]],
               sender: EventSender) -> None:
    """
    Body of the input thread, one KeyInput per keypress.
    """
    # input_loop {{{
    while True:
        try:
            key = read_key()
        except (OSError, EOFError):
            logger.exception("Reading from the terminal failed")
            return

        if key is None:
            continue

        if not sender.send(Event(EventKind.KeyInput, key)):
            return
    # }}}


def tick_loop(tick_rate: float, sender: EventSender) -> None:
    # tick_loop {{{
    while sender.send(Event(EventKind.Tick)):
        time.sleep(tick_rate)
    # }}}
