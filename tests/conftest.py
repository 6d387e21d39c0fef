"""Shared fixtures, no terminal and no producer threads involved."""

import pytest

from app import App
from event import Event, EventKind, Events


def drain(app: App) -> list[Event]:
    """Dispatch queued events, and whatever they queue, until idle."""
    handled = []
    pending = app.events.pending()
    while pending:
        for event in pending:
            app.dispatch(event)
            handled.append(event)
        pending = app.events.pending()
    return handled


def press(app: App, *keys: str) -> list[Event]:
    """Feed keys through the main loop one at a time."""
    handled = []
    for key in keys:
        app.dispatch(Event(EventKind.KeyInput, key))
        handled += drain(app)
    return handled


@pytest.fixture
def events() -> Events:
    return Events()


@pytest.fixture
def app(events: Events) -> App:
    return App(events)
