"""Tests for the focus grid, the Focus value and the default bindings."""

import pytest

from keys import KeyCodes
from event import Event, EventKind, Events
from components import ComponentPosition, ComponentState, Focus, \
    default_key_handle


P = ComponentPosition


class TestGrid:

    @pytest.mark.parametrize("position", list(ComponentPosition))
    def test_from_position_inverts_position(self, position):
        assert P.from_position(position.position()) == position

    @pytest.mark.parametrize("coordinate", [(-1, 0), (2, 0), (0, 3),
                                            (0, -1), (5, 5)])
    def test_outside_grid_is_no_field(self, coordinate):
        assert P.from_position(coordinate) is None

    def test_method_up_and_left_are_clamped(self):
        assert P.RequestMethod.up() == P.RequestMethod
        assert P.RequestMethod.left() == P.RequestMethod

    def test_method_neighbours(self):
        assert P.RequestMethod.right() == P.RequestUrl
        assert P.RequestMethod.down() == P.RequestQuery

    def test_url_down_is_body(self):
        assert P.RequestUrl.down() == P.RequestBody
        assert P.RequestUrl.right() == P.RequestUrl

    def test_request_rows_reach_response_rows(self):
        assert P.RequestQuery.down() == P.ResponseBody
        assert P.RequestBody.down() == P.ResponseHeader
        assert P.ResponseHeader.down() == P.ResponseHeader
        assert P.ResponseHeader.left() == P.ResponseBody

    def test_halves(self):
        assert P.RequestQuery.is_request()
        assert not P.RequestQuery.is_response()
        assert P.ResponseHeader.is_response()


class TestFocus:

    def test_single_position_focused(self):
        focus = Focus(P.RequestUrl)
        states = [focus.state_of(position) for position in P]
        assert states.count(ComponentState.Focused) == 1
        assert focus.state_of(P.RequestUrl) == ComponentState.Focused

    def test_editing_only_for_current_position(self):
        focus = Focus(P.RequestUrl)
        focus.begin_editing(P.RequestBody)
        assert focus.editing is False
        focus.begin_editing(P.RequestUrl)
        assert focus.state_of(P.RequestUrl) == ComponentState.Editing

    def test_move_ends_editing(self):
        focus = Focus(P.RequestUrl)
        focus.begin_editing(P.RequestUrl)
        focus.move(P.RequestQuery)
        assert focus.state_of(P.RequestQuery) == ComponentState.Focused
        assert focus.state_of(P.RequestUrl) == ComponentState.Unfocused


class TestDefaultKeyHandle:

    def handle(self, key, position=P.RequestUrl):
        events = Events()
        default_key_handle(key, events.sender(), position)
        return events.pending()

    def test_quit(self):
        assert self.handle(KeyCodes.QUIT.value) == [Event(EventKind.Quit)]

    def test_submit(self):
        assert self.handle(KeyCodes.SUBMIT.value) == \
            [Event(EventKind.Request)]

    @pytest.mark.parametrize("key,position", [
        ("m", P.RequestMethod),
        ("u", P.RequestUrl),
        ("q", P.RequestQuery),
        ("r", P.RequestBody),
        ("b", P.ResponseBody),
        ("h", P.ResponseHeader),
    ])
    def test_shortcuts(self, key, position):
        assert self.handle(key) == [Event(EventKind.ChangeFocus, position)]

    def test_arrow_moves_on_grid(self):
        assert self.handle(KeyCodes.DOWN.value, P.RequestMethod) == \
            [Event(EventKind.ChangeFocus, P.RequestQuery)]

    def test_arrow_off_grid_sends_nothing(self):
        assert self.handle(KeyCodes.UP.value, P.RequestMethod) == []

    def test_unknown_key_ignored(self):
        assert self.handle("z") == []
        assert self.handle("\x01") == []
