"""Tests for the request and response fields driven through key input."""

from keys import KeyCodes
from event import EventKind
from req_struct import HttpMethod
from components import ComponentPosition, ComponentState

from conftest import press


ENTER = KeyCodes.ENTER.value
ESCAPE = KeyCodes.ESCAPE.value
BACKSPACE = KeyCodes.BACKSPACE.value


def all_fields(app):
    return app.request.fields + app.response.fields


def focused_count(app):
    return sum(1 for field in all_fields(app) if field.is_focused())


class TestFieldStates:

    def test_url_focused_at_start(self, app):
        assert app.request.url.state == ComponentState.Focused
        assert focused_count(app) == 1

    def test_enter_then_escape(self, app):
        press(app, ENTER)
        assert app.request.url.state == ComponentState.Editing
        press(app, ESCAPE)
        assert app.request.url.state == ComponentState.Focused

    def test_exactly_one_focused_through_navigation(self, app):
        keys = ["m", ENTER, "q", ENTER, "a", ESCAPE, "b", "j", "h",
                KeyCodes.UP.value, KeyCodes.LEFT.value, "r", ENTER, "{",
                ESCAPE, KeyCodes.DOWN.value, "u"]
        for key in keys:
            press(app, key)
            assert focused_count(app) == 1

    def test_unfocused_fields_ignore_keys(self, app):
        app.request.body.key_handle("x", app.events.sender())
        assert app.request.body.buffer.lines == [""]
        assert app.events.pending() == []

    def test_containers_follow_children(self, app):
        assert app.request.state == ComponentState.Focused
        assert app.response.state == ComponentState.Unfocused
        press(app, "b")
        assert app.request.state == ComponentState.Unfocused
        assert app.response.state == ComponentState.Focused


class TestMethod:

    def test_enter_cycles_and_wraps(self, app):
        press(app, "m")
        seen = []
        for _ in range(4):
            press(app, ENTER)
            seen.append(app.request.get_method())
        assert seen == [HttpMethod.POST, HttpMethod.PUT,
                        HttpMethod.DELETE, HttpMethod.GET]

    def test_never_editing(self, app):
        press(app, "m", ENTER)
        assert app.request.method.state == ComponentState.Focused

    def test_method_outside_cycle_restarts(self, app):
        app.request.method.method = HttpMethod.PATCH
        press(app, "m", ENTER)
        assert app.request.get_method() == HttpMethod.GET


class TestUrl:

    def test_typing_while_editing(self, app):
        press(app, ENTER, *"http://x/")
        assert app.request.get_url() == "http://x/"

    def test_shortcut_letters_insert_while_editing(self, app):
        press(app, ENTER, *"mqrbh")
        assert app.request.get_url() == "mqrbh"
        assert app.focus.position == ComponentPosition.RequestUrl

    def test_control_characters_rejected(self, app):
        press(app, ENTER, "a", "\x01", "\t", "b")
        assert app.request.get_url() == "ab"

    def test_enter_does_not_add_lines(self, app):
        press(app, ENTER, "a", ENTER, "b")
        assert app.request.url.buffer.lines == ["ab"]

    def test_no_set_query_without_question_mark(self, app):
        handled = press(app, ENTER, *"http://x/")
        assert EventKind.SetQuery not in [event.kind for event in handled]

    def test_question_mark_sends_empty_query(self, app):
        handled = press(app, ENTER, *"http://x/?")
        kinds = [(event.kind, event.data) for event in handled]
        assert (EventKind.SetQuery, (ComponentPosition.RequestUrl, "")) \
            in kinds

    def test_quit_while_editing(self, app):
        handled = press(app, ENTER, KeyCodes.QUIT.value)
        assert [event.kind for event in handled] == [EventKind.Quit]


class TestQuery:

    def test_typing_mirrors_into_url(self, app):
        press(app, "q", ENTER, *"a=1", ENTER, *"b=2")
        assert app.request.query.buffer.lines == ["a=1", "b=2"]
        assert app.request.get_url() == "?a=1&b=2"

    def test_backspace_across_lines(self, app):
        press(app, "q", ENTER, *"a=1", ENTER, BACKSPACE)
        assert app.request.query.buffer.lines == ["a=1"]
        assert app.request.get_url() == "?a=1"


class TestBody:

    def test_auto_pair_brace_then_quote(self, app):
        press(app, "r", ENTER, "{")
        assert app.request.body.buffer.lines == ["{}"]
        assert app.request.body.buffer.col == 1
        press(app, '"')
        assert app.request.body.buffer.lines == ['{""}']
        assert app.request.body.buffer.col == 2

    def test_multiline_body_text(self, app):
        press(app, "r", ENTER, *"ab", ENTER, *"cd")
        assert app.request.get_body() == "ab\ncd"

    def test_body_edits_send_no_events(self, app):
        handled = press(app, "r", ENTER, *"xyz")
        assert [event.kind for event in handled] == [EventKind.ChangeFocus]


class TestResponseViews:

    def test_scroll_clamped(self, app):
        app.response.body.set_data(["a", "b", "c"])
        press(app, "b", "j", "j", "j", "j")
        assert app.response.body.display_from == 2
        assert app.response.body.visible_rows() == ["c"]
        press(app, "k", "k", "k")
        assert app.response.body.display_from == 0

    def test_scroll_empty(self, app):
        press(app, "b", "j", "k")
        assert app.response.body.display_from == 0

    def test_header_rows(self, app):
        app.response.header.set_data([("Content-Type", "text/plain"),
                                      ("X-A", "1")])
        press(app, "h", "j")
        assert app.response.header.visible_rows() == ["X-A: 1"]

    def test_enter_does_not_edit(self, app):
        press(app, "b", ENTER)
        assert app.response.body.state == ComponentState.Focused

    def test_new_data_resets_scroll(self, app):
        app.response.body.set_data(["a", "b"])
        press(app, "b", "j")
        app.response.body.set_data(["x"])
        assert app.response.body.display_from == 0
