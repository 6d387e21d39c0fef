from typing import Optional

from keys import KeyCodes
from event import Event, EventKind, EventSender
from text_buffer import TextBuffer
from req_struct import HttpMethod, METHODS
from query_sync import url_query, replace_query, split_segments, \
    join_segments
from components import ComponentPosition, Container, Field, Focus, \
    TextField, default_key_handle


def next_method(method: HttpMethod) -> HttpMethod:
    """
    Next entry of the cycle, wrapping around. A method
    outside the cycle restarts it from the first entry.
    """
    # next_method {{{
    if method not in METHODS:
        return METHODS[0]
    return METHODS[(METHODS.index(method) + 1) % len(METHODS)]
    # }}}


class Method(Field):
    # Method {{{
    position = ComponentPosition.RequestMethod

    def __init__(self, focus: Focus,
                 method: HttpMethod = HttpMethod.GET) -> None:
        super().__init__(focus)
        self.method = method

    def focused_key_handle(self, key: str, sender: EventSender) -> None:
        # focused_key_handle {{{
        if key == KeyCodes.ENTER.value:
            self.method = next_method(self.method)
        else:
            default_key_handle(key, sender, self.position)
        # }}}

    def get_data(self) -> HttpMethod:
        return self.method
    # }}}


class Url(TextField):
    """
    Single line url editor. Every mutation pushes the
    query substring, when there is one, as SetQuery.
    """
    # Url {{{
    position = ComponentPosition.RequestUrl

    def __init__(self, focus: Focus) -> None:
        super().__init__(focus, TextBuffer())

    def on_change(self, sender: EventSender) -> None:
        # on_change {{{
        query = self.get_query()
        if query is not None:
            sender.send(Event(EventKind.SetQuery, (self.position, query)))
        # }}}

    def get_query(self) -> Optional[str]:
        return url_query(self.get_data())

    def set_query(self, query: str) -> None:
        # set_query {{{
        if self.get_query() == query:
            return

        self.buffer.set_text([replace_query(self.get_data(), query)])
        self.buffer.move_to_end()
        # }}}

    def set_data(self, url: str) -> None:
        # set_data {{{
        self.buffer.set_text([url])
        self.buffer.move_to_end()
        # }}}
    # }}}


class Query(TextField):
    """
    One line per '&' separated segment of the query string.
    """
    # Query {{{
    position = ComponentPosition.RequestQuery

    def __init__(self, focus: Focus) -> None:
        super().__init__(focus, TextBuffer(multiline=True))

    def on_change(self, sender: EventSender) -> None:
        # on_change {{{
        sender.send(Event(EventKind.SetQuery,
                          (self.position, self.get_data())))
        # }}}

    def get_data(self) -> str:
        return join_segments(self.buffer.lines)

    def set_data(self, query: str) -> None:
        # set_data {{{
        segments = split_segments(query)
        if segments != self.buffer.lines:
            self.buffer.set_text(segments)
        # }}}
    # }}}


class Body(TextField):
    # Body {{{
    position = ComponentPosition.RequestBody

    def __init__(self, focus: Focus) -> None:
        super().__init__(focus, TextBuffer(multiline=True, auto_pair=True))
    # }}}


class Request(Container):
    """
    The request half of the form, its values are read
    straight from the fields whenever a request is built.
    """
    # Request {{{

    def __init__(self, focus: Focus) -> None:
        self.method = Method(focus)
        self.url = Url(focus)
        self.query = Query(focus)
        self.body = Body(focus)
        super().__init__(focus, [self.method, self.url,
                                 self.query, self.body])

    def get_method(self) -> HttpMethod:
        return self.method.get_data()

    def get_url(self) -> str:
        return self.url.get_data()

    def get_body(self) -> str:
        return self.body.get_data()
    # }}}
