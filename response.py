from typing import Optional

from keys import KeyCodes
from event import EventSender
from req_struct import HttpResponse
from components import ComponentPosition, Container, Field, Focus, \
    default_key_handle


class ScrollView(Field):
    """
    Read only list of rows, j/k move the first
    visible row within [0, len(rows) - 1].
    """
    # ScrollView {{{

    def __init__(self, focus: Focus) -> None:
        super().__init__(focus)
        self.display_from = 0

    def rows(self) -> list[str]:
        raise NotImplementedError

    def focused_key_handle(self, key: str, sender: EventSender) -> None:
        # focused_key_handle {{{
        match key:
            case KeyCodes.SCROLL_DOWN.value:
                if self.display_from + 1 < len(self.rows()):
                    self.display_from += 1

            case KeyCodes.SCROLL_UP.value:
                if self.display_from > 0:
                    self.display_from -= 1

            case _:
                default_key_handle(key, sender, self.position)
        # }}}

    def visible_rows(self) -> list[str]:
        return self.rows()[self.display_from:]
    # }}}


class ResponseBody(ScrollView):
    # ResponseBody {{{
    position = ComponentPosition.ResponseBody

    def __init__(self, focus: Focus) -> None:
        super().__init__(focus)
        self.data = []

    def rows(self) -> list[str]:
        return self.data

    def set_data(self, lines: list[str]) -> None:
        self.data = list(lines)
        self.display_from = 0
    # }}}


class ResponseHeader(ScrollView):
    # ResponseHeader {{{
    position = ComponentPosition.ResponseHeader

    def __init__(self, focus: Focus) -> None:
        super().__init__(focus)
        self.data = []

    def rows(self) -> list[str]:
        return [f"{name}: {value}" for name, value in self.data]

    def set_data(self, headers: list[tuple[str, str]]) -> None:
        self.data = list(headers)
        self.display_from = 0
    # }}}


class Response(Container):
    """
    The response half of the form. The last successful
    response is only ever replaced as a whole, a failed
    request leaves it in place and only sets the error.
    """
    # Response {{{

    def __init__(self, focus: Focus) -> None:
        self.body = ResponseBody(focus)
        self.header = ResponseHeader(focus)
        super().__init__(focus, [self.body, self.header])

        self.data: Optional[HttpResponse] = None
        self.error: Optional[str] = None
        self.tab = ComponentPosition.ResponseBody

    def select(self, position: ComponentPosition) -> None:
        # select {{{
        if position.is_response():
            self.tab = position
        # }}}

    def set_data(self, response: HttpResponse) -> None:
        # set_data {{{
        self.body.set_data(response.body)
        self.header.set_data(response.headers)
        self.data = response
        self.error = None
        # }}}

    def set_error(self, message: str) -> None:
        self.error = message

    def selected_view(self) -> ScrollView:
        if self.tab == ComponentPosition.ResponseHeader:
            return self.header
        return self.body
    # }}}
