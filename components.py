from enum import Enum
from typing import Optional

from keys import KeyCodes, is_printable
from event import Event, EventKind, EventSender
from text_buffer import Direction, TextBuffer


class ComponentState(Enum):
    # ComponentState {{{
    Unfocused = 0
    Focused = 1
    Editing = 2

    def is_focused(self) -> bool:
        return self != ComponentState.Unfocused
    # }}}


class ComponentPosition(Enum):
    """
    Every field sits on a 2x3 grid of (column, row),
    rows growing downward.
    """
    # ComponentPosition {{{
    RequestMethod = (0, 0)
    RequestUrl = (1, 0)
    RequestQuery = (0, 1)
    RequestBody = (1, 1)
    ResponseBody = (0, 2)
    ResponseHeader = (1, 2)

    def position(self) -> tuple[int, int]:
        return self.value

    @classmethod
    def from_position(cls, coordinate: tuple[int, int]
                      ) -> Optional["ComponentPosition"]:
        try:
            return cls(tuple(coordinate))
        except ValueError:
            return None

    def is_request(self) -> bool:
        return self in REQUEST_POSITIONS

    def is_response(self) -> bool:
        return self in RESPONSE_POSITIONS

    def up(self) -> "ComponentPosition":
        return self._step(0, -1)

    def down(self) -> "ComponentPosition":
        return self._step(0, 1)

    def left(self) -> "ComponentPosition":
        return self._step(-1, 0)

    def right(self) -> "ComponentPosition":
        return self._step(1, 0)

    def _step(self, dx: int, dy: int) -> "ComponentPosition":
        # Off the grid stays put
        column, row = self.value
        target = ComponentPosition.from_position((column + dx, row + dy))
        return target if target is not None else self
    # }}}


REQUEST_POSITIONS = (
    ComponentPosition.RequestMethod,
    ComponentPosition.RequestUrl,
    ComponentPosition.RequestQuery,
    ComponentPosition.RequestBody,
)

RESPONSE_POSITIONS = (
    ComponentPosition.ResponseBody,
    ComponentPosition.ResponseHeader,
)

SHORTCUTS = {
    KeyCodes.FOCUS_METHOD.value: ComponentPosition.RequestMethod,
    KeyCodes.FOCUS_URL.value: ComponentPosition.RequestUrl,
    KeyCodes.FOCUS_QUERY.value: ComponentPosition.RequestQuery,
    KeyCodes.FOCUS_BODY.value: ComponentPosition.RequestBody,
    KeyCodes.FOCUS_RESPONSE_BODY.value: ComponentPosition.ResponseBody,
    KeyCodes.FOCUS_RESPONSE_HEADER.value: ComponentPosition.ResponseHeader,
}


class Focus:
    """
    The one authoritative record of which field holds the
    keyboard. Fields never keep a focus flag of their own,
    they ask this object about their position instead.
    """
    # Focus {{{

    def __init__(self, position: ComponentPosition
                 = ComponentPosition.RequestUrl) -> None:
        self.position = position
        self.editing = False

    def state_of(self, position: ComponentPosition) -> ComponentState:
        # state_of {{{
        if position != self.position:
            return ComponentState.Unfocused
        if self.editing:
            return ComponentState.Editing
        return ComponentState.Focused
        # }}}

    def move(self, position: ComponentPosition) -> None:
        # move {{{
        self.editing = False
        self.position = position
        # }}}

    def begin_editing(self, position: ComponentPosition) -> None:
        # begin_editing {{{
        if position == self.position:
            self.editing = True
        # }}}

    def end_editing(self, position: ComponentPosition) -> None:
        # end_editing {{{
        if position == self.position:
            self.editing = False
        # }}}
    # }}}


def default_key_handle(key: str, sender: EventSender,
                       position: ComponentPosition) -> None:
    """
    Bindings shared by every field, applied to
    whatever key the field did not consume itself.
    """
    # default_key_handle {{{
    match key:
        case KeyCodes.QUIT.value:
            sender.send(Event(EventKind.Quit))

        case KeyCodes.SUBMIT.value:
            sender.send(Event(EventKind.Request))

        case KeyCodes.UP.value:
            _send_move(sender, position, position.up())

        case KeyCodes.DOWN.value:
            _send_move(sender, position, position.down())

        case KeyCodes.LEFT.value:
            _send_move(sender, position, position.left())

        case KeyCodes.RIGHT.value:
            _send_move(sender, position, position.right())

        case _ if key in SHORTCUTS:
            sender.send(Event(EventKind.ChangeFocus, SHORTCUTS[key]))
    # }}}


def _send_move(sender: EventSender, current: ComponentPosition,
               target: ComponentPosition) -> None:
    # _send_move {{{
    if target != current:
        sender.send(Event(EventKind.ChangeFocus, target))
    # }}}


class Field:
    """
    A single unit of the form. Its state is derived from
    the shared Focus; only Focused and Editing fields react
    to keys, everything unconsumed goes to the default handler.
    """
    # Field {{{
    position: ComponentPosition = None
    editable = False

    def __init__(self, focus: Focus) -> None:
        self.focus = focus

    @property
    def state(self) -> ComponentState:
        return self.focus.state_of(self.position)

    def is_focused(self) -> bool:
        return self.state.is_focused()

    def key_handle(self, key: str, sender: EventSender) -> None:
        # key_handle {{{
        match self.state:
            case ComponentState.Focused:
                self.focused_key_handle(key, sender)
            case ComponentState.Editing:
                self.editing_key_handle(key, sender)
        # }}}

    def focused_key_handle(self, key: str, sender: EventSender) -> None:
        # focused_key_handle {{{
        if key == KeyCodes.ENTER.value and self.editable:
            self.focus.begin_editing(self.position)
        else:
            default_key_handle(key, sender, self.position)
        # }}}

    def editing_key_handle(self, key: str, sender: EventSender) -> None:
        # editing_key_handle {{{
        if key == KeyCodes.ESCAPE.value:
            self.focus.end_editing(self.position)
        else:
            default_key_handle(key, sender, self.position)
        # }}}
    # }}}


class TextField(Field):
    """
    A field editing a TextBuffer. Subclasses hook
    on_change to react to content mutations.
    """
    # TextField {{{
    editable = True

    def __init__(self, focus: Focus, buffer: TextBuffer) -> None:
        super().__init__(focus)
        self.buffer = buffer

    def editing_key_handle(self, key: str, sender: EventSender) -> None:
        # editing_key_handle {{{
        changed = False
        match key:
            case KeyCodes.ESCAPE.value:
                self.focus.end_editing(self.position)

            case KeyCodes.ENTER.value:
                changed = self.buffer.insert_newline()

            case KeyCodes.BACKSPACE.value:
                changed = self.buffer.backspace()

            case KeyCodes.UP.value:
                self.buffer.move_cursor(Direction.Up)

            case KeyCodes.DOWN.value:
                self.buffer.move_cursor(Direction.Down)

            case KeyCodes.LEFT.value:
                self.buffer.move_cursor(Direction.Left)

            case KeyCodes.RIGHT.value:
                self.buffer.move_cursor(Direction.Right)

            case _ if self.accepts(key):
                changed = self.buffer.insert_char(key)

            case _:
                default_key_handle(key, sender, self.position)

        if changed:
            self.on_change(sender)
        # }}}

    def accepts(self, key: str) -> bool:
        return is_printable(key)

    def on_change(self, sender: EventSender) -> None:
        pass

    def get_data(self) -> str:
        return self.buffer.get_text()
    # }}}


class Container:
    """
    Groups fields, Focused exactly when one of its children is.
    """
    # Container {{{

    def __init__(self, focus: Focus, fields: list[Field]) -> None:
        self.focus = focus
        self.fields = fields

    @property
    def state(self) -> ComponentState:
        if any(field.is_focused() for field in self.fields):
            return ComponentState.Focused
        return ComponentState.Unfocused

    def is_focused(self) -> bool:
        return self.state.is_focused()

    def focused_field(self) -> Optional[Field]:
        for field in self.fields:
            if field.is_focused():
                return field
        return None

    def key_handle(self, key: str, sender: EventSender) -> None:
        # key_handle {{{
        field = self.focused_field()
        if field is not None:
            field.key_handle(key, sender)
        # }}}
    # }}}
