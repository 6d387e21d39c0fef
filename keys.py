from enum import Enum


class KeyCodes(Enum):
    """
    Key sequences as delivered by the terminal drivers,
    which normalize platform differences to these values.
    """
    # KeyCodes {{{
    ENTER = "\r"
    ESCAPE = "\x1b"
    BACKSPACE = "\x7f"
    UP = "\x1b[A"
    DOWN = "\x1b[B"
    RIGHT = "\x1b[C"
    LEFT = "\x1b[D"
    QUIT = "\x03"           # Ctrl+C
    SUBMIT = "\x13"         # Ctrl+S
    FOCUS_METHOD = "m"
    FOCUS_URL = "u"
    FOCUS_QUERY = "q"
    FOCUS_BODY = "r"
    FOCUS_RESPONSE_BODY = "b"
    FOCUS_RESPONSE_HEADER = "h"
    SCROLL_DOWN = "j"
    SCROLL_UP = "k"
    # }}}


def is_printable(key: str) -> bool:
    # is_printable {{{
    return len(key) == 1 and key.isprintable()
    # }}}
