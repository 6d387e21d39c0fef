import os
import sys
import tty
import codecs
import select
import termios
from typing import Optional

from keys import KeyCodes


ESCAPE_TIMEOUT = 0.05   # Seconds to wait for the rest of a sequence

# Alternative sequences some terminals send for the same key
NORMALIZED = {
    "\n": KeyCodes.ENTER.value,
    "\x08": KeyCodes.BACKSPACE.value,
    "\x1bOA": KeyCodes.UP.value,
    "\x1bOB": KeyCodes.DOWN.value,
    "\x1bOC": KeyCodes.RIGHT.value,
    "\x1bOD": KeyCodes.LEFT.value,
}

_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")


def initialize() -> list:
    """
    This setup function is relavent on unix-like
    systems to ensure the escape codes passed to
    the terminal operate as expected. It returns
    the original state of the terminal,
    applicable to the reset function.
    """
    # initialize {{{
    fileno = sys.stdin.fileno()
    state = termios.tcgetattr(fileno)
    tty.setraw(fileno)
    return state
    # }}}


def reset(original_state: list) -> None:
    """
    This is required because some terminals on unix-like systems
    will not return, by default, to their original state. This
    function is used to address this.
    """
    # reset {{{
    fileno = sys.stdin.fileno()
    termios.tcsetattr(fileno, termios.TCSADRAIN, original_state)
    # }}}


def read_key() -> Optional[str]:
    """
    Blocks for one keypress and returns its sequence,
    escape sequences are read whole.
    """
    # read_key {{{
    fileno = sys.stdin.fileno()
    key = _read_char(fileno)

    if key == KeyCodes.ESCAPE.value:
        while _has_input(fileno, ESCAPE_TIMEOUT):
            key += _read_char(fileno)
            if len(key) > 2 and (key[-1].isalpha() or key[-1] == "~"):
                break

    return NORMALIZED.get(key, key)
    # }}}


def _has_input(fileno: int, timeout: float) -> bool:
    # _has_input {{{
    ready, _, _ = select.select([fileno], [], [], timeout)
    return bool(ready)
    # }}}


def _read_char(fileno: int) -> str:
    """
    Reads bytes until they decode to one character,
    bypassing the buffering of sys.stdin.
    """
    # _read_char {{{
    while True:
        data = os.read(fileno, 1)
        if data == b"":
            raise EOFError("stdin closed")
        char = _decoder.decode(data)
        if char != "":
            return char
    # }}}
