from ctypes.wintypes import DWORD
from typing import Optional
import ctypes
import msvcrt

from keys import KeyCodes


# Input Constants
STD_INPUT_HANDLE = -10
ENABLE_VIRTUAL_TERMINAL_INPUT = 0x0200

# Output Constants
STD_OUTPUT_HANDLE = -11
ENABLE_PROCESSED_OUTPUT = 0x0001
ENABLE_WRAP_AT_EOL_OUTPUT = 0x0002
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004

# Second character msvcrt reports after a \x00 or \xe0 prefix
SPECIAL_KEYS = {
    "H": KeyCodes.UP.value,
    "P": KeyCodes.DOWN.value,
    "M": KeyCodes.RIGHT.value,
    "K": KeyCodes.LEFT.value,
}

NORMALIZED = {
    "\n": KeyCodes.ENTER.value,
    "\x08": KeyCodes.BACKSPACE.value,
}


def initialize() -> (ctypes.c_long, ctypes.c_long):
    '''
    In certain environments, this function may not
    be needed, such as running PowerShell in Windows
    Terminal. In other situations, such as running
    Windows CMD 'straight', this allows the escape
    characters to function properly.

    Returns (output, input)
    '''
    kernel = ctypes.windll.kernel32
    stdin = kernel.GetStdHandle(STD_INPUT_HANDLE)
    stdout = kernel.GetStdHandle(STD_OUTPUT_HANDLE)
    istate = DWORD()
    ostate = DWORD()
    kernel.GetConsoleMode(stdin, ctypes.byref(istate))
    kernel.GetConsoleMode(stdout, ctypes.byref(ostate))
    kernel.SetConsoleMode(
            stdin,
            ENABLE_VIRTUAL_TERMINAL_INPUT
    )
    kernel.SetConsoleMode(
            stdout,
            ENABLE_PROCESSED_OUTPUT |
            ENABLE_WRAP_AT_EOL_OUTPUT |
            ENABLE_VIRTUAL_TERMINAL_PROCESSING
    )
    return (ostate, istate)


def reset(ostate: ctypes.c_long, istate: ctypes.c_long) -> None:
    '''
    Though not strictly necessary, this function is used as a
    means to ensure the user's terminal is returned to the
    way it was before using this application.
    '''
    kernel = ctypes.windll.kernel32
    stdin = kernel.GetStdHandle(STD_INPUT_HANDLE)
    stdout = kernel.GetStdHandle(STD_OUTPUT_HANDLE)
    kernel.SetConsoleMode(stdin, istate)
    kernel.SetConsoleMode(stdout, ostate)


def read_key() -> Optional[str]:
    '''
    Blocks for one keypress. Arrow keys arrive as a two
    character pair and are translated to their escape
    sequences, unknown pairs are dropped.
    '''
    key = msvcrt.getwch()
    if key in ("\x00", "\xe0"):
        return SPECIAL_KEYS.get(msvcrt.getwch())
    return NORMALIZED.get(key, key)
