import unicodedata
from enum import Enum


# Characters auto-closed by buffers built with auto_pair
PAIRS = {
    "{": "}",
    '"': '"',
}


class Direction(Enum):
    # Direction {{{
    Up = 0
    Down = 1
    Left = 2
    Right = 3
    # }}}


def char_width(char: str) -> int:
    """
    Display width of a single character,
    wide and fullwidth glyphs occupy two columns.
    """
    # char_width {{{
    if char < "\u0100":
        return 1
    if unicodedata.combining(char):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    # }}}


def display_width(text: str) -> int:
    # display_width {{{
    return sum(char_width(char) for char in text)
    # }}}


class TextBuffer:
    """
    Line oriented editable text with a single editing cursor.

    The cursor always satisfies 0 <= row < len(lines) and
    0 <= col <= len(lines[row]). Mutating operations return
    True when the content changed.
    """
    # TextBuffer {{{

    def __init__(self, multiline: bool = False,
                 auto_pair: bool = False) -> None:
        self.multiline = multiline
        self.auto_pair = auto_pair
        self.lines = [""]
        self.row = 0
        self.col = 0

    def insert_char(self, char: str) -> bool:
        # insert_char {{{
        line = self.lines[self.row]
        inserted = char
        if self.auto_pair and char in PAIRS:
            inserted += PAIRS[char]

        # Cursor lands between an auto-paired opener and closer
        self.lines[self.row] = line[:self.col] + inserted + line[self.col:]
        self.col += 1
        return True
        # }}}

    def insert_newline(self) -> bool:
        """
        Splits the current line at the cursor,
        moving to the start of the new line.
        """
        # insert_newline {{{
        if not self.multiline:
            return False

        line = self.lines[self.row]
        self.lines[self.row] = line[:self.col]
        self.lines.insert(self.row + 1, line[self.col:])
        self.row += 1
        self.col = 0
        return True
        # }}}

    def backspace(self) -> bool:
        """
        Deletes the character before the cursor, or at the
        start of a line, joins it onto the previous line.
        """
        # backspace {{{
        if self.col > 0:
            line = self.lines[self.row]
            self.lines[self.row] = line[:self.col - 1] + line[self.col:]
            self.col -= 1
            return True

        if self.row > 0:
            removed = self.lines.pop(self.row)
            self.row -= 1
            self.col = len(self.lines[self.row])
            self.lines[self.row] += removed
            return True

        return False
        # }}}

    def move_cursor(self, direction: Direction) -> None:
        # move_cursor {{{
        match direction:
            case Direction.Left:
                if self.col > 0:
                    self.col -= 1

            case Direction.Right:
                if self.col < len(self.lines[self.row]):
                    self.col += 1

            case Direction.Up:
                if self.multiline and self.row > 0:
                    self.row -= 1
                    self.col = min(self.col, len(self.lines[self.row]))

            case Direction.Down:
                if self.multiline and self.row < len(self.lines) - 1:
                    self.row += 1
                    self.col = min(self.col, len(self.lines[self.row]))
        # }}}

    def move_to_end(self) -> None:
        # move_to_end {{{
        self.row = len(self.lines) - 1
        self.col = len(self.lines[self.row])
        # }}}

    def get_text(self, separator: str = "\n") -> str:
        # get_text {{{
        return separator.join(self.lines)
        # }}}

    def set_text(self, lines: list[str]) -> None:
        """
        Replaces the whole content, the cursor
        returns to the start of the buffer.
        """
        # set_text {{{
        lines = list(lines) or [""]
        if not self.multiline:
            lines = ["".join(lines)]

        self.lines = lines
        self.row = 0
        self.col = 0
        # }}}

    def cursor_x(self) -> int:
        # cursor_x {{{
        return display_width(self.lines[self.row][:self.col])
        # }}}

    def cursor_y(self) -> int:
        # cursor_y {{{
        return self.row
        # }}}
    # }}}
