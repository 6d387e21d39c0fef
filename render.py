import math
import time
from enum import Enum
from typing import Optional
from dataclasses import dataclass

from app import App
from components import ComponentPosition, ComponentState
from text_buffer import TextBuffer, char_width, display_width


TITLE = "HTTP/TUI"      # For main application

ESC = "\x1b"            # Escape
CSI = f"{ESC}["         # Control Sequence Introducer

EN_ALT_BUF = "?1049h"   # Enable Alternate Buffer
DIS_ALT_BUF = "?1049l"  # Disable Alternate Buffer

MARGIN = 1              # Empty columns/rows around the form
METHOD_WIDTH = 15       # Method box, url takes the rest of the row
REQUEST_SHARE = 0.4     # Part of the height given to the request half
ANIMATION_FRAMES = 5

HELP = "Ctrl+S send  Ctrl+C quit  Enter edit  Esc stop editing"


class ColorMode(Enum):
    """
    Indicates the structure of the escape equence
    """
    # ColorMode {{{
    Bit4 = "4bit"       # Color immediately after CSI
    Bit8 = "8bit"       # Sequence is as follows: 35:5:{color}
    Bit24 = "24bit"     # RGB color sequence
    # }}}


@dataclass
class Theme:
    # Theme {{{
    text_color:    str
    title_color:   str
    border_color:  str
    focused_color: str
    editing_color: str
    success_color: str
    error_color:   str
    # }}}


@dataclass
class Border:
    # Border {{{
    h_single = "─"
    h_double = "═"
    v_single = "│"
    v_double = "║"
    ltc_single = "┌"
    ltc_double = "╔"
    ltc_rounded = "╭"
    lbc_single = "└"
    lbc_double = "╚"
    lbc_rounded = "╰"
    rtc_single = "┐"
    rtc_double = "╗"
    rtc_rounded = "╮"
    rbc_single = "┘"
    rbc_double = "╝"
    rbc_rounded = "╯"
    # }}}


class BorderStyle(Enum):
    # BorderStyle {{{
    Single = "single"
    Double = "double"
    Rounded = "rounded"
    # }}}


@dataclass
class Rect:
    # Rect {{{
    x: int              # Screen column, 1 based
    y: int              # Screen row, 1 based
    width: int
    height: int
    # }}}


@dataclass
class RenderState:
    # RenderState {{{
    borders: dict
    theme:   Theme
    mode:    ColorMode
    size:    tuple[int, int]
    debug:   bool = False
    # }}}


def populate_borders(style: BorderStyle) -> dict:
    # populate_borders {{{
    borders = {}
    if style == BorderStyle.Single:
        borders["h_border"] = Border.h_single
        borders["v_border"] = Border.v_single
        borders["lt_corner"] = Border.ltc_single
        borders["lb_corner"] = Border.lbc_single
        borders["rt_corner"] = Border.rtc_single
        borders["rb_corner"] = Border.rbc_single
    elif style == BorderStyle.Rounded:
        borders["h_border"] = Border.h_single
        borders["v_border"] = Border.v_single
        borders["lt_corner"] = Border.ltc_rounded
        borders["lb_corner"] = Border.lbc_rounded
        borders["rt_corner"] = Border.rtc_rounded
        borders["rb_corner"] = Border.rbc_rounded
    else:
        borders["h_border"] = Border.h_double
        borders["v_border"] = Border.v_double
        borders["lt_corner"] = Border.ltc_double
        borders["lb_corner"] = Border.lbc_double
        borders["rt_corner"] = Border.rtc_double
        borders["rb_corner"] = Border.rbc_double
    return borders
    # }}}


def calculate_layout(columns: int, lines: int) -> dict[str, Rect]:
    """
    Splits the screen into the help row, the request
    boxes, the response tabs and box, and the status row.
    """
    # calculate_layout {{{
    x = MARGIN + 1
    width = max(columns - 2 * MARGIN, METHOD_WIDTH + 3)
    last = max(lines - MARGIN, 12)

    help_y = MARGIN + 1
    request_y = help_y + 2
    available = last - request_y
    request_h = max(math.floor(available * REQUEST_SHARE), 6)
    half = math.floor(width / 2)

    tabs_y = request_y + request_h
    response_y = tabs_y + 1
    response_h = max(last - response_y, 3)

    return {
        "help": Rect(x, help_y, width, 1),
        "method": Rect(x, request_y, METHOD_WIDTH, 3),
        "url": Rect(x + METHOD_WIDTH, request_y, width - METHOD_WIDTH, 3),
        "query": Rect(x, request_y + 3, half, request_h - 3),
        "body": Rect(x + half, request_y + 3, width - half, request_h - 3),
        "tabs": Rect(x, tabs_y, width, 1),
        "response": Rect(x, response_y, width, response_h),
        "status": Rect(x, response_y + response_h, width, 1),
    }
    # }}}


def cap_line_width(max_w: int, line: str) -> str:
    """
    Cuts a line to max_w display columns,
    appending .. to indicate this
    """
    # cap_line_width {{{
    if display_width(line) <= max_w:
        return line

    capped = ""
    width = 0
    for char in line:
        if width + char_width(char) > max_w - 2:  # Length of ..
            break
        capped += char
        width += char_width(char)
    return capped + ".."[:max(max_w - width, 0)]
    # }}}


def pad_line(max_w: int, line: str) -> str:
    # pad_line {{{
    line = cap_line_width(max_w, line)
    return line + " " * (max_w - display_width(line))
    # }}}


def scroll_into_view(buffer: TextBuffer, rect: Rect) -> tuple[int, int]:
    """
    Returns the (first row, first column) to display so
    that the cursor of the buffer stays inside rect.
    """
    # scroll_into_view {{{
    inner_w = rect.width - 2
    inner_h = rect.height - 2

    row = max(buffer.row - inner_h + 1, 0)

    line = buffer.lines[buffer.row]
    col = 0
    while col < buffer.col and \
            display_width(line[col:buffer.col]) >= inner_w:
        col += 1
    return (row, col)
    # }}}


def get_foreground(color: str, mode: ColorMode) -> str:
    # get_foreground {{{
    match mode:
        case ColorMode.Bit4:
            prefix = f"{CSI}"
            return f"{prefix}{color}m"
        case ColorMode.Bit8:
            prefix = f"{CSI}38;5;"
            return f"{prefix}{color}m"
        case ColorMode.Bit24:
            r, g, b = color.split(",")
            prefix = f"{CSI}38;2;"
            return f"{prefix}{r};{g};{b}m"
    # }}}


def get_cursor(x: int, y: int) -> str:
    """
    Escape sequence to move the
    cursor with the assumption that
    location (1,1) is at the top
    left of the screen.
    """
    # get_cursor {{{
    return f"{CSI}{y};{x}H"
    # }}}


def state_color(state: RenderState, component: ComponentState) -> str:
    # state_color {{{
    match component:
        case ComponentState.Editing:
            return state.theme.editing_color
        case ComponentState.Focused:
            return state.theme.focused_color
        case _:
            return state.theme.border_color
    # }}}


def render_box(state: RenderState, rect: Rect, title: str,
               color: str, rows: list[str]) -> str:
    """
    Renders a bordered box with its title
    inset into the top border.
    ╭─ Title ────────────╮
    │ row                │
    ╰────────────────────╯
    """
    # render_box {{{
    inner_w = rect.width - 2
    inner_h = rect.height - 2
    borders = state.borders
    border = get_foreground(color, state.mode)
    text = get_foreground(state.theme.text_color, state.mode)

    label = cap_line_width(max(inner_w - 2, 0), f" {title} ")
    top = borders["lt_corner"] + borders["h_border"] + label
    top += borders["h_border"] * (inner_w - 1 - display_width(label))
    top += borders["rt_corner"]

    out = border + get_cursor(rect.x, rect.y) + top
    for index in range(inner_h):
        row = rows[index] if index < len(rows) else ""
        out += get_cursor(rect.x, rect.y + index + 1)
        out += borders["v_border"] + text + pad_line(inner_w, row)
        out += border + borders["v_border"]

    bottom = borders["lb_corner"] + borders["h_border"] * inner_w
    bottom += borders["rb_corner"]
    out += get_cursor(rect.x, rect.y + rect.height - 1) + bottom
    return out
    # }}}


def render_help(state: RenderState, rect: Rect) -> str:
    # render_help {{{
    out = get_cursor(rect.x, rect.y)
    out += get_foreground(state.theme.text_color, state.mode)
    help_w = rect.width - len(TITLE) - 1
    out += pad_line(help_w, HELP) + " "
    out += get_foreground(state.theme.title_color, state.mode) + TITLE
    return out
    # }}}


def render_request(state: RenderState, app: App,
                   layout: dict[str, Rect]) -> str:
    # render_request {{{
    request = app.request

    out = render_box(state, layout["method"], "[M]ethod",
                     state_color(state, request.method.state),
                     [request.method.get_data().value])

    for name, field, title in (("url", request.url, "[U]rl"),
                               ("query", request.query, "[Q]uery"),
                               ("body", request.body, "[R]equest body")):
        rect = layout[name]
        first_row, first_col = scroll_into_view(field.buffer, rect)
        rows = [line[first_col:] if index == field.buffer.row else line
                for index, line in enumerate(field.buffer.lines)]
        out += render_box(state, rect, title,
                          state_color(state, field.state),
                          rows[first_row:])
    return out
    # }}}


def render_tabs(state: RenderState, app: App, rect: Rect) -> str:
    """
    Renders the selector above the response box,
    the selected view drawn in the text color.
    """
    # render_tabs {{{
    out = get_cursor(rect.x, rect.y)
    width = 0
    for position, label in ((ComponentPosition.ResponseBody, " [B]ody "),
                            (ComponentPosition.ResponseHeader,
                             " [H]eader ")):
        if position != app.response.tab:
            color = state.theme.border_color
        elif app.response.is_focused():
            color = state.theme.focused_color
        else:
            color = state.theme.text_color
        out += get_foreground(color, state.mode) + label
        width += len(label)
    out += " " * max(rect.width - width, 0)
    return out
    # }}}


def render_response(state: RenderState, app: App, rect: Rect) -> str:
    # render_response {{{
    view = app.response.selected_view()
    title = "Response body" \
        if view.position == ComponentPosition.ResponseBody \
        else "Response header"
    return render_box(state, rect, title,
                      state_color(state, view.state),
                      view.visible_rows())
    # }}}


def render_status(state: RenderState, app: App, rect: Rect,
                  frame: int) -> str:
    """
    Status code and latency of the last response, followed
    by the waiting animation or the last failure.
    STATUS: 200 OK  RESPONSE TIME: 0.120s  ··•··
    """
    # render_status {{{
    theme = state.theme
    data = app.response.data
    out = get_cursor(rect.x, rect.y)
    line = ""

    if data is None:
        status = "STATUS:"
        color = theme.text_color
    else:
        status = f"STATUS: {data}"
        if data.is_success():
            color = theme.success_color
        elif data.is_client_error():
            color = theme.error_color
        else:
            color = theme.text_color
    out += get_foreground(color, state.mode) + status
    line += status

    delay = "  RESPONSE TIME:"
    if data is not None:
        delay += f" {data.delay.total_seconds():.3f}s"
    out += get_foreground(theme.text_color, state.mode) + delay
    line += delay

    if app.await_request.waiting:
        dots = "".join("•" if index == frame else "·"
                       for index in range(ANIMATION_FRAMES))
        out += get_foreground(theme.focused_color, state.mode)
        out += f"  {dots}"
        line += f"  {dots}"
    elif app.response.error is not None:
        remaining = max(rect.width - display_width(line) - 2, 0)
        error = cap_line_width(remaining, app.response.error)
        out += get_foreground(theme.error_color, state.mode) + f"  {error}"
        line += f"  {error}"

    out += " " * max(rect.width - display_width(line), 0)
    return out
    # }}}


def render_debug(state: RenderState, app: App) -> str:
    # render_debug {{{
    columns, lines = state.size
    debug = \
        f"wid {columns} hgt {lines} | " + \
        f"foc {app.focus.position.name} | edt {app.focus.editing} | " + \
        f"wait {app.await_request.waiting} | " + \
        f"rows {len(app.response.body.data)}"

    pos_x = max(columns - len(debug) - 2, 1)
    out = get_cursor(pos_x, lines)
    out += get_foreground(state.theme.text_color, state.mode) + debug
    return out
    # }}}


def cursor_position(app: App,
                    layout: dict[str, Rect]) -> Optional[tuple[int, int]]:
    """
    Screen position of the editing cursor,
    None when no field is being edited.
    """
    # cursor_position {{{
    fields = {
        "url": app.request.url,
        "query": app.request.query,
        "body": app.request.body,
    }
    for name, field in fields.items():
        if field.state != ComponentState.Editing:
            continue

        rect = layout[name]
        buffer = field.buffer
        first_row, first_col = scroll_into_view(buffer, rect)
        line = buffer.lines[buffer.row]
        x = display_width(line[first_col:buffer.col])
        y = buffer.cursor_y() - first_row
        return (rect.x + 1 + min(x, rect.width - 3), rect.y + 1 + y)
    return None
    # }}}


def compose(state: RenderState, app: App) -> str:
    """
    Builds the whole frame as one string. Only reads
    the model, nothing on the app is changed.
    """
    # compose {{{
    columns, lines = state.size
    layout = calculate_layout(columns, lines)
    frame = math.floor(time.monotonic() * ANIMATION_FRAMES) \
        % ANIMATION_FRAMES

    out = f"{CSI}?25l"
    out += render_help(state, layout["help"])
    out += render_request(state, app, layout)
    out += render_tabs(state, app, layout["tabs"])
    out += render_response(state, app, layout["response"])
    out += render_status(state, app, layout["status"], frame)
    out += reset_style()

    if state.debug:
        out += render_debug(state, app)
        out += reset_style()

    cursor = cursor_position(app, layout)
    if cursor is not None:
        out += get_cursor(*cursor) + f"{CSI}?25h"
    return out
    # }}}


def render(state: RenderState, app: App, resize: bool) -> None:
    """
    Main render function
    """
    # render {{{
    if resize:
        clear_screen()
    print(compose(state, app), end="", flush=True)
    # }}}


def clear_screen() -> None:
    # clear_screen {{{
    print(f"{CSI}2J", end="")
    # }}}


def disable_buffer() -> None:
    """
    Reverts screen back to
    previous state before script
    """
    # disable_buffer {{{
    print(f"{CSI}{DIS_ALT_BUF}", end="", flush=True)
    # }}}


def enable_buffer() -> None:
    """
    Creates a new screen buffer
    """
    # enable_buffer {{{
    print(f"{CSI}{EN_ALT_BUF}", end="", flush=True)
    # }}}


def hide_cursor() -> None:
    # hide_cursor {{{
    print(f"{CSI}?25l", end="", flush=True)
    # }}}


def show_cursor() -> None:
    # show_cursor {{{
    print(f"{CSI}?25h", end="", flush=True)
    # }}}


def reset_style() -> str:
    # reset_style {{{
    return f"{CSI}0m"
    # }}}
