import sys
import shutil
import signal
import logging
import argparse
import traceback
import configparser
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from app import App
from req_struct import HttpMethod
from event import Config, Events, TICK_RATE
from render import BorderStyle, ColorMode, RenderState, Theme, \
    populate_borders, render, enable_buffer, disable_buffer, \
    hide_cursor, show_cursor


THEME_KEYS = (
    "text_color",
    "title_color",
    "border_color",
    "focused_color",
    "editing_color",
    "success_color",
    "error_color",
)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Ensure we can run this script with anywhere
DEFAULT_THEME_FILE = Path(Path(__file__).parent, "theme.ini")

DEFAULT_THEME = """
[core]
tick_interval = 250

[4bit]
text_color = 37
title_color = 36
border_color = 90
focused_color = 32
editing_color = 92
success_color = 32
error_color = 31

[8bit]
text_color = 252
title_color = 117
border_color = 242
focused_color = 34
editing_color = 120
success_color = 34
error_color = 160

[24bit]
text_color = 220,220,220
title_color = 130,190,240
border_color = 110,110,110
focused_color = 80,180,80
editing_color = 140,230,140
success_color = 80,180,80
error_color = 220,80,80
"""


@dataclass
class Arguments:
    # Arguments {{{
    url: str = ""
    debug: bool = False
    log_file: Optional[str] = None
    theme_file: Path = DEFAULT_THEME_FILE
    method: HttpMethod = HttpMethod.GET
    tick_interval: Optional[int] = None     # Milliseconds
    color_mode: ColorMode = ColorMode.Bit24
    border_style: BorderStyle = BorderStyle.Rounded
    # }}}


logger = logging.getLogger(__name__)


def main() -> None:
    """
    Main wraps the platform
    specific implementation
    """
    # main {{{
    args = parse_args()
    configure_logging(args)
    if sys.platform == "win32":
        _win_main(args)
    else:
        _nix_main(args)
    # }}}


def _main_loop(driver: any, args: Arguments) -> None:
    """
    Starts the producers and consumes their events one at
    a time, rendering after each, until a Quit arrives.
    """
    # _main_loop {{{
    cp = read_config(args)
    theme = parse_colors(cp, args)
    tick_rate = parse_tick_rate(cp, args)

    events = Events(Config(tick_rate=tick_rate))
    app = App(events)
    app.prefill(args.method, args.url)

    state = RenderState(
        borders=populate_borders(args.border_style),
        theme=theme, mode=args.color_mode,
        size=shutil.get_terminal_size(),
        debug=args.debug
    )

    enable_buffer()
    hide_cursor()
    try:
        events.start(driver.read_key)
        render(state, app, True)  # Ensure screen is initially cleared

        while app.dispatch(events.next()):
            new_size = shutil.get_terminal_size()
            resizeflag = new_size != state.size
            state.size = new_size
            render(state, app, resizeflag)
    finally:
        events.close()
        show_cursor()
        disable_buffer()
    # }}}


def _win_main(args: Arguments) -> None:
    # _win_main {{{
    import ansi_win

    driver = ansi_win
    ostate, istate = driver.initialize()

    def signal_trap(sig, frame) -> None:
        """
        Ensures terminal state is restored
        """
        disable_buffer()
        driver.reset(ostate, istate)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_trap)

    status = 0
    try:
        _main_loop(driver, args)
    except Exception as exception:
        logger.exception("Unexpected failure")
        status = 1
        failure = exception
    finally:
        driver.reset(ostate, istate)

    if status != 0:
        print(failure)
        traceback.print_tb(failure.__traceback__)
    sys.exit(status)
    # }}}


def _nix_main(args: Arguments) -> None:
    # _nix_main {{{
    import ansi_nix

    driver = ansi_nix
    orig_state = driver.initialize()

    def signal_trap(sig, frame) -> None:
        """
        Ensures terminal state is restored
        """
        disable_buffer()
        driver.reset(orig_state)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_trap)
    signal.signal(signal.SIGTERM, signal_trap)

    status = 0
    try:
        _main_loop(driver, args)
    except Exception as exception:
        logger.exception("Unexpected failure")
        status = 1
        failure = exception
    finally:
        driver.reset(orig_state)

    if status != 0:
        print(failure)
        traceback.print_tb(failure.__traceback__)
    sys.exit(status)
    # }}}


def configure_logging(args: Arguments) -> None:
    """
    The terminal belongs to the interface, so records
    only ever go to a file, or nowhere at all.
    """
    # configure_logging {{{
    if args.log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return

    logging.basicConfig(
        filename=args.log_file,
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT
    )
    # }}}


def parse_args(argv: Optional[list[str]] = None) -> Arguments:
    # parse_args {{{
    description = "Compose HTTP requests and read responses in the terminal"
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument("url", nargs="?",
                        help="Url to start with, its query fills " +
                        "the query field")

    parser.add_argument("-X", "--method", type=str.upper,
                        choices=[method.value for method in HttpMethod],
                        help="Method to start with " +
                        "(defaults to 'GET')")

    parser.add_argument("-t", "--theme",
                        help="Path to theme file " +
                        "(defaults to 'theme.ini')")

    parser.add_argument("-m", "--mode",
                        help="Color style: '4bit', '8bit', or '24bit' " +
                        "(defaults to '24bit')")

    parser.add_argument("-b", "--border",
                        help="Border style: 'single', 'double' or " +
                        "'rounded' (defaults to 'rounded')")

    parser.add_argument("-i", "--interval", type=int,
                        help="Milliseconds between screen refreshes " +
                        f"(defaults to {int(TICK_RATE * 1000)})")

    parser.add_argument("-l", "--log",
                        help="Write a log to this file")

    parser.add_argument("-g", "--debug", action="store_true",
                        help=argparse.SUPPRESS)

    args = Arguments()
    parsed_args = parser.parse_args(argv)

    if parsed_args.url is not None:
        args.url = parsed_args.url

    if parsed_args.method is not None:
        args.method = (HttpMethod)(parsed_args.method)

    if parsed_args.theme is not None:
        args.theme_file = Path(parsed_args.theme)

    if parsed_args.mode is not None:
        mode = (ColorMode)(parsed_args.mode.lower())
        args.color_mode = mode

    if parsed_args.border is not None:
        border = (BorderStyle)(parsed_args.border.lower())
        args.border_style = border

    if parsed_args.interval is not None:
        if parsed_args.interval <= 0:
            parser.error("--interval must be a positive number")
        args.tick_interval = parsed_args.interval

    args.log_file = parsed_args.log
    args.debug = parsed_args.debug

    return args
    # }}}


def read_config(args: Arguments) -> configparser.ConfigParser:
    """
    Built in colors first, overlaid by the theme file. Only a
    theme file given on the command line has to exist.
    """
    # read_config {{{
    cp = configparser.ConfigParser()
    cp.read_string(DEFAULT_THEME)
    found = cp.read(args.theme_file)
    if not found and args.theme_file != DEFAULT_THEME_FILE:
        raise FileNotFoundError(f"No theme file [{args.theme_file}] found")
    return cp
    # }}}


def parse_colors(cp: configparser.ConfigParser, args: Arguments) -> Theme:
    # parse_colors {{{
    mode = args.color_mode.value
    if not cp.has_section(mode):
        raise ValueError(f"Theme file has no [{mode}] section")

    colors = {}
    for key in THEME_KEYS:
        colors[key] = validate_colors(key, cp[mode].get(key, ""),
                                      args.color_mode)

    return Theme(**colors)
    # }}}


def parse_tick_rate(cp: configparser.ConfigParser,
                    args: Arguments) -> float:
    """
    Seconds between Tick events, the command line
    wins over the [core] section of the theme file.
    """
    # parse_tick_rate {{{
    if args.tick_interval is not None:
        return args.tick_interval / 1000

    interval = cp.getint("core", "tick_interval", fallback=None)
    if interval is None:
        return TICK_RATE
    if interval <= 0:
        raise ValueError(f"tick_interval must be positive, got {interval}")
    return interval / 1000
    # }}}


def validate_colors(key: str, color: str, mode: ColorMode) -> str:
    """
    We may be expecting an integer value or an array depending
    on the color mode. This validates the expected format.
    """
    # validate_colors {{{
    if mode == ColorMode.Bit24:
        split = color.split(",")
        if len(split) != 3 or \
                not all(channel.strip().isdigit() for channel in split):
            raise ValueError(f"Invalid RGB color format for {key}={color}")
        return ",".join(channel.strip() for channel in split)
    else:
        try:
            int(color)
            return color
        except ValueError:
            raise ValueError(f"Color must be an integer for {key}={color}")
    # }}}


if __name__ == "__main__":
    main()
