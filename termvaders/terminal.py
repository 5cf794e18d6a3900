"""
Terminal boundary.

``Terminal`` is entered once before the game starts and restores the terminal
exactly once on the way out, whatever ended the game. All curses calls from
the render thread and the input poll go through one lock.
"""

import curses
import logging
import os
import threading

from .errors import TerminalError, TerminalTooSmallError
from .input import CursesKeySource

logger = logging.getLogger(__name__)

# 256-colour palette, washed-out colours on a dark navy background
COLOR_BG = 17
COLOR_DUSTY_ORANGE = 173  # Invaders
COLOR_PALE_CYAN = 116  # Player
COLOR_AMBER = 179  # Shots
COLOR_BLUE_GRAY = 146  # Explosions / default

PAIR_DEFAULT = 1
PAIR_PLAYER = 2
PAIR_INVADER = 3
PAIR_SHOT = 4

GLYPH_PAIRS = {
    'A': PAIR_PLAYER,
    'x': PAIR_INVADER,
    '+': PAIR_INVADER,
    '|': PAIR_SHOT,
    '*': PAIR_DEFAULT,
}


def _init_palette() -> bool:
    """Set up colour pairs; False if the terminal has no colours"""
    if not curses.has_colors():
        return False
    curses.start_color()
    if curses.COLORS >= 256:
        curses.init_pair(PAIR_DEFAULT, COLOR_BLUE_GRAY, COLOR_BG)
        curses.init_pair(PAIR_PLAYER, COLOR_PALE_CYAN, COLOR_BG)
        curses.init_pair(PAIR_INVADER, COLOR_DUSTY_ORANGE, COLOR_BG)
        curses.init_pair(PAIR_SHOT, COLOR_AMBER, COLOR_BG)
    else:
        curses.init_pair(PAIR_DEFAULT, curses.COLOR_WHITE, curses.COLOR_BLACK)
        curses.init_pair(PAIR_PLAYER, curses.COLOR_CYAN, curses.COLOR_BLACK)
        curses.init_pair(PAIR_INVADER, curses.COLOR_RED, curses.COLOR_BLACK)
        curses.init_pair(PAIR_SHOT, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    return True


class CursesScreen:
    """Renderer output on a curses window"""

    def __init__(self, window, width: int, height: int, lock: threading.Lock, colors: bool = False):
        self.window = window
        self.width = width
        self.height = height
        self.lock = lock
        self.colors = colors

    def _attr(self, glyph: str) -> int:
        if not self.colors:
            return 0
        return curses.color_pair(GLYPH_PAIRS.get(glyph, PAIR_DEFAULT))

    def put(self, x: int, y: int, glyph: str):
        attr = self._attr(glyph)
        with self.lock:
            if x == self.width - 1 and y == self.height - 1:
                # addstr on the last cell fails after writing (cursor cannot advance)
                self.window.insstr(y, x, glyph, attr)
            else:
                self.window.addstr(y, x, glyph, attr)

    def flush(self):
        with self.lock:
            self.window.refresh()


class Terminal:
    """Raw mode, alternate screen and hidden cursor for the lifetime of the game"""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.lock = threading.Lock()
        self.stdscr = None
        self._input_win = None
        self._colors = False
        self._cursor_hidden = False

    def __enter__(self) -> "Terminal":
        # Esc should quit promptly instead of waiting for an escape sequence
        os.environ.setdefault('ESCDELAY', '25')
        try:
            self.stdscr = curses.initscr()
        except curses.error as exc:
            raise TerminalError(f"cannot initialise terminal: {exc}") from exc
        try:
            curses.noecho()
            curses.raw()
            self.stdscr.keypad(True)
            try:
                curses.curs_set(0)
                self._cursor_hidden = True
            except curses.error:
                logger.debug("terminal cannot hide the cursor")
            self._colors = _init_palette()
            if self._colors:
                self.stdscr.bkgd(' ', curses.color_pair(PAIR_DEFAULT))

            rows, cols = self.stdscr.getmaxyx()
            if rows < self.height or cols < self.width:
                raise TerminalTooSmallError(cols, rows, self.width, self.height)

            # The key window overlaps cell (0, 0); paint it before the playfield
            self._input_win = curses.newwin(1, 1, 0, 0)
            if self._colors:
                self._input_win.bkgd(' ', curses.color_pair(PAIR_DEFAULT))
            self._input_win.refresh()
            self.stdscr.erase()
        except curses.error as exc:
            self._restore()
            raise TerminalError(f"terminal setup failed: {exc}") from exc
        except TerminalError:
            self._restore()
            raise
        logger.debug("terminal ready (%dx%d playfield, colors=%s)", self.width, self.height, self._colors)
        return self

    def __exit__(self, exc_type, exc, tb):
        self._restore()
        return False

    def screen(self) -> CursesScreen:
        return CursesScreen(self.stdscr, self.width, self.height, self.lock, self._colors)

    def keys(self) -> CursesKeySource:
        return CursesKeySource(self._input_win, self.lock)

    def _restore(self):
        """Show the cursor, leave raw mode and the alternate screen (once)"""
        if self.stdscr is None:
            return
        stdscr, self.stdscr = self.stdscr, None
        with self.lock:
            try:
                if self._cursor_hidden:
                    curses.curs_set(1)
                stdscr.keypad(False)
                curses.noraw()
                curses.echo()
            except curses.error as exc:
                logger.debug("partial terminal restore: %s", exc)
            finally:
                try:
                    curses.endwin()
                except curses.error as exc:
                    raise TerminalError(f"terminal teardown failed: {exc}") from exc
        logger.debug("terminal restored")
