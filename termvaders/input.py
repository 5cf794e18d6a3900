"""
Keyboard input.

Only four actions mean anything to the game: move left, move right, fire and
quit. Both backends translate raw keys into ``Key`` values and drop
everything else; ``poll()`` returns whatever is pending without waiting.
"""

import curses
import logging
import queue
import threading
from enum import Enum
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


class Key(Enum):
    """Game actions"""
    LEFT = 1
    RIGHT = 2
    FIRE = 3
    QUIT = 4


class KeySource(Protocol):
    def poll(self) -> List[Key]:
        """Every pending action, oldest first; empty list if none"""

    def stop(self) -> None:
        ...


ESC = 27

_CURSES_KEYS = {
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    ord(' '): Key.FIRE,
    ord('\n'): Key.FIRE,
    ord('\r'): Key.FIRE,
    curses.KEY_ENTER: Key.FIRE,
    ESC: Key.QUIT,
    ord('q'): Key.QUIT,
}


def translate_curses_key(code: int) -> Optional[Key]:
    """Map a ``getch()`` code to an action, None for keys the game ignores"""
    return _CURSES_KEYS.get(code)


class CursesKeySource:
    """Reads keys with getch() on a tiny non-blocking window"""

    def __init__(self, window, lock: Optional[threading.Lock] = None):
        self.window = window
        self.lock = lock or threading.Lock()
        window.nodelay(True)
        window.keypad(True)

    def poll(self) -> List[Key]:
        keys = []
        while True:
            with self.lock:
                code = self.window.getch()
            if code == -1:  # No more input
                break
            key = translate_curses_key(code)
            if key is not None:
                keys.append(key)
        return keys

    def stop(self):
        pass


def translate_pynput_key(key) -> Optional[Key]:
    """Map a pynput key object to an action, None for keys the game ignores"""
    from pynput import keyboard

    if key == keyboard.Key.left:
        return Key.LEFT
    if key == keyboard.Key.right:
        return Key.RIGHT
    if key in (keyboard.Key.space, keyboard.Key.enter):
        return Key.FIRE
    if key == keyboard.Key.esc:
        return Key.QUIT
    if getattr(key, 'char', None) == 'q':
        return Key.QUIT
    return None


class PynputKeySource:
    """Global keyboard listener; key presses are queued from pynput's thread"""

    def __init__(self):
        # pynput picks its platform backend at import time (needs a display on X11)
        from pynput import keyboard

        self._pending: "queue.SimpleQueue[Key]" = queue.SimpleQueue()
        self.listener = keyboard.Listener(on_press=self._on_key_press)
        self.listener.start()

    def _on_key_press(self, key):
        """Callback for key press events from pynput"""
        action = translate_pynput_key(key)
        if action is not None:
            self._pending.put(action)

    def poll(self) -> List[Key]:
        keys = []
        while True:
            try:
                keys.append(self._pending.get_nowait())
            except queue.Empty:
                break
        return keys

    def stop(self):
        self.listener.stop()
