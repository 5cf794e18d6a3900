"""
Differential frame renderer.

The renderer remembers the last frame it drew and writes only the cells that
changed since then, flushing once per frame so a half-written frame is never
shown. The very first frame is drawn in full because whatever the terminal
showed before is unknown.
"""

import curses
import logging
from typing import Iterable, Protocol

from .errors import RenderError
from .frame import FrameBuffer, new_frame

logger = logging.getLogger(__name__)


class Screen(Protocol):
    """Terminal output surface used by the renderer"""

    def put(self, x: int, y: int, glyph: str) -> None:
        """Move the cursor to (x, y) and write one glyph"""

    def flush(self) -> None:
        """Push everything written since the last flush to the terminal"""


def render(screen: Screen, previous: FrameBuffer, current: FrameBuffer, force_full_redraw: bool = False) -> int:
    """Write ``current`` to ``screen`` as a delta against ``previous``

    Returns the number of cells written. Raises RenderError if the screen
    rejects a write or the flush.
    """
    if force_full_redraw:
        cells: Iterable = (
            (x, y) for y in range(current.height) for x in range(current.width)
        )
    else:
        cells = current.changed_cells(previous)

    writes = 0
    try:
        for x, y in cells:
            screen.put(x, y, current.get(x, y))
            writes += 1
        screen.flush()
    except (curses.error, OSError) as exc:
        raise RenderError(f"terminal write failed after {writes} cells: {exc}") from exc
    return writes


class RenderEngine:
    """Keeps the last rendered frame and draws each new frame as a diff"""

    def __init__(self, screen: Screen, width: int, height: int):
        self.screen = screen
        self._last = new_frame(width, height)
        self._full_redraw = True
        self.frames_rendered = 0

    def render(self, frame: FrameBuffer) -> int:
        """Draw ``frame``; the first call redraws every cell"""
        force = self._full_redraw
        try:
            return render(self.screen, self._last, frame, force)
        finally:
            # Adopt the frame even on failure so later diffs stay consistent
            self._last = frame
            self._full_redraw = False
            self.frames_rendered += 1


def render_loop(receiver, screen: Screen, width: int, height: int) -> RenderEngine:
    """Consume frames until the channel closes

    Primes the terminal with a full redraw of an empty frame first. Write
    failures are logged and the loop moves on to the next frame.
    """
    engine = RenderEngine(screen, width, height)
    try:
        try:
            engine.render(new_frame(width, height))
        except RenderError as exc:
            logger.warning("initial redraw failed: %s", exc)
        for frame in receiver:
            try:
                engine.render(frame)
            except RenderError as exc:
                logger.warning("frame %d not fully rendered: %s", engine.frames_rendered, exc)
    finally:
        receiver.close()
    logger.debug("render loop finished after %d frames", engine.frames_rendered)
    return engine
