"""
Frame buffer and the Drawable contract.

A frame is a fixed-size grid of single-character cells. Entities paint into a
fresh frame every tick; once the frame is sent to the renderer it is frozen
and never written again.
"""

from typing import Iterator, Protocol, Tuple

import numpy as np

EMPTY = " "


class FrameBuffer:
    """Fixed-size grid of glyphs, indexed (x, y) with (0, 0) top-left"""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        # Row-major storage so diffs come out in terminal write order
        self.cells = np.full((height, width), EMPTY, dtype="<U1")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(self, x: int, y: int, glyph: str) -> bool:
        """Paint one cell. Out-of-bounds coordinates are ignored (returns False)"""
        if not self.in_bounds(x, y):
            return False
        self.cells[y, x] = glyph[:1] or EMPTY
        return True

    def get(self, x: int, y: int) -> str:
        return str(self.cells[y, x])

    def freeze(self):
        """Make the grid read-only; further writes raise ValueError"""
        self.cells.flags.writeable = False

    @property
    def frozen(self) -> bool:
        return not self.cells.flags.writeable

    def rows(self) -> Iterator[str]:
        for row in self.cells:
            yield "".join(row)

    def changed_cells(self, other: "FrameBuffer") -> Iterator[Tuple[int, int]]:
        """(x, y) of every cell that differs from ``other``, in row-major order"""
        if self.cells.shape != other.cells.shape:
            raise ValueError(
                f"frame size mismatch: {self.width}x{self.height} vs {other.width}x{other.height}"
            )
        for y, x in np.argwhere(self.cells != other.cells):
            yield int(x), int(y)

    def __repr__(self):
        return f"FrameBuffer({self.width}x{self.height}, frozen={self.frozen})"


def new_frame(width: int, height: int) -> FrameBuffer:
    """Return a frame of the given size with every cell empty"""
    return FrameBuffer(width, height)


class Drawable(Protocol):
    """Anything that can paint itself into a frame"""

    def draw(self, frame: FrameBuffer) -> None:
        ...
