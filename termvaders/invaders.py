"""Invader swarm"""

import logging
from dataclasses import dataclass
from typing import List

from .frame import FrameBuffer
from .settings import Settings
from .timer import Timer

logger = logging.getLogger(__name__)


@dataclass
class Invader:
    x: int
    y: int


class InvaderSwarm:
    """Formation that marches sideways and steps down at each wall"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.army: List[Invader] = []
        # Classic block: every other column and row in the upper part of the field
        for x in range(settings.width):
            for y in range(settings.height):
                if 1 < x < settings.width - 2 and 0 < y < 9 and x % 2 == 0 and y % 2 == 0:
                    self.army.append(Invader(x, y))
        self.move_timer = Timer(settings.invader_move_interval)
        self.direction = 1  # 1 = right, -1 = left

    @property
    def count(self) -> int:
        return len(self.army)

    def update(self, delta: float) -> bool:
        """Advance the move timer; True if the formation took a step this call"""
        self.move_timer.update(delta)
        if not self.move_timer.ready:
            return False
        self.move_timer.reset()
        if not self.army:
            return False

        downwards = False
        if self.direction == -1:
            if min(invader.x for invader in self.army) == 0:
                self.direction = 1
                downwards = True
        else:
            if max(invader.x for invader in self.army) == self.settings.width - 1:
                self.direction = -1
                downwards = True

        if downwards:
            # Speed up on every descent, down to the floor
            new_interval = max(
                self.move_timer.duration - self.settings.invader_speedup,
                self.settings.invader_min_interval,
            )
            self.move_timer = Timer(new_interval)
            for invader in self.army:
                invader.y += 1
            logger.debug("swarm descended, move interval now %.2fs", new_interval)
        else:
            for invader in self.army:
                invader.x += self.direction
        return True

    def all_killed(self) -> bool:
        return not self.army

    def reached_bottom(self) -> bool:
        """True if any surviving invader is at or below the bottom boundary"""
        return any(invader.y >= self.settings.bottom_boundary for invader in self.army)

    def kill_invader_at(self, x: int, y: int) -> bool:
        for idx, invader in enumerate(self.army):
            if invader.x == x and invader.y == y:
                del self.army[idx]
                return True
        return False

    def draw(self, frame: FrameBuffer):
        # Two-frame march animation keyed to the move timer
        glyph = "x" if self.move_timer.fraction_left > 0.5 else "+"
        for invader in self.army:
            frame.set(invader.x, invader.y, glyph)
