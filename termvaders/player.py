"""Player ship and its shots"""

from typing import List

from .frame import FrameBuffer
from .settings import Settings
from .timer import Timer


class Shot:
    """Player's laser bolt, travels straight up"""

    def __init__(self, x: int, y: int, step: float = 0.05, explode_time: float = 0.25):
        self.x = x
        self.y = y
        self.exploding = False
        self.explode_time = explode_time
        self.timer = Timer(step)

    def update(self, delta: float):
        self.timer.update(delta)
        if self.timer.ready and not self.exploding:
            if self.y > 0:
                self.y -= 1
            self.timer.reset()

    def explode(self):
        self.exploding = True
        self.timer = Timer(self.explode_time)

    def dead(self) -> bool:
        """Explosion finished or bolt left the top of the field"""
        return (self.exploding and self.timer.ready) or self.y == 0

    def draw(self, frame: FrameBuffer):
        frame.set(self.x, self.y, "*" if self.exploding else "|")


class Player:
    """Player's ship on the bottom row"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.x = settings.width // 2
        self.y = settings.height - 1
        self.shots: List[Shot] = []
        self.cooldown_left = 0.0

    def move_left(self):
        if self.x > 0:
            self.x -= 1

    def move_right(self):
        if self.x < self.settings.width - 1:
            self.x += 1

    def shoot(self) -> bool:
        """Fire a new shot; False while on cooldown or with too many shots in flight"""
        if self.cooldown_left > 0 or len(self.shots) >= self.settings.max_shots:
            return False
        self.shots.append(Shot(self.x, self.y - 1, self.settings.shot_step, self.settings.shot_explode))
        self.cooldown_left = self.settings.shot_cooldown
        return True

    def update(self, delta: float):
        """Decay cooldown, advance shots and drop finished ones"""
        self.cooldown_left = max(0.0, self.cooldown_left - delta)
        for shot in self.shots:
            shot.update(delta)
        self.shots = [shot for shot in self.shots if not shot.dead()]

    def detect_hits(self, invaders) -> bool:
        """Kill every invader sharing a cell with a live shot; True if anything was hit"""
        hit_something = False
        for shot in self.shots:
            if not shot.exploding and invaders.kill_invader_at(shot.x, shot.y):
                hit_something = True
                shot.explode()
        return hit_something

    def draw(self, frame: FrameBuffer):
        frame.set(self.x, self.y, "A")
        for shot in self.shots:
            shot.draw(frame)
