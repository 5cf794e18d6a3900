"""
Simulation loop.

Runs on the main thread: reads input, advances the player and the swarm by
the wall-clock time since the previous tick, draws a fresh frame and hands it
to the render thread through the frame channel. The game ends on a win, a
loss or the quit key; whichever it is, the matching cue plays once and the
channel is closed.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional, Tuple

from . import audio as cues
from .channel import FrameSender
from .frame import Drawable, FrameBuffer, new_frame
from .input import Key, KeySource
from .invaders import InvaderSwarm
from .player import Player
from .settings import Settings

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Simulation loop states"""
    RUNNING = 1
    WIN_PENDING = 2
    LOSE_PENDING = 3
    TERMINATED = 4


class Outcome(Enum):
    """How the game ended"""
    WIN = 1
    LOSE = 2
    QUIT = 3


class Game:
    """Owns the entities and drives one tick at a time"""

    def __init__(
        self,
        settings: Settings,
        sender: FrameSender,
        audio,
        keys: KeySource,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.sender = sender
        self.audio = audio
        self.keys = keys
        self.clock = clock
        self.sleep = sleep

        self.player = Player(settings)
        self.invaders = InvaderSwarm(settings)
        # Z-order: later entries overwrite earlier ones on overlap
        self.draw_order: Tuple[Drawable, ...] = (self.player, self.invaders)

        self.state = GameState.RUNNING
        self.outcome: Optional[Outcome] = None
        self.ticks = 0
        self.frames_dropped = 0
        self._last_tick: Optional[float] = None

    def _transition(self, state: GameState, outcome: Optional[Outcome] = None):
        logger.info("game state %s -> %s", self.state.name, state.name)
        self.state = state
        if outcome is not None:
            self.outcome = outcome

    def handle_input(self) -> bool:
        """Apply every pending key; False if quit was pressed"""
        for key in self.keys.poll():
            if key == Key.LEFT:
                self.player.move_left()
            elif key == Key.RIGHT:
                self.player.move_right()
            elif key == Key.FIRE:
                if self.player.shoot():
                    self.audio.play(cues.PEW)
            elif key == Key.QUIT:
                self._transition(GameState.LOSE_PENDING, Outcome.QUIT)
                return False
        return True

    def draw(self) -> FrameBuffer:
        """Fresh frame with every entity drawn in z-order"""
        frame = new_frame(self.settings.width, self.settings.height)
        for drawable in self.draw_order:
            drawable.draw(frame)
        return frame

    def tick(self) -> GameState:
        """One iteration of the running loop"""
        if self.state != GameState.RUNNING:
            return self.state

        now = self.clock()
        delta = 0.0 if self._last_tick is None else now - self._last_tick
        self._last_tick = now
        self.ticks += 1

        if not self.handle_input():
            return self.state

        # Updates
        self.player.update(delta)
        if self.invaders.update(delta):
            self.audio.play(cues.MOVE)
        if self.player.detect_hits(self.invaders):
            self.audio.play(cues.EXPLODE)

        # Draw and hand over; a gone renderer is not fatal
        if not self.sender.send(self.draw()):
            self.frames_dropped += 1
            logger.debug("renderer gone, frame %d dropped", self.ticks)
        self.sleep(self.settings.tick_sleep)

        # Win or lose?
        if self.invaders.all_killed():
            self._transition(GameState.WIN_PENDING, Outcome.WIN)
        elif self.invaders.reached_bottom():
            self._transition(GameState.LOSE_PENDING, Outcome.LOSE)
        return self.state

    def finish(self):
        """Play the closing cue and release the channel"""
        if self.state == GameState.WIN_PENDING:
            self.audio.play(cues.WIN)
        elif self.state == GameState.LOSE_PENDING:
            self.audio.play(cues.LOSE)
        else:
            return
        self._transition(GameState.TERMINATED)
        self.sender.close()

    def run(self) -> Optional[Outcome]:
        """Play until win, loss or quit"""
        self.audio.play(cues.STARTUP)
        self._last_tick = self.clock()
        while self.tick() == GameState.RUNNING:
            pass
        self.finish()
        logger.info("game over: %s after %d ticks", self.outcome.name if self.outcome else "none", self.ticks)
        return self.outcome
