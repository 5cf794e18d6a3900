"""
termvaders - terminal invaders

Controls:
  Left/Right - Move ship
  Space/Enter - Shoot
  Esc/q - Quit
"""

from .channel import FrameReceiver, FrameSender, frame_channel
from .frame import EMPTY, Drawable, FrameBuffer, new_frame
from .game import Game, GameState, Outcome
from .render import RenderEngine, render, render_loop
from .settings import Settings, load_settings

__version__ = "0.1.0"

__all__ = [
    "EMPTY",
    "Drawable",
    "FrameBuffer",
    "FrameReceiver",
    "FrameSender",
    "Game",
    "GameState",
    "Outcome",
    "RenderEngine",
    "Settings",
    "frame_channel",
    "load_settings",
    "new_frame",
    "render",
    "render_loop",
]
