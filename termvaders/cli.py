"""
Command line entry point.

Sets up logging, audio and the terminal, runs the render thread next to the
simulation loop and tears everything down in a fixed order: close the
channel, join the renderer, let audio finish, stop input, close audio,
restore the terminal.
"""

import argparse
import logging
import sys
import threading
from typing import List, Optional

from .audio import open_audio
from .channel import frame_channel
from .errors import TerminalError, TermvadersError
from .game import Game
from .input import PynputKeySource
from .log import setup_logging
from .render import render_loop
from .settings import INPUT_BACKENDS, Settings, load_settings
from .terminal import Terminal

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termvaders",
        description="Defend the bottom row against a descending invader swarm. "
                    "Left/Right move, Space/Enter fire, Esc/q quit.",
    )
    parser.add_argument("--mute", action="store_true", help="disable sound")
    parser.add_argument("--input", dest="input_backend", choices=INPUT_BACKENDS, default=None,
                        help="keyboard backend (default: curses)")
    parser.add_argument("--log-file", default=None, help="write log records to this file")
    parser.add_argument("--log-level", default=None, help="log level (default: WARNING)")
    parser.add_argument("--channel-capacity", type=int, default=None,
                        help="bound the frame queue, dropping the oldest frame when full")
    return parser


def open_keys(settings: Settings, term: Terminal):
    """Keyboard backend chosen in the settings"""
    if settings.input_backend == "pynput":
        try:
            return PynputKeySource()
        except ImportError as exc:
            raise TerminalError(f"pynput keyboard backend unavailable: {exc}") from exc
    return term.keys()


def _session(settings: Settings, term: Terminal, audio):
    """Render thread plus simulation loop inside an entered terminal"""
    keys = open_keys(settings, term)
    sender, receiver = frame_channel(settings.channel_capacity)
    renderer = threading.Thread(
        target=render_loop,
        args=(receiver, term.screen(), settings.width, settings.height),
        name="renderer",
    )
    renderer.start()
    try:
        game = Game(settings, sender, audio, keys)
        return game.run()
    finally:
        sender.close()
        renderer.join()
        audio.wait()
        keys.stop()


def play(settings: Settings):
    """Run one game with a real terminal; returns the Outcome"""
    audio = open_audio(settings.audio)
    audio_closed = False
    try:
        with Terminal(settings.width, settings.height) as term:
            try:
                return _session(settings, term, audio)
            finally:
                # Mixer goes down while the terminal is still in game mode
                audio_closed = True
                audio.close()
    finally:
        if not audio_closed:
            audio.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(
            audio=False if args.mute else None,
            input_backend=args.input_backend,
            log_file=args.log_file,
            log_level=args.log_level,
            channel_capacity=args.channel_capacity,
        )
    except TermvadersError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    setup_logging(settings.log_level, settings.log_file)

    try:
        outcome = play(settings)
    except TermvadersError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    if outcome is not None:
        print(f"Game over: {outcome.name.lower()}")
    return 0


def run():
    sys.exit(main())
