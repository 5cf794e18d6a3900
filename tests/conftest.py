"""Shared fixtures: small settings and fakes for the terminal, keyboard, audio and clock"""

import curses
import random
from typing import Dict, List, Optional, Tuple

import numpy as np
import pytest

from termvaders.settings import Settings


@pytest.fixture(scope="session", autouse=True)
def seed() -> None:
    random.seed(12345)
    np.random.seed(12345)


@pytest.fixture()
def settings() -> Settings:
    return Settings(width=12, height=10, tick_sleep=0.0, shot_cooldown=0.0)


class FakeScreen:
    """Records every put/flush; replays writes onto a blank grid"""

    def __init__(self, fail_on: Optional[int] = None):
        self.writes: List[Tuple[int, int, str]] = []
        self.flushes = 0
        self.cells: Dict[Tuple[int, int], str] = {}
        self.fail_on = fail_on  # zero-based index of the put that raises

    def put(self, x: int, y: int, glyph: str):
        if self.fail_on is not None and len(self.writes) == self.fail_on:
            self.fail_on = None
            raise curses.error("addstr() returned ERR")
        self.writes.append((x, y, glyph))
        self.cells[(x, y)] = glyph

    def flush(self):
        self.flushes += 1

    def grid(self, width: int, height: int) -> List[str]:
        return [
            "".join(self.cells.get((x, y), " ") for x in range(width))
            for y in range(height)
        ]


class FakeKeys:
    """Returns one scripted batch of keys per poll, then nothing"""

    def __init__(self, batches=None):
        self.batches = list(batches or [])
        self.polls = 0
        self.stopped = False

    def poll(self):
        self.polls += 1
        return self.batches.pop(0) if self.batches else []

    def stop(self):
        self.stopped = True


class FakeAudio:
    def __init__(self):
        self.played: List[str] = []
        self.waited = 0

    def play(self, sound_name: str):
        self.played.append(sound_name)

    def wait(self, timeout=None):
        self.waited += 1

    def close(self):
        pass


class FakeClock:
    """Monotonic clock that advances a fixed step per reading"""

    def __init__(self, step: float = 0.01):
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture()
def screen() -> FakeScreen:
    return FakeScreen()


@pytest.fixture()
def audio() -> FakeAudio:
    return FakeAudio()
