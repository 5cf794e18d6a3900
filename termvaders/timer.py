"""Countdown timer driven by elapsed seconds"""


class Timer:
    """Counts down from ``duration``; ``ready`` once it reaches zero"""

    def __init__(self, duration: float):
        self.duration = duration
        self.time_left = duration
        self.ready = duration <= 0

    def update(self, delta: float):
        self.time_left = max(0.0, self.time_left - delta)
        self.ready = self.time_left <= 0

    def reset(self):
        self.time_left = self.duration
        self.ready = self.duration <= 0

    @property
    def fraction_left(self) -> float:
        """Share of the duration still to run, 0.0 - 1.0"""
        if self.duration <= 0:
            return 0.0
        return self.time_left / self.duration
