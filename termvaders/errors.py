"""Exception types shared across the game"""


class TermvadersError(Exception):
    """Base class for all game errors"""


class ConfigError(TermvadersError):
    """Settings could not be built from defaults, environment and overrides"""


class TerminalError(TermvadersError):
    """Terminal setup or teardown failed (fatal)"""


class TerminalTooSmallError(TerminalError):
    """Terminal window cannot hold the playfield"""

    def __init__(self, width: int, height: int, required_width: int, required_height: int):
        super().__init__(
            f"Terminal size must be at least {required_width}x{required_height}. "
            f"Current size: {width}x{height}"
        )
        self.width = width
        self.height = height
        self.required_width = required_width
        self.required_height = required_height


class RenderError(TermvadersError):
    """Writing one frame to the terminal failed"""


class ChannelClosed(TermvadersError):
    """Receiver side: the producer closed the channel and every frame was consumed"""


class ChannelClosedError(TermvadersError):
    """Sender side: a frame was sent after the sender was closed"""
