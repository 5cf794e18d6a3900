"""
Logging setup.

Modules get their logger with ``logging.getLogger(__name__)``. curses owns
the terminal while the game runs, so records go to a file or nowhere.
"""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"


def setup_logging(level: Union[int, str] = "WARNING", log_file: Optional[str] = None) -> None:
    """Configure the root logger once

    - no-op when the root logger already has handlers
    - without ``log_file`` a NullHandler keeps records off the playfield
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.WARNING)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    if log_file:
        logging.basicConfig(level=lvl, filename=log_file, format=LOG_FORMAT)
    else:
        root.setLevel(lvl)
        root.addHandler(logging.NullHandler())
