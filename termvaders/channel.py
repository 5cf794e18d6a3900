"""
One-directional frame channel between the simulation and render threads.

Single producer, single consumer, FIFO. Unbounded by default. With a
capacity the oldest queued frame is dropped to make room, and the frames
that are kept still arrive in send order. Closing the sender is the
shutdown signal for the consumer.
"""

import logging
import threading
import time
from collections import deque
from typing import Iterator, Optional, Tuple

from .errors import ChannelClosed, ChannelClosedError
from .frame import FrameBuffer

logger = logging.getLogger(__name__)


class _FrameQueue:
    """State shared by the two endpoints; every access holds the condition"""

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity
        self.frames = deque(maxlen=capacity)
        self.cond = threading.Condition()
        self.sender_closed = False
        self.receiver_closed = False
        self.sent = 0
        self.dropped = 0


class FrameSender:
    """Producer endpoint"""

    def __init__(self, queue: _FrameQueue):
        self._queue = queue

    def send(self, frame: FrameBuffer) -> bool:
        """Hand a finished frame to the renderer

        The frame is frozen before it is queued. Returns False when the
        receiver is gone; the frame is then discarded.
        """
        q = self._queue
        with q.cond:
            if q.sender_closed:
                raise ChannelClosedError("send on a closed frame channel")
            if q.receiver_closed:
                return False
            frame.freeze()
            if q.capacity is not None and len(q.frames) == q.capacity:
                q.dropped += 1  # deque(maxlen) discards the oldest on append
                logger.debug("frame channel full, dropped oldest frame (%d total)", q.dropped)
            q.frames.append(frame)
            q.sent += 1
            q.cond.notify()
        return True

    def close(self):
        """Release the endpoint; the receiver drains what is queued, then stops"""
        q = self._queue
        with q.cond:
            if q.sender_closed:
                return
            q.sender_closed = True
            q.cond.notify_all()
        logger.debug("frame sender closed after %d frames", q.sent)

    @property
    def closed(self) -> bool:
        return self._queue.sender_closed

    @property
    def dropped(self) -> int:
        return self._queue.dropped


class FrameReceiver:
    """Consumer endpoint"""

    def __init__(self, queue: _FrameQueue):
        self._queue = queue

    def recv(self, timeout: Optional[float] = None) -> Optional[FrameBuffer]:
        """Block until the next frame arrives

        Raises ChannelClosed once the sender is closed and nothing is left.
        Returns None if ``timeout`` seconds pass without a frame.
        """
        q = self._queue
        deadline = None if timeout is None else time.monotonic() + timeout
        with q.cond:
            while not q.frames:
                if q.sender_closed:
                    raise ChannelClosed("frame channel closed")
                if deadline is None:
                    q.cond.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return None
                    q.cond.wait(remaining)
            return q.frames.popleft()

    def __iter__(self) -> Iterator[FrameBuffer]:
        while True:
            try:
                frame = self.recv()
            except ChannelClosed:
                return
            yield frame

    def close(self):
        """Mark the consumer gone; queued frames are discarded and later sends return False"""
        q = self._queue
        with q.cond:
            q.receiver_closed = True
            q.frames.clear()

    @property
    def pending(self) -> int:
        with self._queue.cond:
            return len(self._queue.frames)


def frame_channel(capacity: Optional[int] = None) -> Tuple[FrameSender, FrameReceiver]:
    """Create a connected (sender, receiver) pair"""
    if capacity is not None and capacity < 1:
        raise ValueError("capacity must be at least 1")
    queue = _FrameQueue(capacity)
    return FrameSender(queue), FrameReceiver(queue)
