"""Event channel and the one-shot timers that feed it.

Everything that happens outside the event loop thread (key presses from the
terminal, expiring feedback timers) reaches the session only by posting an
event into an :class:`EventChannel`. The loop is the channel's sole reader.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Optional

from .events import Event, TimerFired

logger = logging.getLogger(__name__)


class EventChannel:
    """Thread-safe FIFO of events with a blocking :meth:`wait`."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Event]" = queue.Queue()

    def post(self, event: Event) -> None:
        self._queue.put(event)

    def wait(self, timeout: Optional[float] = None) -> Event:
        """Block until the next event arrives.

        Raises :class:`queue.Empty` if ``timeout`` elapses first.
        """
        return self._queue.get(timeout=timeout)

    def pending(self) -> int:
        return self._queue.qsize()


class TimerDispatcher:
    """Arms one-shot timers that post :class:`TimerFired` when they expire.

    Timers run on daemon threads and cannot be cancelled individually; a
    timer firing after the session moved on is ignored by the session's
    transition table. :meth:`close` stops further scheduling at shutdown.
    """

    def __init__(self, channel: EventChannel) -> None:
        self._channel = channel
        self._lock = threading.Lock()
        self._timers: list[threading.Timer] = []
        self._closed = False

    def schedule(self, delay: float) -> None:
        timer = threading.Timer(delay, self._fire)
        timer.daemon = True
        with self._lock:
            if self._closed:
                return
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
            timer.start()
        logger.debug("Feedback timer armed", extra={"delay": delay})

    __call__ = schedule

    def close(self) -> None:
        with self._lock:
            self._closed = True
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    def _fire(self) -> None:
        self._channel.post(TimerFired())
