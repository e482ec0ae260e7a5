from __future__ import annotations
from typing import Callable, Optional, Protocol
import logging
import threading

logger = logging.getLogger(__name__)

TIMER_PRESETS = (60, 90, 120)


class Handle(Protocol):
    def cancel(self) -> None: ...


Ticker = Callable[[Callable[[], None]], Handle]


class Interval:
    """Calls ``callback`` every ``period`` seconds on a daemon thread until cancelled."""

    def __init__(self, period: float, callback: Callable[[], None]):
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(period, callback), daemon=True)
        self._thread.start()

    def _run(self, period: float, callback: Callable[[], None]) -> None:
        while not self._stop.wait(period):
            callback()

    def cancel(self) -> None:
        self._stop.set()


def every_second(callback: Callable[[], None]) -> Interval:
    return Interval(1.0, callback)


def format_time(seconds: int) -> str:
    m, s = divmod(max(seconds, 0), 60)
    return f"{m}:{s:02d}"


class RestTimer:
    """
    Local countdown between sets. Nothing here is persisted; ``cancel()`` must
    be called when the owning execution session goes away.
    """

    def __init__(
        self,
        ticker: Ticker = every_second,
        on_complete: Optional[Callable[[], None]] = None,
        duration: int = TIMER_PRESETS[0],
    ):
        if duration not in TIMER_PRESETS:
            raise ValueError(f"duration must be one of {TIMER_PRESETS}")
        self._ticker = ticker
        self._handle: Optional[Handle] = None
        self._lock = threading.RLock()
        self.on_complete = on_complete
        self.selected = duration
        self.remaining = duration
        self.running = False
        self.rest_complete = False

    @property
    def label(self) -> str:
        return format_time(self.remaining)

    def pick(self, seconds: int) -> None:
        if seconds not in TIMER_PRESETS:
            raise ValueError(f"duration must be one of {TIMER_PRESETS}")
        with self._lock:
            self._stop()
            self.selected = seconds
            self.remaining = seconds
            self.rest_complete = False

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            if self.remaining <= 0:
                self.remaining = self.selected
            self.rest_complete = False
            self.running = True
            self._handle = self._ticker(self.tick)

    def pause(self) -> None:
        with self._lock:
            self._stop()

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        with self._lock:
            self._stop()
            self.remaining = self.selected
            self.rest_complete = False

    def cancel(self) -> None:
        self.pause()

    def tick(self) -> None:
        with self._lock:
            if not self.running:
                return
            if self.remaining > 1:
                self.remaining -= 1
                return
            self.remaining = 0
            self._stop()
            self.rest_complete = True
        logger.debug("rest complete")
        if self.on_complete is not None:
            self.on_complete()

    def _stop(self) -> None:
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
