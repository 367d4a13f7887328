"""
Timestamp resolution for tracker samples.

Source times and returned stamps are float seconds.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .base.interfaces import TimestampResolver
from .errors import ConfigurationError

logger = logging.getLogger("time_manager")

TIME_MODES = ["offset", "server", "local"]


class TimeManager(TimestampResolver):
    """
    Resolves tracker-local sample times against the local clock.

    Modes:
    - offset: fit local - source once on the first sample and add it to
      every later source time
    - server: use the source time unchanged
    - local: ignore the source time and stamp with the local clock, held
      at the last returned stamp if the clock steps backwards
    """

    def __init__(self, mode: str = "offset", clock: Optional[Callable[[], float]] = None):
        """
        Args:
            mode: One of TIME_MODES
            clock: Callable returning the local time in seconds (default time.time)
        """
        if mode not in TIME_MODES:
            raise ConfigurationError(f"Unknown time mode: {mode}, expected one of {TIME_MODES}")
        self.mode = mode
        self._clock = clock or time.time
        self._offset: Optional[float] = None
        self._last_local: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def offset(self) -> Optional[float]:
        """Fitted offset in seconds, or None before the first sample."""
        return self._offset

    def resolve_timestamp(self, source_time: float) -> float:
        if self.mode == "server":
            return float(source_time)
        if self.mode == "local":
            with self._lock:
                # Wall clock may step backwards; never go below the last stamp.
                now = self._clock()
                if self._last_local is not None and now < self._last_local:
                    now = self._last_local
                self._last_local = now
            return now

        offset = self._offset
        if offset is None:
            with self._lock:
                if self._offset is None:
                    self._offset = self._clock() - float(source_time)
                    logger.info(f"Fitted tracker time offset: {self._offset:.6f} s")
                offset = self._offset
        return float(source_time) + offset

    def reset(self) -> None:
        """Forget the fitted offset; the next sample fits a new one."""
        with self._lock:
            self._offset = None
            self._last_local = None
