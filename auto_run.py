"""
Auto-run scheduling for the step engine
The engine never owns a timer; these helpers call step() from outside
"""

import logging
import threading
import time

logger = logging.getLogger(__name__)


class AutoRunner:
    """Calls step() every interval_ms until it returns False or is paused

    timer_factory must behave like threading.Timer: take (seconds, callback),
    and expose start() and cancel(). Only one timer is pending at a time.
    """

    def __init__(self, step, interval_ms=800, timer_factory=threading.Timer,
                 on_stop=None, config=None):
        self.step = step
        self.config = config
        self.interval_ms = self._check(interval_ms)
        self.timer_factory = timer_factory
        self.on_stop = on_stop
        self._timer = None
        self._running = False
        self.lock = threading.RLock()

    def _check(self, interval_ms):
        if self.config is not None:
            return self.config.check_interval(interval_ms)
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        return interval_ms

    @property
    def running(self):
        return self._running

    def _arm(self):
        # Only the most recently armed timer may step
        self._timer = timer = self.timer_factory(
            self.interval_ms / 1000.0, lambda: self._tick(timer)
        )
        timer.daemon = True
        timer.start()

    def _disarm(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def start(self):
        with self.lock:
            if self._running:
                return
            self._running = True
            self._arm()
            logger.debug("Auto-run started at %d ms", self.interval_ms)

    def pause(self):
        with self.lock:
            if not self._running:
                return
            self._running = False
            self._disarm()
            logger.debug("Auto-run paused")

    def toggle(self):
        """Start when paused, pause when running; return the new running flag"""
        with self.lock:
            if self._running:
                self.pause()
            else:
                self.start()
            return self._running

    def set_interval(self, interval_ms):
        """Change the period; a pending tick is cancelled and re-armed"""
        with self.lock:
            self.interval_ms = self._check(interval_ms)
            if self._running:
                self._disarm()
                self._arm()

    def _tick(self, timer):
        with self.lock:
            if not self._running or timer is not self._timer:
                return
            self._timer = None
            more = self.step()
            if more:
                self._arm()
                return
            self._running = False
            logger.debug("Auto-run finished")
        if self.on_stop is not None:
            self.on_stop()


def run_until_done(step, interval_ms=0, sleep=time.sleep, max_steps=None):
    """Blocking loop: call step() until it returns False

    Returns the number of step() calls that reported more work.
    """
    count = 0
    while max_steps is None or count < max_steps:
        if not step():
            break
        count += 1
        if interval_ms:
            sleep(interval_ms / 1000.0)
    return count
