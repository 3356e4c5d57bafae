"""
Background expiry for the data store.

The sweeper owns one daemon thread that sleeps for `interval` seconds and then
asks the store to drop every record older than its `max_age`. Sleeping is done
on a threading.Event so `stop()` wakes the loop immediately instead of waiting
out the interval.
"""
from typing import Optional
import threading
import logging

from memkv.datastore import DataStore

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 24 * 60 * 60  # seconds

class Sweeper:
    def __init__(self, store: DataStore, interval: float = DEFAULT_SWEEP_INTERVAL):
        if interval <= 0:
            raise ValueError("Sweep interval must be a positive number of seconds.")
        self._store = store
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lifecycle_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the sweep thread; no-op if it is already running
        """
        with self._lifecycle_lock:
            if self.is_running:
                return
            # one event per thread; a thread outliving a timed-out stop() keeps its own, already set
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._loop, args=(self._stop_event,),
                                            name="memkv-sweeper", daemon=True)
            self._thread.start()
        logger.info(f"Sweeper started (interval={self.interval}s, max_age={self._store.max_age}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the sweep thread to exit and wait for it
        """
        with self._lifecycle_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            thread.join(timeout)
            self._thread = None
        logger.info("Sweeper stopped")

    def run_once(self) -> int:
        """
        Run a single sweep on the calling thread, return the number of keys removed
        """
        removed = self._store.sweep()
        logger.debug(f"Sweep tick removed {removed} key(s)")
        return removed

    def _loop(self, stop_event: threading.Event) -> None:
        # wait() returns True as soon as stop() sets the event
        while not stop_event.wait(self.interval):
            try:
                self.run_once()
            except Exception as e:
                logger.error(f"Sweep failed: {e}")
