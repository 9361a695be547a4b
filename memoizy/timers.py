import heapq
import itertools
import threading
import time

from loguru import logger


class ExpirationScheduler:
    """
    Runs delayed calls in deadline order on a single daemon thread.

    Independent of any event loop, so a deletion scheduled inside
    `asyncio.run` still fires after the loop is gone. Scheduled calls are
    never cancelled.
    """

    def __init__(self, name: str = "memoizy-expiration"):
        self.name = name
        self._queue = []
        self._counter = itertools.count()
        self._condition = threading.Condition()
        self._worker = None

    def __len__(self):
        with self._condition:
            return len(self._queue)

    def call_later(self, delay: float, callback, *args) -> float:
        """Run `callback(*args)` once, `delay` milliseconds from now. Returns the monotonic deadline."""
        deadline = time.monotonic() + delay / 1000
        with self._condition:
            heapq.heappush(self._queue, (deadline, next(self._counter), callback, args))
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(
                    target=self._run, name=self.name, daemon=True
                )
                self._worker.start()
            self._condition.notify()
        return deadline

    def _run(self):
        while True:
            with self._condition:
                while not self._queue or self._queue[0][0] > time.monotonic():
                    timeout = (
                        self._queue[0][0] - time.monotonic() if self._queue else None
                    )
                    self._condition.wait(timeout)
                _, _, callback, args = heapq.heappop(self._queue)
            try:
                callback(*args)
            except Exception:
                logger.exception(f"scheduled call {callback!r}{args} failed")


scheduler = ExpirationScheduler()
