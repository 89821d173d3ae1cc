import asyncio
import logging
from collections.abc import Callable
from datetime import date

from timetracker.clock import format_elapsed_clock

logger = logging.getLogger(__name__)


class ElapsedTicker:
    """Recomputes the elapsed-time text of a running session on a fixed cadence.

    Each tick reads the wall clock through ``compute_seconds`` and pushes the
    formatted text to every subscriber queue. Cancelling pushes ``None`` so
    subscribers know the session left the running state, including subscribers
    that arrive after the cancel.
    """

    def __init__(self, compute_seconds: Callable[[], int], interval: float = 1.0):
        self.compute_seconds = compute_seconds
        self.interval = interval
        self.latest: str | None = None
        self._task: asyncio.Task | None = None
        self._subscribers: list[asyncio.Queue] = []
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.active:
            return
        self._cancelled = False
        self._task = asyncio.create_task(self._run())

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
            self._task = None
        for queue in self._subscribers:
            queue.put_nowait(None)
        self._subscribers.clear()

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        if self.latest is not None:
            queue.put_nowait(self.latest)
        if self._cancelled:
            queue.put_nowait(None)
            return queue
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def tick(self) -> str:
        self.latest = format_elapsed_clock(self.compute_seconds())
        for queue in self._subscribers:
            queue.put_nowait(self.latest)
        return self.latest

    async def _run(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self.interval)


class TickerRegistry:
    """One ticker per date, alive exactly while that date's session runs."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._tickers: dict[date, ElapsedTicker] = {}

    def get(self, day: date) -> ElapsedTicker | None:
        return self._tickers.get(day)

    def start(self, day: date, compute_seconds: Callable[[], int]) -> ElapsedTicker:
        ticker = self._tickers.get(day)
        if ticker is None:
            ticker = ElapsedTicker(compute_seconds, interval=self.interval)
            self._tickers[day] = ticker
            logger.debug("Started elapsed ticker for %s", day.isoformat())
        else:
            # Closed-segment totals may have changed since the ticker started
            ticker.compute_seconds = compute_seconds
        ticker.start()
        return ticker

    def cancel(self, day: date) -> None:
        ticker = self._tickers.pop(day, None)
        if ticker is not None:
            ticker.cancel()
            logger.debug("Cancelled elapsed ticker for %s", day.isoformat())

    def cancel_except(self, day: date) -> None:
        for other in [d for d in self._tickers if d != day]:
            self.cancel(other)

    def cancel_all(self) -> None:
        for day in list(self._tickers):
            self.cancel(day)
