"""Work-session lifecycle: idle -> running -> paused -> stopped.

The session state is never cached between requests. It is rebuilt from
the stored segments of the day (plus the day-ended marker) on every call,
a transition computes the new state together with the store effects it
implies, and ``TrackerService`` executes those effects under a per-date
lock so a double click cannot open two segments for one day.
"""
import asyncio
import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time

from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.clock import now_clock_time, parse_clock_time
from timetracker.exceptions import SegmentNotFound
from timetracker.models.segment import TimeSegment
from timetracker.services import aggregation_service, segment_service
from timetracker.services.ticker import TickerRegistry

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class TrackerAction(str, enum.Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"


@dataclass(frozen=True)
class OpenSegment:
    day: date
    start: str


@dataclass(frozen=True)
class CloseSegment:
    segment_id: int
    end: str


@dataclass(frozen=True)
class MarkDayEnded:
    day: date


@dataclass(frozen=True)
class ClearDayEnded:
    day: date


Effect = OpenSegment | CloseSegment | MarkDayEnded | ClearDayEnded


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    day: date
    open_segment_id: int | None = None
    open_since: datetime | None = None
    segments: tuple[TimeSegment, ...] = field(default=(), compare=False, repr=False)


def reconstruct(
    day: date,
    segments: Sequence[TimeSegment],
    day_ended: bool,
    open_since_hint: datetime | None = None,
) -> SessionState:
    """Derive the session state of ``day`` from its stored segments.

    An open last segment means the session is running since that segment's
    start. Stored starts carry no seconds, so ``:00`` is assumed unless
    ``open_since_hint`` holds a second-precise start for the same minute.
    """
    segments = tuple(segments)
    if not segments:
        return SessionState(SessionStatus.IDLE, day)

    last = segments[-1]
    if last.seg_end is None:
        start_minutes = parse_clock_time(last.seg_start)
        open_since = datetime.combine(day, time(start_minutes // 60, start_minutes % 60))
        if (
            open_since_hint is not None
            and open_since_hint.date() == day
            and open_since_hint.replace(second=0, microsecond=0) == open_since
        ):
            open_since = open_since_hint
        return SessionState(SessionStatus.RUNNING, day, last.id, open_since, segments)

    status = SessionStatus.STOPPED if day_ended else SessionStatus.PAUSED
    return SessionState(status, day, segments=segments)


def transition(
    state: SessionState, action: TrackerAction, now: datetime
) -> tuple[SessionState, list[Effect]]:
    """Apply ``action`` to ``state``.

    Returns the next state and the store effects to perform. Pairs outside
    the transition table leave the state untouched and produce no effects.
    """
    clock = now_clock_time(now)
    status = state.status

    if action is TrackerAction.START and status in (SessionStatus.IDLE, SessionStatus.STOPPED):
        effects: list[Effect] = [OpenSegment(state.day, clock)]
        if status is SessionStatus.STOPPED:
            effects.insert(0, ClearDayEnded(state.day))
        return _opened(state, now), effects

    if action is TrackerAction.RESUME and status is SessionStatus.PAUSED:
        return _opened(state, now), [OpenSegment(state.day, clock)]

    if action is TrackerAction.PAUSE and status is SessionStatus.RUNNING:
        return _closed(state, SessionStatus.PAUSED), [CloseSegment(state.open_segment_id, clock)]

    if action is TrackerAction.STOP and status is SessionStatus.RUNNING:
        return _closed(state, SessionStatus.STOPPED), [
            CloseSegment(state.open_segment_id, clock),
            MarkDayEnded(state.day),
        ]

    if action is TrackerAction.STOP and status is SessionStatus.PAUSED:
        return _closed(state, SessionStatus.STOPPED), [MarkDayEnded(state.day)]

    return state, []


def _opened(state: SessionState, now: datetime) -> SessionState:
    # The new segment's id is assigned by the store
    return replace(state, status=SessionStatus.RUNNING, open_segment_id=None, open_since=now)


def _closed(state: SessionState, status: SessionStatus) -> SessionState:
    return replace(state, status=status, open_segment_id=None, open_since=None)


class TrackerService:
    """Runs session transitions against the segment store.

    Holds only what must outlive a request: the per-date locks, the
    second-precise start of segments opened by this process, and the
    elapsed tickers.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        tickers: TickerRegistry | None = None,
    ):
        self.clock = clock
        self.tickers = tickers or TickerRegistry()
        self._locks: dict[date, asyncio.Lock] = {}
        self._open_since: dict[date, datetime] = {}

    def today(self) -> date:
        return self.clock().date()

    def _lock_for(self, day: date) -> asyncio.Lock:
        lock = self._locks.get(day)
        if lock is None:
            lock = self._locks[day] = asyncio.Lock()
        return lock

    async def load_state(self, db: AsyncSession, day: date | None = None) -> SessionState:
        day = day or self.today()
        segments = await segment_service.list_by_date(db, day)
        day_ended = await segment_service.is_day_ended(db, day)
        return reconstruct(day, segments, day_ended, self._open_since.get(day))

    def elapsed_seconds(self, state: SessionState) -> int:
        closed = aggregation_service.day_total_minutes(state.segments) * 60
        return closed + self.running_seconds(state)

    def running_seconds(self, state: SessionState) -> int:
        if state.status is not SessionStatus.RUNNING:
            return 0
        return aggregation_service.live_seconds(state.open_since, self.clock())

    async def snapshot(self, db: AsyncSession) -> SessionState:
        state = await self.load_state(db)
        self.sync_ticker(state)
        return state

    async def apply(
        self, db: AsyncSession, action: TrackerAction
    ) -> tuple[SessionState, bool]:
        """Perform ``action`` on today's session.

        Returns the refreshed state and whether anything changed.
        """
        now = self.clock()
        day = now.date()

        async with self._lock_for(day):
            state = await self.load_state(db, day)
            _, effects = transition(state, action, now)
            if not effects:
                logger.debug("Ignoring %s while %s", action.value, state.status.value)
                return state, False

            try:
                for effect in effects:
                    await self._perform(db, effect, now)
            except SegmentNotFound as exc:
                logger.warning("%s during %s; reloading state from store", exc, action.value)
            await db.commit()

            state = await self.load_state(db, day)

        logger.info("Session for %s is now %s", day.isoformat(), state.status.value)
        self.sync_ticker(state)
        return state, True

    async def _perform(self, db: AsyncSession, effect: Effect, now: datetime) -> None:
        if isinstance(effect, OpenSegment):
            existing = await segment_service.get_open_segment(db, effect.day)
            if existing is not None:
                logger.info("Segment %s already open on %s", existing.id, effect.day.isoformat())
                return
            await segment_service.create_segment(db, effect.day, effect.start)
            self._open_since[effect.day] = now.replace(microsecond=0)
        elif isinstance(effect, CloseSegment):
            await segment_service.close_segment(db, effect.segment_id, effect.end)
            self._open_since.pop(now.date(), None)
        elif isinstance(effect, MarkDayEnded):
            await segment_service.mark_day_ended(db, effect.day, now)
        elif isinstance(effect, ClearDayEnded):
            await segment_service.clear_day_ended(db, effect.day)

    async def add_segment(
        self, db: AsyncSession, day: date, start: str, end: str | None = None
    ) -> TimeSegment:
        """Store a hand-entered segment under the same lock as the tracker actions."""
        async with self._lock_for(day):
            segment = await segment_service.create_segment(db, day, start, end)
            await db.commit()
        if day == self.today():
            await self.snapshot(db)
        return segment

    async def clear_week(self, db: AsyncSession, monday: date) -> int:
        """Delete a week of segments, resetting today's session if it is in that week."""
        today = self.today()
        async with self._lock_for(today):
            removed = await segment_service.delete_by_week(db, monday)
            await db.commit()
        if 0 <= (today - monday).days < 7:
            self._open_since.pop(today, None)
            self.tickers.cancel(today)
        return removed

    def sync_ticker(self, state: SessionState) -> None:
        self._forget_other_days(state.day)
        if state.status is SessionStatus.RUNNING:
            self.tickers.start(state.day, lambda: self.elapsed_seconds(state))
        else:
            self.tickers.cancel(state.day)

    def _forget_other_days(self, day: date) -> None:
        # Only today's session is ever loaded, so a ticker left over from
        # before midnight would run forever
        self.tickers.cancel_except(day)
        for other in [d for d in self._open_since if d != day]:
            del self._open_since[other]
        for other in [d for d, lock in self._locks.items() if d != day and not lock.locked()]:
            del self._locks[other]
