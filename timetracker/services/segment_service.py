import logging
from datetime import date, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.clock import week_dates
from timetracker.exceptions import OpenSegmentExists, SegmentNotFound
from timetracker.models.day_marker import DayMarker
from timetracker.models.segment import TimeSegment

logger = logging.getLogger(__name__)


def _week_keys(monday: date) -> list[str]:
    return [d.isoformat() for d in week_dates(monday)]


async def list_by_date(db: AsyncSession, day: date) -> list[TimeSegment]:
    result = await db.execute(
        select(TimeSegment)
        .where(TimeSegment.date == day.isoformat())
        .order_by(TimeSegment.id.asc())
    )
    return list(result.scalars().all())


async def list_by_week(db: AsyncSession, monday: date) -> list[TimeSegment]:
    result = await db.execute(
        select(TimeSegment)
        .where(TimeSegment.date.in_(_week_keys(monday)))
        .order_by(TimeSegment.date.asc(), TimeSegment.id.asc())
    )
    return list(result.scalars().all())


async def list_closed(db: AsyncSession) -> list[TimeSegment]:
    result = await db.execute(
        select(TimeSegment)
        .where(TimeSegment.seg_end.is_not(None))
        .order_by(TimeSegment.date.asc(), TimeSegment.id.asc())
    )
    return list(result.scalars().all())


async def get_segment(db: AsyncSession, segment_id: int) -> TimeSegment:
    segment = await db.get(TimeSegment, segment_id)
    if segment is None:
        raise SegmentNotFound(segment_id)
    return segment


async def get_open_segment(db: AsyncSession, day: date) -> TimeSegment | None:
    result = await db.execute(
        select(TimeSegment)
        .where(TimeSegment.date == day.isoformat(), TimeSegment.seg_end.is_(None))
        .order_by(TimeSegment.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_segment(
    db: AsyncSession, day: date, start: str, end: str | None = None
) -> TimeSegment:
    if end is None:
        existing = await get_open_segment(db, day)
        if existing is not None:
            raise OpenSegmentExists(day.isoformat(), existing.id)

    segment = TimeSegment(date=day.isoformat(), seg_start=start, seg_end=end)
    db.add(segment)
    await db.flush()
    await db.refresh(segment)
    logger.debug("Created segment %s on %s at %s", segment.id, segment.date, start)
    return segment


async def update_segment(
    db: AsyncSession,
    segment_id: int,
    start: str | None = None,
    end: str | None = None,
) -> TimeSegment:
    if start is None and end is None:
        raise ValueError("Nothing to update")

    segment = await get_segment(db, segment_id)
    if start is not None:
        segment.seg_start = start
    if end is not None:
        segment.seg_end = end

    await db.flush()
    await db.refresh(segment)
    return segment


async def close_segment(db: AsyncSession, segment_id: int, end: str) -> bool:
    """Set ``seg_end`` on a segment that is still open.

    Returns False when the segment was already closed, so a repeated close
    leaves the first end time in place. Raises SegmentNotFound for an
    unknown id.
    """
    result = await db.execute(
        update(TimeSegment)
        .where(TimeSegment.id == segment_id, TimeSegment.seg_end.is_(None))
        .values(seg_end=end)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount:
        return True

    await get_segment(db, segment_id)
    logger.info("Segment %s already closed, leaving it unchanged", segment_id)
    return False


async def delete_by_week(db: AsyncSession, monday: date) -> int:
    keys = _week_keys(monday)
    result = await db.execute(delete(TimeSegment).where(TimeSegment.date.in_(keys)))
    await db.execute(delete(DayMarker).where(DayMarker.date.in_(keys)))
    await db.flush()
    logger.info("Cleared week of %s (%d segments)", monday.isoformat(), result.rowcount)
    return result.rowcount


async def is_day_ended(db: AsyncSession, day: date) -> bool:
    return await db.get(DayMarker, day.isoformat()) is not None


async def mark_day_ended(db: AsyncSession, day: date, ended_at: datetime) -> None:
    marker = await db.get(DayMarker, day.isoformat())
    if marker is None:
        db.add(DayMarker(date=day.isoformat(), ended_at=ended_at))
    else:
        marker.ended_at = ended_at
    await db.flush()


async def clear_day_ended(db: AsyncSession, day: date) -> None:
    await db.execute(delete(DayMarker).where(DayMarker.date == day.isoformat()))
    await db.flush()
