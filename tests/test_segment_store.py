from datetime import date, datetime

import pytest

from timetracker.exceptions import OpenSegmentExists, SegmentNotFound
from timetracker.services import segment_service

DAY = date(2024, 1, 3)


@pytest.mark.asyncio
async def test_close_segment_only_once(db_session):
    segment = await segment_service.create_segment(db_session, DAY, "09:00")

    assert await segment_service.close_segment(db_session, segment.id, "10:00") is True
    assert await segment_service.close_segment(db_session, segment.id, "11:00") is False

    stored = await segment_service.get_segment(db_session, segment.id)
    assert stored.seg_end == "10:00"


@pytest.mark.asyncio
async def test_close_unknown_segment(db_session):
    with pytest.raises(SegmentNotFound):
        await segment_service.close_segment(db_session, 404, "10:00")


@pytest.mark.asyncio
async def test_update_requires_a_field(db_session):
    segment = await segment_service.create_segment(db_session, DAY, "09:00")
    with pytest.raises(ValueError, match="Nothing to update"):
        await segment_service.update_segment(db_session, segment.id)


@pytest.mark.asyncio
async def test_get_open_segment(db_session):
    assert await segment_service.get_open_segment(db_session, DAY) is None
    await segment_service.create_segment(db_session, DAY, "09:00", "10:00")
    open_segment = await segment_service.create_segment(db_session, DAY, "11:00")

    found = await segment_service.get_open_segment(db_session, DAY)
    assert found.id == open_segment.id


@pytest.mark.asyncio
async def test_create_refuses_second_open_segment(db_session):
    first = await segment_service.create_segment(db_session, DAY, "09:00")
    with pytest.raises(OpenSegmentExists) as exc_info:
        await segment_service.create_segment(db_session, DAY, "10:00")
    assert exc_info.value.segment_id == first.id

    await segment_service.create_segment(db_session, DAY, "07:00", "08:00")
    await segment_service.create_segment(db_session, date(2024, 1, 4), "10:00")
    open_today = [s for s in await segment_service.list_by_date(db_session, DAY) if s.seg_end is None]
    assert len(open_today) == 1


@pytest.mark.asyncio
async def test_list_closed_skips_open_segments(db_session):
    await segment_service.create_segment(db_session, date(2024, 1, 2), "09:00", "10:00")
    await segment_service.create_segment(db_session, DAY, "09:00")

    closed = await segment_service.list_closed(db_session)
    assert [s.date for s in closed] == ["2024-01-02"]


@pytest.mark.asyncio
async def test_day_markers(db_session):
    assert not await segment_service.is_day_ended(db_session, DAY)

    await segment_service.mark_day_ended(db_session, DAY, datetime(2024, 1, 3, 17, 0))
    await segment_service.mark_day_ended(db_session, DAY, datetime(2024, 1, 3, 18, 0))
    assert await segment_service.is_day_ended(db_session, DAY)

    await segment_service.clear_day_ended(db_session, DAY)
    assert not await segment_service.is_day_ended(db_session, DAY)


@pytest.mark.asyncio
async def test_delete_by_week_removes_markers(db_session):
    await segment_service.create_segment(db_session, DAY, "09:00", "10:00")
    await segment_service.mark_day_ended(db_session, DAY, datetime(2024, 1, 3, 10, 0))

    removed = await segment_service.delete_by_week(db_session, date(2024, 1, 1))
    assert removed == 1
    assert await segment_service.list_by_date(db_session, DAY) == []
    assert not await segment_service.is_day_ended(db_session, DAY)
