from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.clock import monday_of
from timetracker.database import get_db
from timetracker.dependencies import get_tracker
from timetracker.schemas.segment import SegmentCreate, SegmentResponse, SegmentUpdate
from timetracker.services import segment_service
from timetracker.services.tracker_service import TrackerService

router = APIRouter(prefix="/segments", tags=["segments"])


@router.get("", response_model=list[SegmentResponse])
async def list_segments(
    day: date | None = Query(default=None, alias="date"),
    week: date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    if day is not None:
        return await segment_service.list_by_date(db, day)
    if week is not None:
        return await segment_service.list_by_week(db, monday_of(week))
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Provide ?date= or ?week= parameter",
    )


@router.post("", response_model=SegmentResponse, status_code=201)
async def create_segment(
    data: SegmentCreate,
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    return await tracker.add_segment(db, data.date, data.seg_start, data.seg_end)


@router.patch("/{segment_id}", response_model=SegmentResponse)
async def update_segment(
    segment_id: int,
    data: SegmentUpdate,
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    segment = await segment_service.update_segment(
        db, segment_id, start=data.seg_start, end=data.seg_end
    )
    await db.commit()
    # An edit can close today's open segment
    await tracker.snapshot(db)
    return segment


@router.delete("", status_code=204)
async def delete_week(
    week: date = Query(),
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    await tracker.clear_week(db, monday_of(week))
    return Response(status_code=204)
