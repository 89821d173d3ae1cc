from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.clock import monday_of
from timetracker.database import get_db
from timetracker.dependencies import get_tracker, get_use_12h
from timetracker.schemas.views import DayView, WeekView
from timetracker.services import aggregation_service, segment_service
from timetracker.services.tracker_service import TrackerService

router = APIRouter(tags=["views"])


@router.get("/days/{day}", response_model=DayView)
async def get_day(
    day: date,
    use_12h: bool = Depends(get_use_12h),
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    state = await tracker.snapshot(db)
    segments = await segment_service.list_by_date(db, day)
    return aggregation_service.build_day_view(
        day,
        segments,
        today=state.day,
        running_seconds=tracker.running_seconds(state),
        use_12h=use_12h,
    )


@router.get("/weeks/{day}", response_model=WeekView)
async def get_week(
    day: date,
    db: AsyncSession = Depends(get_db),
    tracker: TrackerService = Depends(get_tracker),
):
    monday = monday_of(day)
    state = await tracker.snapshot(db)
    segments = await segment_service.list_by_week(db, monday)
    return aggregation_service.build_week_view(
        monday,
        segments,
        today=state.day,
        running_seconds=tracker.running_seconds(state),
    )
