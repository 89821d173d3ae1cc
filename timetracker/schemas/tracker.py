from datetime import date, datetime

from pydantic import BaseModel

from timetracker.services.tracker_service import SessionStatus


class TrackerStatusResponse(BaseModel):
    status: SessionStatus
    date: date
    open_segment_id: int | None
    open_since: datetime | None
    elapsed_seconds: int
    elapsed: str
    changed: bool = False
