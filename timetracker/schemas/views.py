from datetime import date

from pydantic import BaseModel

from timetracker.schemas.segment import SegmentResponse


class BreakEntry(BaseModel):
    start: str
    end: str
    duration_minutes: int  # negative when segments were edited out of order
    label: str


class WeekRollup(BaseModel):
    total_minutes: int
    days_worked: int


class DayView(BaseModel):
    date: date
    is_today: bool
    segments: list[SegmentResponse]
    start_time: str | None
    end_time: str | None  # set only once every segment is closed
    breaks: list[BreakEntry]
    total_minutes: int
    total_label: str
    live_seconds: int
    elapsed: str
    out_of_order: bool


class DaySummary(BaseModel):
    date: date
    day_name: str
    worked: bool
    minutes: int
    label: str
    is_today: bool


class WeekView(BaseModel):
    monday: date
    range_label: str
    days: list[DaySummary]
    total_minutes: int
    total_label: str
    days_worked: int
