from datetime import date, datetime

from pydantic import BaseModel, field_validator

from timetracker.clock import normalize_clock_time


class SegmentCreate(BaseModel):
    date: date
    seg_start: str
    seg_end: str | None = None

    @field_validator("seg_start", "seg_end")
    @classmethod
    def normalize_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_clock_time(value)


class SegmentUpdate(BaseModel):
    seg_start: str | None = None
    seg_end: str | None = None

    @field_validator("seg_start", "seg_end")
    @classmethod
    def normalize_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_clock_time(value)


class SegmentResponse(BaseModel):
    id: int
    date: date
    seg_start: str
    seg_end: str | None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
