from timetracker.models.base import Base
from timetracker.models.day_marker import DayMarker
from timetracker.models.segment import TimeSegment

__all__ = [
    "Base",
    "DayMarker",
    "TimeSegment",
]
