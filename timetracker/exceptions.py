class InvalidClockFormat(ValueError):
    """Raised when a time-of-day string is neither HH:MM nor h:mm AM/PM."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid time format: {value!r} (expected HH:MM or h:mm AM/PM)")


class SegmentNotFound(LookupError):
    def __init__(self, segment_id: int):
        self.segment_id = segment_id
        super().__init__(f"Segment {segment_id} not found")


class OpenSegmentExists(ValueError):
    """Raised when a date already has a segment without an end time."""

    def __init__(self, day: str, segment_id: int):
        self.day = day
        self.segment_id = segment_id
        super().__init__(f"Segment {segment_id} is still open on {day}")
